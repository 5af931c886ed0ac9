"""Directional labels from deviations against the cross-currency median."""
from __future__ import annotations

from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Tuple

from fxbias.analysis.models import AnalysisData, Direction, PairBias
from fxbias.analysis.statistics import median
from fxbias.utils.validation import require_number


VERY_STRONG_THRESHOLD = 8
STRONG_THRESHOLD = 4


def classify_direction(deviation: float) -> Direction:
    """Map a deviation (or pair spread) to a five-level label.

    > 8 Very Bullish, [4, 8] Bullish, (-4, 4) Neutral, [-8, -4] Bearish,
    < -8 Very Bearish.
    """
    d = require_number(deviation, "deviation")
    if d > VERY_STRONG_THRESHOLD:
        return Direction.VERY_BULLISH
    if d >= STRONG_THRESHOLD:
        return Direction.BULLISH
    if d < -VERY_STRONG_THRESHOLD:
        return Direction.VERY_BEARISH
    if d <= -STRONG_THRESHOLD:
        return Direction.BEARISH
    return Direction.NEUTRAL


def median_sigma(analysis_data: AnalysisData) -> Optional[float]:
    """Median base score over currencies that have data; None if none do."""
    return median(ca.sigma_score for ca in analysis_data.values() if ca is not None)


def compute_deviations(analysis_data: AnalysisData) -> Dict[str, float]:
    """Final score minus the median base score, per currency with data."""
    center = median_sigma(analysis_data)
    if center is None:
        return {}
    return {
        code: ca.final_score - center
        for code, ca in analysis_data.items()
        if ca is not None
    }


def recompute_all_directions(analysis_data: AnalysisData) -> AnalysisData:
    """
    Relabel every currency against the median of all base scores.

    Pure: returns a new mapping holding new CurrencyAnalysis objects and
    leaves the input untouched. When no currency has a base score the input
    is returned as-is.
    """
    deviations = compute_deviations(analysis_data)
    if not deviations:
        return analysis_data

    return {
        code: (replace(ca, direction=classify_direction(deviations[code])) if ca is not None else None)
        for code, ca in analysis_data.items()
    }


def compute_pair_bias(base_deviation: float, quote_deviation: float) -> Tuple[float, Direction]:
    """Spread between two deviations and the label it maps to."""
    spread = require_number(base_deviation, "base deviation") - require_number(quote_deviation, "quote deviation")
    return spread, classify_direction(spread)


def build_currency_pairs(analysis_data: AnalysisData, order: Optional[Iterable[str]] = None) -> List[PairBias]:
    """
    Every ordered pair of distinct currencies that both have data.

    Sorted by descending absolute spread; ties keep iteration order (of
    `order` when given, else of the mapping).
    """
    deviations = compute_deviations(analysis_data)
    codes = [c for c in (order if order is not None else analysis_data.keys()) if c in deviations]

    pairs: List[PairBias] = []
    for base in codes:
        for quote in codes:
            if base == quote:
                continue
            spread, bias = compute_pair_bias(deviations[base], deviations[quote])
            pairs.append(PairBias(base=base, quote=quote, spread=spread, bias=bias))

    pairs.sort(key=lambda p: abs(p.spread), reverse=True)
    return pairs
