"""Combine per-indicator scores into a currency's base (sigma) score."""
from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Optional

from fxbias.analysis.models import PMI_INDICATORS, Score
from fxbias.utils.errors import ValidationError
from fxbias.utils.validation import is_number


def _score_value(indicator: str, entry: Score) -> float:
    value = getattr(entry, "score", None)
    if not is_number(value):
        raise ValidationError(f"Score for {indicator!r} is not numeric: {value!r}")
    return float(value)


def pmi_contribution(scores: Mapping[str, Score]) -> float:
    """Average of the two PMI scores, or whichever one exists, or 0."""
    present = [_score_value(name, scores[name]) for name in PMI_INDICATORS if scores.get(name) is not None]
    if not present:
        return 0.0
    return sum(present) / len(present)


def compute_sigma_score(scores: Mapping[str, Score]) -> float:
    """
    Base score for one currency.

    Manufacturing and Services PMI count as a single averaged indicator;
    every other scored indicator is summed as-is. Indicators missing from
    the mapping contribute nothing. The result is not clamped.
    """
    others = sum(
        _score_value(indicator, entry)
        for indicator, entry in scores.items()
        if indicator not in PMI_INDICATORS and entry is not None
    )
    return pmi_contribution(scores) + others


def merge_scores(existing: Optional[Mapping[str, Score]], new: Mapping[str, Score]) -> Dict[str, Score]:
    """Overlay newer scores on existing ones, one entry per indicator."""
    merged: Dict[str, Score] = dict(existing or {})
    merged.update(new)
    return merged


def find_missing_indicators(
    scores: Optional[Mapping[str, Score]], sources: Mapping[str, Iterable[str]]
) -> List[str]:
    """Indicators that have at least one configured source but no score."""
    scores = scores or {}
    return [
        indicator
        for indicator, urls in sources.items()
        if list(urls or []) and scores.get(indicator) is None
    ]
