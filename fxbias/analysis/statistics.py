"""Statistical primitives shared by the scoring and risk engines."""
from __future__ import annotations

from typing import Any, Iterable, List, Optional, Sequence

import numpy as np
import pandas as pd

from fxbias.risk.models import IndicatorDataPoint
from fxbias.utils.errors import ValidationError
from fxbias.utils.validation import is_number


def median(values: Iterable[Any]) -> Optional[float]:
    """
    Median of the numeric entries in values.

    Entries that are None, NaN or not numbers are ignored. Returns None when
    nothing numeric is left, so "no data" never looks like a median of 0.
    """
    valid = sorted(float(v) for v in values if is_number(v))
    if not valid:
        return None
    return float(np.median(valid))


def deviation(value: Optional[float], center: Optional[float]) -> Optional[float]:
    if value is None or center is None:
        return None
    return value - center


def sma(series: Sequence[IndicatorDataPoint], period: int) -> List[IndicatorDataPoint]:
    """
    Simple moving average over an ascending series.

    Each output point is the mean of the `period` raw values ending at that
    point and carries that point's date. Output length is
    len(series) - period + 1; empty when the series is shorter than period.
    """
    if isinstance(period, bool) or not isinstance(period, int) or period < 1:
        raise ValidationError(f"SMA period must be a positive integer, got: {period!r}")
    if period > len(series):
        return []

    values = pd.Series([p.value for p in series], dtype="float64")
    rolled = values.rolling(window=period).mean().iloc[period - 1:]
    return [
        IndicatorDataPoint(date=series[i].date, value=float(v))
        for i, v in zip(range(period - 1, len(series)), rolled)
    ]


def latest_value(series: Sequence[IndicatorDataPoint]) -> Optional[float]:
    return series[-1].value if series else None
