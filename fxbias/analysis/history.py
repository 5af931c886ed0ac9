"""Daily snapshots of the analysis and the time series derived from them."""
from __future__ import annotations

from datetime import date as date_cls, datetime, timezone
from typing import Iterable, List, Optional

import pandas as pd

from fxbias.analysis.models import AnalysisData, HistoricalData, HistoricalSnapshot
from fxbias.analysis.statistics import deviation, median
from fxbias.utils.errors import ValidationError


SIGMA_COLUMN = "Sigma Score"
MEDIAN_COLUMN = "Median Score"
DEVIATION_COLUMN = "Deviation"


def today_iso() -> str:
    return datetime.now(timezone.utc).date().isoformat()


def save_snapshot(history: HistoricalData, data: AnalysisData, day: Optional[str] = None) -> HistoricalData:
    """Record `data` for `day` (default today, UTC); a same-day snapshot is replaced in place."""
    day = day or today_iso()
    try:
        date_cls.fromisoformat(day)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Snapshot date must be YYYY-MM-DD, got: {day!r}") from e
    snapshot = HistoricalSnapshot(date=day, data=dict(data))

    updated = list(history)
    for i, existing in enumerate(updated):
        if existing.date == day:
            updated[i] = snapshot
            return updated
    updated.append(snapshot)
    return updated


def history_frame(
    history: HistoricalData,
    currency: str,
    indicators: Optional[Iterable[str]] = None,
) -> pd.DataFrame:
    """
    Per-date metrics for one currency.

    Columns: Sigma Score, Median Score (over all currencies that day),
    Deviation, then one column per requested indicator score. Missing values
    are NaN.
    """
    indicators = list(indicators or [])
    rows: List[dict] = []
    for snapshot in history:
        center = median(ca.sigma_score for ca in snapshot.data.values() if ca is not None)
        ca = snapshot.data.get(currency)
        sigma = ca.sigma_score if ca is not None else None
        row = {
            "date": snapshot.date,
            SIGMA_COLUMN: sigma,
            MEDIAN_COLUMN: center,
            DEVIATION_COLUMN: deviation(sigma, center),
        }
        for indicator in indicators:
            score = ca.scores.get(indicator) if ca is not None else None
            row[indicator] = score.score if score is not None else None
        rows.append(row)

    columns = ["date", SIGMA_COLUMN, MEDIAN_COLUMN, DEVIATION_COLUMN, *indicators]
    frame = pd.DataFrame(rows, columns=columns)
    frame[columns[1:]] = frame[columns[1:]].astype("float64")
    return frame.set_index("date").sort_index()
