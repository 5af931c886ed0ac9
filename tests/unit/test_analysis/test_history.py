import math

import pytest

from fxbias.analysis.history import history_frame, save_snapshot, today_iso
from fxbias.analysis.models import CurrencyAnalysis, HistoricalSnapshot, Score
from fxbias.utils.errors import ValidationError


def _ca(sigma, **scores):
    return CurrencyAnalysis(
        scores={name.replace("_", " "): Score(score=v, rationale="") for name, v in scores.items()},
        sigma_score=sigma,
    )


def test_save_snapshot_defaults_to_today():
    history = save_snapshot([], {"USD": _ca(1.0)})
    assert history[0].date == today_iso()


def test_save_snapshot_rejects_bad_dates():
    with pytest.raises(ValidationError):
        save_snapshot([], {}, "2024-13-40")
    with pytest.raises(ValidationError):
        save_snapshot([], {}, "yesterday")


def test_save_snapshot_does_not_mutate_history():
    original = [HistoricalSnapshot(date="2024-01-01", data={})]
    updated = save_snapshot(original, {"USD": _ca(1.0)}, "2024-01-01")
    assert original[0].data == {}
    assert updated[0].data["USD"].sigma_score == 1.0


def test_history_frame_columns_and_values():
    history = [
        HistoricalSnapshot(
            date="2024-01-02",
            data={"USD": _ca(4.0, CPI=2), "EUR": _ca(0.0, CPI=0), "JPY": _ca(-2.0)},
        ),
        HistoricalSnapshot(date="2024-01-01", data={"EUR": _ca(1.0), "JPY": _ca(3.0)}),
    ]
    frame = history_frame(history, "USD", ["CPI"])

    assert list(frame.columns) == ["Sigma Score", "Median Score", "Deviation", "CPI"]
    assert list(frame.index) == ["2024-01-01", "2024-01-02"]

    day2 = frame.loc["2024-01-02"]
    assert day2["Sigma Score"] == 4.0
    assert day2["Median Score"] == 0.0
    assert day2["Deviation"] == 4.0
    assert day2["CPI"] == 2.0

    day1 = frame.loc["2024-01-01"]
    assert math.isnan(day1["Sigma Score"])
    assert day1["Median Score"] == 2.0
    assert math.isnan(day1["Deviation"])
    assert math.isnan(day1["CPI"])


def test_history_frame_empty():
    frame = history_frame([], "USD")
    assert frame.empty
    assert list(frame.columns) == ["Sigma Score", "Median Score", "Deviation"]
