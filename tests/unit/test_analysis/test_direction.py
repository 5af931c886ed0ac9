import pytest

from fxbias.analysis.direction import (
    build_currency_pairs,
    classify_direction,
    compute_deviations,
    compute_pair_bias,
    median_sigma,
    recompute_all_directions,
)
from fxbias.analysis.models import CurrencyAnalysis, Direction
from fxbias.utils.errors import ValidationError


@pytest.mark.parametrize(
    "value,expected",
    [
        (8.01, Direction.VERY_BULLISH),
        (8, Direction.BULLISH),
        (4, Direction.BULLISH),
        (3.99, Direction.NEUTRAL),
        (0, Direction.NEUTRAL),
        (-3.99, Direction.NEUTRAL),
        (-4, Direction.BEARISH),
        (-8, Direction.BEARISH),
        (-8.01, Direction.VERY_BEARISH),
    ],
)
def test_classify_direction_boundaries(value, expected):
    assert classify_direction(value) == expected


def test_classify_direction_rejects_non_numbers():
    with pytest.raises(ValidationError):
        classify_direction("4")


def test_deviation_uses_final_score_against_median_sigma():
    data = {
        "USD": CurrencyAnalysis(sigma_score=0.0, event_modifier_score=1, risk_modifier=0),
        "EUR": CurrencyAnalysis(sigma_score=0.0),
        "JPY": CurrencyAnalysis(sigma_score=-6.0, risk_modifier=-2),
        "GBP": None,
    }
    assert median_sigma(data) == 0.0
    assert compute_deviations(data) == {"USD": 1.0, "EUR": 0.0, "JPY": -8.0}


def test_recompute_all_directions_is_pure():
    data = {
        "USD": CurrencyAnalysis(sigma_score=10.0),
        "EUR": CurrencyAnalysis(sigma_score=0.0),
        "JPY": CurrencyAnalysis(sigma_score=-3.0),
    }
    result = recompute_all_directions(data)

    assert result["USD"].direction == Direction.VERY_BULLISH
    assert result["EUR"].direction == Direction.NEUTRAL
    assert result["JPY"].direction == Direction.NEUTRAL
    assert data["USD"].direction == Direction.NEUTRAL
    assert recompute_all_directions(result) == result


def test_recompute_all_directions_without_data_is_noop():
    data = {"USD": None}
    assert recompute_all_directions(data) is data
    assert recompute_all_directions({}) == {}


def test_compute_pair_bias():
    assert compute_pair_bias(6.5, -6.5) == (13.0, Direction.VERY_BULLISH)
    assert compute_pair_bias(-2.0, 2.0) == (-4.0, Direction.BEARISH)


def test_currency_pairs_are_antisymmetric_and_sorted():
    data = {
        "USD": CurrencyAnalysis(sigma_score=10.0),
        "JPY": CurrencyAnalysis(sigma_score=-3.0),
        "EUR": CurrencyAnalysis(sigma_score=3.5),
        "CHF": None,
    }
    pairs = build_currency_pairs(data)
    by_name = {p.name: p for p in pairs}

    assert len(pairs) == 6
    assert by_name["USD/JPY"].spread == 13.0
    assert by_name["USD/JPY"].bias == Direction.VERY_BULLISH
    assert by_name["JPY/USD"].spread == -13.0
    assert by_name["JPY/USD"].bias == Direction.VERY_BEARISH
    assert all("CHF" not in p.name for p in pairs)

    spreads = [abs(p.spread) for p in pairs]
    assert spreads == sorted(spreads, reverse=True)


def test_currency_pairs_ties_keep_order():
    data = {
        "EUR": CurrencyAnalysis(sigma_score=0.0),
        "USD": CurrencyAnalysis(sigma_score=0.0),
    }
    assert [p.name for p in build_currency_pairs(data)] == ["EUR/USD", "USD/EUR"]
    assert [p.name for p in build_currency_pairs(data, order=["USD", "EUR"])] == ["USD/EUR", "EUR/USD"]


def test_currency_pairs_need_two_currencies():
    assert build_currency_pairs({"USD": CurrencyAnalysis(sigma_score=1.0)}) == []
