import pytest

from fxbias.analysis.models import CurrencyAnalysis, Direction, EconomicRecap
from fxbias.analysis.modifiers import (
    apply_event_modifier,
    apply_recap,
    apply_risk_modifier,
    risk_modifier_for,
    set_event_modifier_rationale,
)
from fxbias.risk.models import RiskConviction, RiskSignal
from fxbias.utils.errors import ValidationError


ON, OFF, NEUTRAL = RiskSignal.RISK_ON, RiskSignal.RISK_OFF, RiskSignal.NEUTRAL
HIGH, MEDIUM, UNCERTAIN = RiskConviction.HIGH, RiskConviction.MEDIUM, RiskConviction.UNCERTAIN


@pytest.mark.parametrize(
    "currency,signal,conviction,expected",
    [
        ("AUD", ON, HIGH, 2),
        ("NZD", ON, MEDIUM, 1),
        ("JPY", ON, HIGH, -2),
        ("CHF", OFF, MEDIUM, 1),
        ("CAD", OFF, HIGH, -2),
        ("EUR", ON, HIGH, 0),
        ("USD", OFF, HIGH, 0),
        ("AUD", NEUTRAL, HIGH, 0),
        ("AUD", ON, UNCERTAIN, 0),
        ("AUD", None, None, 0),
    ],
)
def test_risk_modifier_for(currency, signal, conviction, expected):
    assert risk_modifier_for(currency, signal, conviction) == expected


def test_risk_modifier_disabled():
    assert risk_modifier_for("AUD", ON, HIGH, enabled=False) == 0


def test_apply_risk_modifier_sets_values_and_directions():
    data = {
        "AUD": CurrencyAnalysis(sigma_score=0.0),
        "JPY": CurrencyAnalysis(sigma_score=0.0),
        "EUR": CurrencyAnalysis(sigma_score=0.0),
        "USD": None,
    }
    result = apply_risk_modifier(data, ON, HIGH)

    assert result["AUD"].risk_modifier == 2
    assert result["JPY"].risk_modifier == -2
    assert result["EUR"].risk_modifier == 0
    assert result["USD"] is None
    assert result["AUD"].final_score == 2.0


def test_apply_risk_modifier_unchanged_returns_input():
    data = {"EUR": CurrencyAnalysis(sigma_score=1.0)}
    assert apply_risk_modifier(data, ON, HIGH) is data


def test_apply_risk_modifier_resets_when_disabled():
    data = {"AUD": CurrencyAnalysis(risk_modifier=2), "EUR": CurrencyAnalysis()}
    result = apply_risk_modifier(data, ON, HIGH, enabled=False)
    assert result["AUD"].risk_modifier == 0


def test_event_modifier_validation():
    data = {"USD": CurrencyAnalysis()}
    with pytest.raises(ValidationError):
        apply_event_modifier(data, "USD", 2)


def test_event_modifier_updates_direction():
    data = {
        "USD": CurrencyAnalysis(sigma_score=4.0),
        "EUR": CurrencyAnalysis(sigma_score=0.0),
        "JPY": CurrencyAnalysis(sigma_score=-4.0),
    }
    result = apply_event_modifier(data, "EUR", 1)
    assert result["EUR"].event_modifier_score == 1
    assert result["USD"].direction == Direction.BULLISH
    assert result["JPY"].direction == Direction.BEARISH


def test_event_modifier_rationale_cleared_at_recommendation():
    recap = EconomicRecap(score_modifier=1, bias="Hawkish")
    data = {"USD": CurrencyAnalysis(recap=recap, event_modifier_score=0, event_modifier_rationale="Manual call")}

    kept = apply_event_modifier(data, "USD", -1)
    assert kept["USD"].event_modifier_rationale == "Manual call"

    cleared = apply_event_modifier(data, "USD", 1)
    assert cleared["USD"].event_modifier_score == 1
    assert cleared["USD"].event_modifier_rationale is None


def test_event_modifier_rationale_cleared_at_zero_without_recap():
    data = {"USD": CurrencyAnalysis(event_modifier_score=1, event_modifier_rationale="Manual call")}
    result = apply_event_modifier(data, "USD", 0)
    assert result["USD"].event_modifier_rationale is None


def test_event_modifier_unknown_currency_is_ignored():
    data = {"USD": CurrencyAnalysis(sigma_score=1.0)}
    result = apply_event_modifier(data, "EUR", 1)
    assert "EUR" not in result


def test_set_event_modifier_rationale():
    data = {"USD": CurrencyAnalysis()}
    assert set_event_modifier_rationale(data, "USD", "FOMC")["USD"].event_modifier_rationale == "FOMC"
    assert set_event_modifier_rationale(data, "USD", "")["USD"].event_modifier_rationale is None
    assert set_event_modifier_rationale(data, "EUR", "x") is data


def test_apply_recap_uses_recommendation():
    data = {"USD": CurrencyAnalysis(), "EUR": CurrencyAnalysis()}
    recap = EconomicRecap(score_modifier=-1, bias="Dovish")

    result = apply_recap(data, "USD", recap)
    assert result["USD"].recap is recap
    assert result["USD"].event_modifier_score == -1

    disabled = apply_recap(data, "USD", recap, use_score_modifier=False)
    assert disabled["USD"].event_modifier_score == 0


def test_apply_recap_zero_keeps_existing_modifier():
    data = {"USD": CurrencyAnalysis(event_modifier_score=1)}
    result = apply_recap(data, "USD", EconomicRecap(score_modifier=0, bias="Neutral"))
    assert result["USD"].event_modifier_score == 1


def test_recap_rejects_invalid_modifier():
    with pytest.raises(ValidationError):
        EconomicRecap(score_modifier=2, bias="Hawkish")
