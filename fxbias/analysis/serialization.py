"""Plain-JSON representations of the engine's data structures.

Optional fields holding None are left out when writing and may be absent
when reading. Reading validates through the model constructors, so a
corrupted score fails loudly instead of being coerced.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from fxbias.analysis.models import (
    AnalysisData,
    CurrencyAnalysis,
    DataPoint,
    Direction,
    EconomicRecap,
    EventFlag,
    EventModifier,
    HistoricalData,
    HistoricalSnapshot,
    RecapSource,
    Score,
)
from fxbias.analysis.store import EngineState
from fxbias.risk.models import (
    INSTRUMENT_KEYS,
    IndicatorAnalysis,
    IndicatorDataPoint,
    RiskConviction,
    RiskSentimentAnalysis,
    RiskSignal,
    SentimentSummary,
)
from fxbias.utils.errors import ValidationError
from fxbias.utils.validation import require_integer, validate_event_modifier


def _compact(d: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in d.items() if v is not None}


def _enum(enum_cls, value):
    if value is None:
        return None
    try:
        return enum_cls(value)
    except ValueError as e:
        raise ValidationError(f"Invalid {enum_cls.__name__}: {value!r}") from e


# ---- scores / recaps ----
def score_to_dict(score: Score) -> Dict[str, Any]:
    return _compact({"score": score.score, "rationale": score.rationale, "raw_data": score.raw_data})


def score_from_dict(d: Dict[str, Any]) -> Score:
    return Score(score=d["score"], rationale=d.get("rationale", ""), raw_data=d.get("raw_data"))


def recap_to_dict(recap: EconomicRecap) -> Dict[str, Any]:
    return {
        "score_modifier": recap.score_modifier,
        "bias": recap.bias,
        "narrative_reasoning": recap.narrative_reasoning,
        "raw_data": {
            k: [{"name": p.name, "value": p.value} for p in points] for k, points in recap.raw_data.items()
        },
        "event_modifiers": [
            _compact({
                "heading": e.heading,
                "flag": e.flag.value,
                "description": e.description,
                "date": e.date,
                "id": e.id,
            })
            for e in recap.event_modifiers
        ],
        "modifier_recommendation": recap.modifier_recommendation,
        "sources": [{"name": s.name, "url": s.url} for s in recap.sources],
    }


def recap_from_dict(d: Dict[str, Any]) -> EconomicRecap:
    return EconomicRecap(
        score_modifier=d["score_modifier"],
        bias=d.get("bias", ""),
        narrative_reasoning=d.get("narrative_reasoning", ""),
        raw_data={
            k: [DataPoint(name=p["name"], value=p["value"]) for p in points]
            for k, points in (d.get("raw_data") or {}).items()
        },
        event_modifiers=[
            EventModifier(
                heading=e["heading"],
                flag=_enum(EventFlag, e["flag"]),
                description=e.get("description", ""),
                date=e.get("date"),
                id=e.get("id"),
            )
            for e in d.get("event_modifiers") or []
        ],
        modifier_recommendation=d.get("modifier_recommendation", ""),
        sources=[RecapSource(name=s["name"], url=s["url"]) for s in d.get("sources") or []],
    )


# ---- currency analysis ----
def currency_analysis_to_dict(ca: CurrencyAnalysis) -> Dict[str, Any]:
    return _compact({
        "scores": {indicator: score_to_dict(s) for indicator, s in ca.scores.items()},
        "sigma_score": ca.sigma_score,
        "direction": ca.direction.value,
        "event_modifier_score": ca.event_modifier_score,
        "event_modifier_rationale": ca.event_modifier_rationale,
        "risk_modifier": ca.risk_modifier,
        "recap": recap_to_dict(ca.recap) if ca.recap is not None else None,
    })


def currency_analysis_from_dict(d: Dict[str, Any]) -> CurrencyAnalysis:
    recap = d.get("recap")
    return CurrencyAnalysis(
        scores={indicator: score_from_dict(s) for indicator, s in (d.get("scores") or {}).items()},
        sigma_score=float(d.get("sigma_score", 0.0)),
        direction=_enum(Direction, d.get("direction", Direction.NEUTRAL.value)),
        event_modifier_score=validate_event_modifier(d.get("event_modifier_score", 0)),
        event_modifier_rationale=d.get("event_modifier_rationale"),
        risk_modifier=require_integer(d.get("risk_modifier", 0), "risk modifier"),
        recap=recap_from_dict(recap) if recap is not None else None,
    )


def analysis_data_to_dict(data: AnalysisData) -> Dict[str, Any]:
    return {code: currency_analysis_to_dict(ca) for code, ca in data.items() if ca is not None}


def analysis_data_from_dict(d: Optional[Dict[str, Any]]) -> AnalysisData:
    return {code: currency_analysis_from_dict(ca) for code, ca in (d or {}).items() if ca is not None}


def historical_data_to_list(history: HistoricalData) -> List[Dict[str, Any]]:
    return [{"date": s.date, "data": analysis_data_to_dict(s.data)} for s in history]


def historical_data_from_list(items: Optional[List[Dict[str, Any]]]) -> HistoricalData:
    return [HistoricalSnapshot(date=s["date"], data=analysis_data_from_dict(s.get("data"))) for s in items or []]


# ---- risk sentiment ----
def _series_to_list(series: Optional[List[IndicatorDataPoint]]) -> Optional[List[Dict[str, Any]]]:
    if series is None:
        return None
    return [{"date": p.date, "value": p.value} for p in series]


def _series_from_list(items: Optional[List[Dict[str, Any]]]) -> Optional[List[IndicatorDataPoint]]:
    if items is None:
        return None
    return [IndicatorDataPoint(date=p["date"], value=float(p["value"])) for p in items]


def indicator_analysis_to_dict(ia: IndicatorAnalysis) -> Dict[str, Any]:
    return _compact({
        "name": ia.name,
        "role": ia.role,
        "signal": ia.signal.value,
        "rationale": ia.rationale,
        "data": _series_to_list(ia.data),
        "sma_short": _series_to_list(ia.sma_short),
        "sma_long": _series_to_list(ia.sma_long),
        "sma_periods": list(ia.sma_periods) if ia.sma_periods is not None else None,
        "levels": dict(ia.levels) if ia.levels is not None else None,
        "user_override_signal": ia.user_override_signal.value if ia.user_override_signal else None,
    })


def indicator_analysis_from_dict(d: Dict[str, Any]) -> IndicatorAnalysis:
    levels = d.get("levels")
    return IndicatorAnalysis(
        name=d["name"],
        role=d.get("role", ""),
        signal=_enum(RiskSignal, d["signal"]),
        rationale=d.get("rationale", ""),
        data=_series_from_list(d.get("data")) or [],
        sma_short=_series_from_list(d.get("sma_short")),
        sma_long=_series_from_list(d.get("sma_long")),
        sma_periods=list(d["sma_periods"]) if d.get("sma_periods") is not None else None,
        levels={k: float(v) for k, v in levels.items()} if levels is not None else None,
        user_override_signal=_enum(RiskSignal, d.get("user_override_signal")),
    )


def risk_sentiment_to_dict(rs: Optional[RiskSentimentAnalysis]) -> Optional[Dict[str, Any]]:
    if rs is None:
        return None
    d: Dict[str, Any] = {key: indicator_analysis_to_dict(getattr(rs, key)) for key in INSTRUMENT_KEYS}
    d.update(_compact({
        "summary": {"on": rs.summary.on, "off": rs.summary.off, "neutral": rs.summary.neutral},
        "overall_signal": rs.overall_signal.value,
        "conviction": rs.conviction.value,
        "user_override_signal": rs.user_override_signal.value if rs.user_override_signal else None,
        "user_override_conviction": rs.user_override_conviction.value if rs.user_override_conviction else None,
    }))
    return d


def risk_sentiment_from_dict(d: Optional[Dict[str, Any]]) -> Optional[RiskSentimentAnalysis]:
    if d is None:
        return None
    summary = d.get("summary") or {}
    return RiskSentimentAnalysis(
        **{key: indicator_analysis_from_dict(d[key]) for key in INSTRUMENT_KEYS},
        summary=SentimentSummary(
            on=int(summary.get("on", 0)),
            off=int(summary.get("off", 0)),
            neutral=int(summary.get("neutral", 0)),
        ),
        overall_signal=_enum(RiskSignal, d.get("overall_signal", RiskSignal.NEUTRAL.value)),
        conviction=_enum(RiskConviction, d.get("conviction", RiskConviction.UNCERTAIN.value)),
        user_override_signal=_enum(RiskSignal, d.get("user_override_signal")),
        user_override_conviction=_enum(RiskConviction, d.get("user_override_conviction")),
    )


# ---- full state ----
def engine_state_to_dict(state: EngineState, history: Optional[HistoricalData] = None) -> Dict[str, Any]:
    return _compact({
        "analysis_data": analysis_data_to_dict(state.analysis_data),
        "historical_data": historical_data_to_list(history or []),
        "risk_sentiment": risk_sentiment_to_dict(state.risk_sentiment),
        "use_score_modifier": state.use_score_modifier,
        "use_risk_modifier": state.use_risk_modifier,
    })


def engine_state_from_dict(d: Dict[str, Any]) -> tuple[EngineState, HistoricalData]:
    state = EngineState(
        analysis_data=analysis_data_from_dict(d.get("analysis_data")),
        risk_sentiment=risk_sentiment_from_dict(d.get("risk_sentiment")),
        use_score_modifier=bool(d.get("use_score_modifier", True)),
        use_risk_modifier=bool(d.get("use_risk_modifier", True)),
    )
    return state, historical_data_from_list(d.get("historical_data"))
