"""Aggregate the four instrument readings into an overall risk sentiment."""
from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Optional, Sequence, Tuple

from fxbias.risk.classifiers import analyze_carry_pair, analyze_trend, analyze_volatility, analyze_yield
from fxbias.risk.models import (
    INSTRUMENT_KEYS,
    IndicatorDataPoint,
    RiskConviction,
    RiskSentimentAnalysis,
    RiskSignal,
    SentimentSummary,
)
from fxbias.utils.errors import ValidationError
from fxbias.utils.logging import get_logger


logger = get_logger(__name__)


def summarize_signals(signals: Iterable[RiskSignal]) -> SentimentSummary:
    signals = list(signals)
    return SentimentSummary(
        on=sum(1 for s in signals if s == RiskSignal.RISK_ON),
        off=sum(1 for s in signals if s == RiskSignal.RISK_OFF),
        neutral=sum(1 for s in signals if s == RiskSignal.NEUTRAL),
    )


def resolve_conviction(summary: SentimentSummary) -> Tuple[RiskSignal, RiskConviction]:
    """Overall signal and conviction from signal counts, first matching rule wins."""
    if summary.on >= 3:
        return RiskSignal.RISK_ON, RiskConviction.HIGH
    if summary.off >= 3:
        return RiskSignal.RISK_OFF, RiskConviction.HIGH
    if summary.on == 2 and summary.off <= 1:
        return RiskSignal.RISK_ON, RiskConviction.MEDIUM
    if summary.off == 2 and summary.on <= 1:
        return RiskSignal.RISK_OFF, RiskConviction.MEDIUM
    return RiskSignal.NEUTRAL, RiskConviction.UNCERTAIN


def aggregate_overall_sentiment(
    signals: Sequence[RiskSignal],
) -> Tuple[SentimentSummary, RiskSignal, RiskConviction]:
    summary = summarize_signals(signals)
    signal, conviction = resolve_conviction(summary)
    return summary, signal, conviction


def recalculate_overall_sentiment(analysis: Optional[RiskSentimentAnalysis]) -> Optional[RiskSentimentAnalysis]:
    """
    Re-derive summary, overall signal and conviction.

    Per-instrument overrides replace computed signals before counting; the
    top-level overrides replace the computed overall signal and conviction
    but never the summary counts.
    """
    if analysis is None:
        return None

    effective = [ia.effective_signal for ia in analysis.instruments().values()]
    summary, signal, conviction = aggregate_overall_sentiment(effective)

    return replace(
        analysis,
        summary=summary,
        overall_signal=analysis.user_override_signal or signal,
        conviction=analysis.user_override_conviction or conviction,
    )


def set_indicator_override(
    analysis: RiskSentimentAnalysis, key: str, override: Optional[RiskSignal]
) -> RiskSentimentAnalysis:
    """Set (or clear with None) the manual signal for one instrument."""
    if key not in INSTRUMENT_KEYS:
        raise ValidationError(f"Unknown risk instrument: {key!r}. Must be one of {list(INSTRUMENT_KEYS)}")
    instrument = replace(getattr(analysis, key), user_override_signal=override)
    return recalculate_overall_sentiment(replace(analysis, **{key: instrument}))


def set_overall_override(
    analysis: RiskSentimentAnalysis,
    signal: Optional[RiskSignal],
    conviction: Optional[RiskConviction],
) -> RiskSentimentAnalysis:
    """Set (or clear with None) the top-level signal and conviction overrides."""
    return recalculate_overall_sentiment(
        replace(analysis, user_override_signal=signal, user_override_conviction=conviction)
    )


def build_risk_sentiment(
    spx: Sequence[IndicatorDataPoint],
    vix: Sequence[IndicatorDataPoint],
    audjpy: Sequence[IndicatorDataPoint],
    us10y: Sequence[IndicatorDataPoint],
    previous: Optional[RiskSentimentAnalysis] = None,
) -> RiskSentimentAnalysis:
    """Classify the four instrument series; overrides from `previous` survive a refresh."""
    analysis = RiskSentimentAnalysis(
        spx=analyze_trend(spx),
        vix=analyze_volatility(vix),
        audjpy=analyze_carry_pair(audjpy),
        us10y=analyze_yield(us10y),
    )

    if previous is not None:
        carried = {
            key: replace(getattr(analysis, key), user_override_signal=getattr(previous, key).user_override_signal)
            for key in INSTRUMENT_KEYS
        }
        analysis = replace(
            analysis,
            user_override_signal=previous.user_override_signal,
            user_override_conviction=previous.user_override_conviction,
            **carried,
        )

    result = recalculate_overall_sentiment(analysis)
    logger.info(
        "Risk sentiment computed",
        extra={
            "overall_signal": result.overall_signal.value,
            "conviction": result.conviction.value,
            "summary": vars(result.summary),
        },
    )
    return result
