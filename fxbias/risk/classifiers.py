"""Per-instrument Risk-On / Risk-Off classification."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Sequence

from fxbias.analysis.statistics import latest_value, sma
from fxbias.risk.models import IndicatorAnalysis, IndicatorDataPoint, RiskSignal


VIX_LEVELS = {"low": 20.0, "high": 25.0}


@dataclass(frozen=True)
class InstrumentSpec:
    name: str
    role: str


SPX = InstrumentSpec("S&P 500 Index", "The Market Trend")
VIX = InstrumentSpec("VIX Index", "The Fear Gauge")
AUDJPY = InstrumentSpec("AUD/JPY", "The Risk Barometer")
US10Y = InstrumentSpec("US 10-Year Yield", "The Economic Outlook")


def _stacked(value: Optional[float], fast: Optional[float], slow: Optional[float]) -> Optional[int]:
    """+1 when value > fast > slow, -1 when value < fast < slow, else 0; None if any is missing."""
    if value is None or fast is None or slow is None:
        return None
    if value > fast and fast > slow:
        return 1
    if value < fast and fast < slow:
        return -1
    return 0


def analyze_trend(
    data: Sequence[IndicatorDataPoint],
    spec: InstrumentSpec = SPX,
    subject: str = "Price",
    short_period: int = 20,
    long_period: int = 50,
) -> IndicatorAnalysis:
    """Trend-following read for an equity index or carry pair.

    Needs at least `long_period` points; with less the long SMA is empty and
    the reading is Neutral.
    """
    data = list(data)
    sma_short = sma(data, short_period)
    sma_long = sma(data, long_period)

    trend = _stacked(latest_value(data), latest_value(sma_short), latest_value(sma_long))
    if trend == 1:
        signal = RiskSignal.RISK_ON
        rationale = f"{subject} > {short_period} SMA, and {short_period} SMA > {long_period} SMA."
    elif trend == -1:
        signal = RiskSignal.RISK_OFF
        rationale = f"{subject} < {short_period} SMA, and {short_period} SMA < {long_period} SMA."
    else:
        signal = RiskSignal.NEUTRAL
        rationale = "Conditions for a clear trend are not met."

    return IndicatorAnalysis(
        name=spec.name,
        role=spec.role,
        signal=signal,
        rationale=rationale,
        data=data,
        sma_short=sma_short,
        sma_long=sma_long,
        sma_periods=[short_period, long_period],
    )


def analyze_carry_pair(data: Sequence[IndicatorDataPoint]) -> IndicatorAnalysis:
    return analyze_trend(data, spec=AUDJPY, subject="AUD/JPY")


def analyze_volatility(
    data: Sequence[IndicatorDataPoint],
    levels: Optional[Dict[str, float]] = None,
    spec: InstrumentSpec = VIX,
) -> IndicatorAnalysis:
    """Threshold read of the fear gauge: calm below `low`, stressed above `high`."""
    data = list(data)
    levels = dict(levels or VIX_LEVELS)
    low, high = levels["low"], levels["high"]
    value = latest_value(data)

    if value is not None and value < low:
        signal = RiskSignal.RISK_ON
        rationale = f"VIX is below the key level of {low:g}."
    elif value is not None and value > high:
        signal = RiskSignal.RISK_OFF
        rationale = f"VIX is above the key level of {high:g}."
    else:
        signal = RiskSignal.NEUTRAL
        rationale = f"VIX is between {low:g} and {high:g}."
        if value is None:
            rationale = "No VIX data available."

    return IndicatorAnalysis(
        name=spec.name,
        role=spec.role,
        signal=signal,
        rationale=rationale,
        data=data,
        levels=levels,
    )


def analyze_yield(
    data: Sequence[IndicatorDataPoint],
    spec: InstrumentSpec = US10Y,
    short_period: int = 10,
    long_period: int = 30,
) -> IndicatorAnalysis:
    """Rising yields read as risk appetite, falling yields as flight to safety."""
    data = list(data)
    sma_short = sma(data, short_period)
    sma_long = sma(data, long_period)

    trend = _stacked(latest_value(data), latest_value(sma_short), latest_value(sma_long))
    if trend == 1:
        signal = RiskSignal.RISK_ON
        rationale = "Yield is in a clear uptrend (rising)."
    elif trend == -1:
        signal = RiskSignal.RISK_OFF
        rationale = "Yield is in a clear downtrend (falling)."
    else:
        signal = RiskSignal.NEUTRAL
        rationale = "Yield is moving sideways or trend is unclear."

    return IndicatorAnalysis(
        name=spec.name,
        role=spec.role,
        signal=signal,
        rationale=rationale,
        data=data,
        sma_short=sma_short,
        sma_long=sma_long,
        sma_periods=[short_period, long_period],
    )
