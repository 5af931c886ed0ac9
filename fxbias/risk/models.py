"""Data contracts for market risk sentiment."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


class RiskSignal(str, Enum):
    RISK_ON = "Risk-On"
    RISK_OFF = "Risk-Off"
    NEUTRAL = "Neutral"


class RiskConviction(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    UNCERTAIN = "Uncertain"


@dataclass(frozen=True)
class IndicatorDataPoint:
    date: str
    value: float


@dataclass
class IndicatorAnalysis:
    """Classified state of one market instrument.

    `sma_short`/`sma_long` hold the two moving averages used by trend
    classifiers (20/50 for equities and the carry pair, 10/30 for yields);
    `sma_periods` records which.
    """

    name: str
    role: str
    signal: RiskSignal
    rationale: str
    data: List[IndicatorDataPoint] = field(default_factory=list)
    sma_short: Optional[List[IndicatorDataPoint]] = None
    sma_long: Optional[List[IndicatorDataPoint]] = None
    sma_periods: Optional[List[int]] = None
    levels: Optional[Dict[str, float]] = None
    user_override_signal: Optional[RiskSignal] = None

    @property
    def effective_signal(self) -> RiskSignal:
        return self.user_override_signal or self.signal


@dataclass(frozen=True)
class SentimentSummary:
    on: int = 0
    off: int = 0
    neutral: int = 0


INSTRUMENT_KEYS = ("spx", "vix", "audjpy", "us10y")


@dataclass
class RiskSentimentAnalysis:
    """Four instrument readings plus the aggregated market mood.

    `overall_signal` and `conviction` are the exposed values: the top-level
    user overrides when set, the computed values otherwise. `summary` always
    counts the effective per-instrument signals.
    """

    spx: IndicatorAnalysis  # equity index
    vix: IndicatorAnalysis  # volatility index
    audjpy: IndicatorAnalysis  # carry-trade pair
    us10y: IndicatorAnalysis  # bond yield
    summary: SentimentSummary = field(default_factory=SentimentSummary)
    overall_signal: RiskSignal = RiskSignal.NEUTRAL
    conviction: RiskConviction = RiskConviction.UNCERTAIN
    user_override_signal: Optional[RiskSignal] = None
    user_override_conviction: Optional[RiskConviction] = None

    def instruments(self) -> Dict[str, IndicatorAnalysis]:
        return {key: getattr(self, key) for key in INSTRUMENT_KEYS}
