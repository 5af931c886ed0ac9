"""Data contracts for per-currency indicator analysis."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from fxbias.utils.validation import validate_event_modifier, validate_score


MANUFACTURING_PMI = "Manufacturing PMI"
SERVICES_PMI = "Services PMI"
PMI_INDICATORS = (MANUFACTURING_PMI, SERVICES_PMI)


class Direction(str, Enum):
    VERY_BULLISH = "Very Bullish"
    BULLISH = "Bullish"
    NEUTRAL = "Neutral"
    BEARISH = "Bearish"
    VERY_BEARISH = "Very Bearish"


class EventFlag(str, Enum):
    GREEN = "Green Flag"
    YELLOW = "Yellow Flag"
    RED = "Red Flag"


@dataclass(frozen=True)
class Score:
    """A single indicator score for one currency.

    `score` is an integer in [-2, 2]; construction fails loudly otherwise
    since a bad value means the producing collaborator is broken.
    """

    score: int
    rationale: str
    raw_data: Optional[str] = None

    def __post_init__(self) -> None:
        # frozen: normalise integral floats through object.__setattr__
        object.__setattr__(self, "score", validate_score(self.score))

    @classmethod
    def manual(cls, value: int) -> "Score":
        return cls(score=value, rationale="Manual override.")


@dataclass
class DataPoint:
    name: str
    value: str


@dataclass
class EventModifier:
    heading: str
    flag: EventFlag
    description: str
    date: Optional[str] = None
    id: Optional[str] = None


@dataclass
class RecapSource:
    name: str
    url: str


@dataclass
class EconomicRecap:
    """Narrative economic recap for a currency, produced by the AI collaborator."""

    score_modifier: int  # -1 | 0 | 1
    bias: str  # e.g. "Hawkish", "Dovish", "Neutral"
    narrative_reasoning: str = ""
    raw_data: Dict[str, List[DataPoint]] = field(default_factory=dict)
    event_modifiers: List[EventModifier] = field(default_factory=list)
    modifier_recommendation: str = ""
    sources: List[RecapSource] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.score_modifier = validate_event_modifier(self.score_modifier)


@dataclass
class CurrencyAnalysis:
    """Analysis state of one currency.

    `sigma_score` and `direction` are derived fields; they are only valid
    after `fxbias.analysis.store.recompute` (or `recompute_all_directions`)
    ran on the enclosing AnalysisData.
    """

    scores: Dict[str, Score] = field(default_factory=dict)
    sigma_score: float = 0.0
    direction: Direction = Direction.NEUTRAL
    event_modifier_score: int = 0
    event_modifier_rationale: Optional[str] = None
    risk_modifier: int = 0
    recap: Optional[EconomicRecap] = None

    @property
    def final_score(self) -> float:
        return self.sigma_score + self.event_modifier_score + self.risk_modifier


AnalysisData = Dict[str, Optional[CurrencyAnalysis]]


@dataclass
class HistoricalSnapshot:
    date: str  # YYYY-MM-DD
    data: AnalysisData


HistoricalData = List[HistoricalSnapshot]


@dataclass
class PairBias:
    base: str
    quote: str
    spread: float
    bias: Direction

    @property
    def name(self) -> str:
        return f"{self.base}/{self.quote}"
