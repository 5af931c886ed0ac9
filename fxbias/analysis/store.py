"""Session state for the engine and the single transition that keeps it consistent."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, List, Mapping, Optional, Union

from fxbias.analysis.aggregator import compute_sigma_score, find_missing_indicators, merge_scores
from fxbias.analysis.direction import build_currency_pairs, recompute_all_directions
from fxbias.analysis.history import save_snapshot
from fxbias.analysis.models import (
    AnalysisData,
    CurrencyAnalysis,
    EconomicRecap,
    HistoricalData,
    PairBias,
    Score,
)
from fxbias.analysis.modifiers import (
    apply_event_modifier,
    apply_recap,
    apply_risk_modifier,
    set_event_modifier_rationale,
)
from fxbias.cache import TTLCache
from fxbias.risk.models import RiskConviction, RiskSentimentAnalysis, RiskSignal
from fxbias.risk.sentiment import recalculate_overall_sentiment, set_indicator_override, set_overall_override
from fxbias.utils.logging import get_logger
from fxbias.utils.validation import validate_currency_code


logger = get_logger(__name__)


@dataclass
class EngineState:
    analysis_data: AnalysisData = field(default_factory=dict)
    risk_sentiment: Optional[RiskSentimentAnalysis] = None
    use_score_modifier: bool = True
    use_risk_modifier: bool = True


def recompute(state: EngineState) -> EngineState:
    """
    Re-derive every computed field from its sources.

    Order: risk sentiment (overrides applied), base scores, risk modifiers,
    directions. Pure and idempotent.
    """
    sentiment = recalculate_overall_sentiment(state.risk_sentiment)

    data: AnalysisData = {
        code: (replace(ca, sigma_score=compute_sigma_score(ca.scores)) if ca is not None else None)
        for code, ca in state.analysis_data.items()
    }

    signal = sentiment.overall_signal if sentiment is not None else None
    conviction = sentiment.conviction if sentiment is not None else None
    data = apply_risk_modifier(data, signal, conviction, state.use_risk_modifier)
    data = recompute_all_directions(data)

    return replace(state, analysis_data=data, risk_sentiment=sentiment)


class AnalysisStore:
    """Explicit engine context for one session.

    Holds the engine state, the daily history and the analysis cache. Every
    mutator builds the complete new state, runs `recompute`, and only then
    swaps it in, so readers never see a partially updated state.
    """

    def __init__(
        self,
        state: Optional[EngineState] = None,
        history: Optional[HistoricalData] = None,
        cache: Optional[TTLCache] = None,
    ):
        self._state = recompute(state or EngineState())
        self.history: HistoricalData = list(history or [])
        self.cache = cache if cache is not None else TTLCache()

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def analysis_data(self) -> AnalysisData:
        return self._state.analysis_data

    @property
    def risk_sentiment(self) -> Optional[RiskSentimentAnalysis]:
        return self._state.risk_sentiment

    def _commit(self, state: EngineState) -> EngineState:
        self._state = recompute(state)
        return self._state

    def _with_data(self, data: AnalysisData) -> EngineState:
        return self._commit(replace(self._state, analysis_data=data))

    # ---- scores ----
    def merge_scores(self, currency: str, new_scores: Mapping[str, Score]) -> CurrencyAnalysis:
        """Merge freshly analysed scores into a currency, creating it on first analysis."""
        validate_currency_code(currency)
        current = self.analysis_data.get(currency) or CurrencyAnalysis()
        data = dict(self.analysis_data)
        data[currency] = replace(current, scores=merge_scores(current.scores, new_scores))
        logger.debug(f"Merged {len(new_scores)} scores for {currency}")
        return self._with_data(data).analysis_data[currency]

    def update_score(self, currency: str, indicator: str, score: Union[Score, int]) -> CurrencyAnalysis:
        """Replace one indicator score; a bare int is recorded as a manual override."""
        new_score = Score.manual(score) if not isinstance(score, Score) else score
        return self.merge_scores(currency, {indicator: new_score})

    # ---- event modifiers / recaps ----
    def set_event_modifier(self, currency: str, value: int) -> EngineState:
        return self._with_data(apply_event_modifier(self.analysis_data, currency, value))

    def set_event_modifier_rationale(self, currency: str, rationale: Optional[str]) -> EngineState:
        return self._with_data(set_event_modifier_rationale(self.analysis_data, currency, rationale))

    def apply_recap(self, currency: str, recap: EconomicRecap) -> EngineState:
        return self._with_data(
            apply_recap(self.analysis_data, currency, recap, self._state.use_score_modifier)
        )

    # ---- risk sentiment ----
    def set_risk_sentiment(self, sentiment: Optional[RiskSentimentAnalysis]) -> EngineState:
        return self._commit(replace(self._state, risk_sentiment=sentiment))

    def set_indicator_override(self, key: str, override: Optional[RiskSignal]) -> EngineState:
        if self.risk_sentiment is None:
            return self._state
        return self.set_risk_sentiment(set_indicator_override(self.risk_sentiment, key, override))

    def set_overall_override(
        self, signal: Optional[RiskSignal], conviction: Optional[RiskConviction]
    ) -> EngineState:
        if self.risk_sentiment is None:
            return self._state
        return self.set_risk_sentiment(set_overall_override(self.risk_sentiment, signal, conviction))

    # ---- settings ----
    def set_use_risk_modifier(self, enabled: bool) -> EngineState:
        return self._commit(replace(self._state, use_risk_modifier=bool(enabled)))

    def set_use_score_modifier(self, enabled: bool) -> EngineState:
        return self._commit(replace(self._state, use_score_modifier=bool(enabled)))

    def import_state(self, state: EngineState, history: Optional[HistoricalData] = None) -> EngineState:
        """Replace the whole state (e.g. from a saved file); derived fields are rebuilt."""
        if history is not None:
            self.history = list(history)
        return self._commit(state)

    # ---- derived views ----
    def save_snapshot(self, day: Optional[str] = None) -> HistoricalData:
        self.history = save_snapshot(self.history, self.analysis_data, day)
        return self.history

    def currency_pairs(self, order: Optional[Iterable[str]] = None) -> List[PairBias]:
        return build_currency_pairs(self.analysis_data, order)

    def missing_data(
        self, sources: Mapping[str, Mapping[str, Iterable[str]]], currencies: Iterable[str]
    ) -> Dict[str, List[str]]:
        """Indicators that have sources but no score, per analysed currency."""
        missing: Dict[str, List[str]] = {}
        for code in currencies:
            currency_sources = sources.get(code)
            if not currency_sources:
                continue
            ca = self.analysis_data.get(code)
            gaps = find_missing_indicators(ca.scores if ca is not None else None, currency_sources)
            if gaps:
                missing[code] = gaps
        return missing
