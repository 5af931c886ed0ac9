"""Fold event and risk-sentiment modifiers into currency scores."""
from __future__ import annotations

from dataclasses import replace
from typing import Optional

from fxbias.analysis.direction import recompute_all_directions
from fxbias.analysis.models import AnalysisData, EconomicRecap
from fxbias.risk.models import RiskConviction, RiskSignal
from fxbias.utils.logging import get_logger
from fxbias.utils.validation import validate_event_modifier


logger = get_logger(__name__)


# Currencies that rally when markets take risk, and those bought for safety.
RISK_ON_BASKET = frozenset({"AUD", "NZD", "CAD"})
SAFE_HAVEN_BASKET = frozenset({"JPY", "CHF"})

CONVICTION_MAGNITUDE = {
    RiskConviction.HIGH: 2,
    RiskConviction.MEDIUM: 1,
}


def risk_modifier_for(
    currency: str,
    signal: Optional[RiskSignal],
    conviction: Optional[RiskConviction],
    enabled: bool = True,
) -> int:
    """Risk modifier one currency should carry under the given market mood."""
    if not enabled or signal is None or conviction is None:
        return 0
    magnitude = CONVICTION_MAGNITUDE.get(conviction, 0)
    if magnitude == 0:
        return 0

    if signal == RiskSignal.RISK_ON:
        direction = 1
    elif signal == RiskSignal.RISK_OFF:
        direction = -1
    else:
        return 0

    if currency in RISK_ON_BASKET:
        return direction * magnitude
    if currency in SAFE_HAVEN_BASKET:
        return -direction * magnitude
    return 0


def apply_risk_modifier(
    analysis_data: AnalysisData,
    signal: Optional[RiskSignal],
    conviction: Optional[RiskConviction],
    enabled: bool = True,
) -> AnalysisData:
    """
    Set every currency's risk modifier from the overall market mood.

    Directions are recomputed when any modifier changed; otherwise the
    input mapping is returned unchanged.
    """
    updated = dict(analysis_data)
    changed = False
    for code, ca in analysis_data.items():
        if ca is None:
            continue
        value = risk_modifier_for(code, signal, conviction, enabled)
        if ca.risk_modifier != value:
            updated[code] = replace(ca, risk_modifier=value)
            changed = True

    if not changed:
        return analysis_data
    logger.debug(f"Risk modifiers updated for signal={signal} conviction={conviction} enabled={enabled}")
    return recompute_all_directions(updated)


def apply_event_modifier(analysis_data: AnalysisData, currency: str, value: int) -> AnalysisData:
    """
    Set a currency's event modifier (-1, 0 or 1) and relabel all currencies.

    Setting the value back to the recap's recommendation (0 without a recap)
    clears any manual rationale. Unknown currencies leave the data as-is.
    """
    value = validate_event_modifier(value)
    ca = analysis_data.get(currency)
    if ca is None:
        return recompute_all_directions(analysis_data)

    recommended = ca.recap.score_modifier if ca.recap is not None else 0
    rationale = None if value == recommended else ca.event_modifier_rationale

    updated = dict(analysis_data)
    updated[currency] = replace(ca, event_modifier_score=value, event_modifier_rationale=rationale)
    return recompute_all_directions(updated)


def set_event_modifier_rationale(analysis_data: AnalysisData, currency: str, rationale: Optional[str]) -> AnalysisData:
    """Attach a manual rationale; scores are untouched so no relabelling."""
    ca = analysis_data.get(currency)
    if ca is None:
        return analysis_data
    updated = dict(analysis_data)
    updated[currency] = replace(ca, event_modifier_rationale=rationale or None)
    return updated


def apply_recap(
    analysis_data: AnalysisData,
    currency: str,
    recap: EconomicRecap,
    use_score_modifier: bool = True,
) -> AnalysisData:
    """Attach a recap; a non-zero recommendation becomes the event modifier when enabled."""
    ca = analysis_data.get(currency)
    if ca is None:
        return recompute_all_directions(analysis_data)

    changes = {"recap": recap}
    if use_score_modifier and recap.score_modifier != 0:
        changes["event_modifier_score"] = recap.score_modifier

    updated = dict(analysis_data)
    updated[currency] = replace(ca, **changes)
    return recompute_all_directions(updated)
