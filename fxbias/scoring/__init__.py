"""Indicator scoring and recap orchestration."""

from .analyzer import (
    AnalysisRunResult,
    IndicatorScorer,
    RecapGenerator,
    analyze_currency,
    generate_recap,
    run_analysis,
)

__all__ = [
    "AnalysisRunResult",
    "IndicatorScorer",
    "RecapGenerator",
    "analyze_currency",
    "generate_recap",
    "run_analysis",
]
