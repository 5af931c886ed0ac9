"""Drive indicator scoring and recaps through injected AI collaborators.

The scorer and recap generator are protocols; nothing here talks to a
model directly. This module owns caching, retries and the serialized
hand-off of results into an AnalysisStore.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Protocol, Sequence, Union

from fxbias.analysis.models import EconomicRecap, Score
from fxbias.analysis.store import AnalysisStore
from fxbias.cache import TTLCache
from fxbias.config import RetrySettings
from fxbias.utils.decorators import RetryPolicy
from fxbias.utils.errors import AnalysisError, ValidationError
from fxbias.utils.logging import get_logger


logger = get_logger(__name__)

# currency -> indicator -> source URLs
SourceSettings = Mapping[str, Mapping[str, Sequence[str]]]
AnalysisTarget = Union[str, Sequence[str]]  # "all" or explicit indicator names

# Indicators scored by a dedicated analyzer outside the bulk run.
SPECIAL_INDICATORS = ("Central Bank",)


class IndicatorScorer(Protocol):
    async def score(self, currency: str, indicator: str, urls: Sequence[str]) -> Score:
        ...


class RecapGenerator(Protocol):
    async def generate(self, currency: str, scores: Mapping[str, Score]) -> EconomicRecap:
        ...


def indicator_policy(settings: RetrySettings) -> RetryPolicy:
    s = settings.analyze_all
    return RetryPolicy.from_settings(s.enabled, s.attempts, delay=1.0, final_delay=2.0)


def recap_policy(settings: RetrySettings) -> RetryPolicy:
    s = settings.generate_recap
    return RetryPolicy.from_settings(s.enabled, s.attempts, delay=3.0)


def indicator_cache_key(currency: str, indicator: str) -> str:
    return TTLCache.create_key("indicator", {"currency": currency, "indicator": indicator})


async def analyze_currency(
    currency: str,
    sources: SourceSettings,
    scorer: IndicatorScorer,
    cache: TTLCache,
    policy: RetryPolicy,
    indicators: Optional[Iterable[str]] = None,
    run_scoring: bool = True,
    existing_scores: Optional[Mapping[str, Score]] = None,
    force: bool = False,
) -> Dict[str, Score]:
    """
    Score the requested indicators of one currency.

    Cached scores are reused unless `force`. With `run_scoring` off only
    cached or existing scores are returned. An indicator that still fails
    after the last attempt is left out of the result.
    """
    currency_sources = sources.get(currency) or {}
    targets = list(indicators) if indicators is not None else list(currency_sources.keys())
    new_scores: Dict[str, Score] = {}

    for indicator in targets:
        if indicator in SPECIAL_INDICATORS:
            continue

        key = indicator_cache_key(currency, indicator)
        if not force:
            cached = cache.get(key)
            if cached is not None:
                logger.info(f"Using cached result for {indicator} for {currency}")
                new_scores[indicator] = cached
                continue

        if not run_scoring:
            if existing_scores and existing_scores.get(indicator) is not None:
                new_scores[indicator] = existing_scores[indicator]
            continue

        urls = list(currency_sources.get(indicator) or [])
        if not urls:
            continue

        logger.info(f"Analyzing {currency} - {indicator}...")
        try:
            score = await policy.run(
                scorer.score, currency, indicator, urls, label=f"{currency} {indicator} analysis"
            )
        except Exception as e:
            logger.error(
                f"Failed to analyze {currency} - {indicator} after {policy.max_attempts} attempts",
                extra={"error": str(e)},
            )
            continue

        if not isinstance(score, Score):
            raise ValidationError(f"Scorer returned {type(score).__name__} for {currency} {indicator}, expected Score")
        new_scores[indicator] = score
        cache.set(key, score)

    return new_scores


@dataclass
class AnalysisRunResult:
    analyzed: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)
    missing: Dict[str, List[str]] = field(default_factory=dict)


async def run_analysis(
    store: AnalysisStore,
    analysis_map: Mapping[str, AnalysisTarget],
    sources: SourceSettings,
    scorer: IndicatorScorer,
    policy: RetryPolicy,
    fetch_only: bool = False,
    force: bool = False,
) -> AnalysisRunResult:
    """
    Analyse several currencies concurrently and fold results into the store.

    Each currency runs as its own task; store writes go through a lock so
    every merge (and the recompute it triggers) sees the fully updated
    state. After a scoring run the day's snapshot is saved and gaps are
    reported.
    """
    lock = asyncio.Lock()
    result = AnalysisRunResult()

    async def _one(currency: str, target: AnalysisTarget) -> None:
        indicators = None if target == "all" else list(target)
        existing = store.analysis_data.get(currency)
        scores = await analyze_currency(
            currency,
            sources,
            scorer,
            store.cache,
            policy,
            indicators=indicators,
            run_scoring=not fetch_only,
            existing_scores=existing.scores if existing is not None else None,
            force=force,
        )
        logger.info(f"Processing results for {currency}...")
        async with lock:
            store.merge_scores(currency, scores)
            result.analyzed.append(currency)

    codes = list(analysis_map.keys())
    outcomes = await asyncio.gather(
        *[_one(code, analysis_map[code]) for code in codes], return_exceptions=True
    )
    for code, outcome in zip(codes, outcomes):
        if isinstance(outcome, BaseException):
            logger.error(f"Failed to analyze {code}: {outcome}")
            result.failed[code] = str(outcome)

    if not fetch_only:
        store.save_snapshot()
        result.missing = store.missing_data(sources, codes)
        if result.missing:
            logger.warning("Indicators missing after analysis", extra={"missing": result.missing})

    return result


async def generate_recap(
    currency: str,
    scores: Mapping[str, Score],
    generator: RecapGenerator,
    policy: RetryPolicy,
) -> EconomicRecap:
    """Ask the recap collaborator for a recap, retrying per policy."""
    try:
        recap = await policy.run(generator.generate, currency, scores, label=f"{currency} recap")
    except Exception as e:
        raise AnalysisError(f"Recap generation failed for {currency}: {e}") from e
    if not isinstance(recap, EconomicRecap):
        raise ValidationError(f"Recap generator returned {type(recap).__name__}, expected EconomicRecap")
    return recap
