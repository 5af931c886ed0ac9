"""Fetch the four risk instruments and classify them."""
from __future__ import annotations

import asyncio
from typing import Optional

from fxbias.config import MarketDataSettings
from fxbias.market_data.alpha_vantage import AlphaVantageClient
from fxbias.risk.models import RiskSentimentAnalysis
from fxbias.risk.sentiment import build_risk_sentiment
from fxbias.utils.logging import get_logger


logger = get_logger(__name__)


async def fetch_and_analyze_risk_sentiment(
    client: AlphaVantageClient,
    previous: Optional[RiskSentimentAnalysis] = None,
    settings: Optional[MarketDataSettings] = None,
) -> RiskSentimentAnalysis:
    """
    Pull equity, volatility, carry-pair and yield series concurrently and
    build a fresh RiskSentimentAnalysis.

    Manual overrides on `previous` are carried over. Any provider error
    propagates; a partial refresh never replaces the current sentiment.
    """
    settings = settings or client.settings
    logger.info(
        "Refreshing risk sentiment",
        extra={
            "equity": settings.equity_symbol,
            "volatility": settings.volatility_symbol,
            "carry": f"{settings.carry_base}/{settings.carry_quote}",
        },
    )

    spx, vix, audjpy, us10y = await asyncio.gather(
        client.fetch_stock(settings.equity_symbol),
        client.fetch_stock(settings.volatility_symbol),
        client.fetch_fx(settings.carry_base, settings.carry_quote),
        client.fetch_treasury_yield(),
    )
    return build_risk_sentiment(spx, vix, audjpy, us10y, previous=previous)
