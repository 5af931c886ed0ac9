"""Alpha Vantage daily series for the risk sentiment instruments."""
from __future__ import annotations

import os
from typing import Any, Dict, List, Optional

import httpx

from fxbias.cache import TTLCache
from fxbias.config import MarketDataSettings
from fxbias.risk.models import IndicatorDataPoint
from fxbias.utils.decorators import log_execution, retry
from fxbias.utils.errors import ConfigurationError, DataNotFoundError, DataProviderError, RateLimitError
from fxbias.utils.logging import get_logger
from fxbias.utils.validation import validate_currency_code


logger = get_logger(__name__)


def _parse_close_series(time_series: Dict[str, Dict[str, Any]]) -> List[IndicatorDataPoint]:
    """Daily close prices in ascending date order."""
    points = [
        IndicatorDataPoint(date=day, value=float(values["4. close"]))
        for day, values in time_series.items()
    ]
    return sorted(points, key=lambda p: p.date)


class AlphaVantageClient:
    NAME = "alpha_vantage"

    def __init__(
        self,
        api_key: Optional[str] = None,
        settings: Optional[MarketDataSettings] = None,
        cache: Optional[TTLCache] = None,
    ) -> None:
        self.settings = settings or MarketDataSettings()
        self.api_key: str = api_key or os.getenv(self.settings.api_key_env, "")
        if not self.api_key:
            raise ConfigurationError(
                f"Alpha Vantage API key missing; set {self.settings.api_key_env}"
            )
        self.base_url = self.settings.base_url
        self.timeout = float(self.settings.timeout)
        self.cache = cache if cache is not None else TTLCache()

    def _cache_key(self, symbol: str) -> str:
        # Only the key suffix goes into the cache key.
        return TTLCache.create_key("market", {"symbol": symbol, "key": self.api_key[-4:]})

    @retry(max_attempts=3, delay=1.0, exceptions=(httpx.HTTPError,))
    async def _request(self, params: Dict[str, str]) -> Dict[str, Any]:
        query = dict(params, apikey=self.api_key)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            resp = await client.get(self.base_url, params=query)
            resp.raise_for_status()
            data = resp.json() or {}

        if "Error Message" in data:
            raise DataNotFoundError(f"Alpha Vantage API error: {data['Error Message']}")
        if "Information" in data or "Note" in data:
            # Alpha Vantage reports throttling this way with HTTP 200.
            raise RateLimitError(f"Alpha Vantage API error: {data.get('Information') or data.get('Note')}")
        return data

    async def _fetch(self, symbol: str, params: Dict[str, str]) -> Dict[str, Any]:
        try:
            return await self._request(params)
        except httpx.HTTPError as e:
            logger.error(f"Alpha Vantage request for {symbol} failed: {e}")
            raise DataProviderError(f"Alpha Vantage request for {symbol} failed: {e}") from e

    @log_execution(log_args=False)
    async def fetch_stock(self, symbol: str) -> List[IndicatorDataPoint]:
        key = self._cache_key(symbol)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        data = await self._fetch(symbol, {
            "function": "TIME_SERIES_DAILY",
            "symbol": symbol,
            "outputsize": "compact",  # ~100 data points
        })
        series = data.get("Time Series (Daily)")
        if not series:
            raise DataNotFoundError(f"No time series data found for {symbol}")

        points = _parse_close_series(series)
        self.cache.set(key, points)
        return points

    @log_execution(log_args=False)
    async def fetch_fx(self, from_currency: str, to_currency: str) -> List[IndicatorDataPoint]:
        validate_currency_code(from_currency)
        validate_currency_code(to_currency)
        symbol = f"{from_currency}{to_currency}"
        key = self._cache_key(symbol)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        data = await self._fetch(symbol, {
            "function": "FX_DAILY",
            "from_symbol": from_currency,
            "to_symbol": to_currency,
            "outputsize": "compact",
        })
        series = data.get("Time Series FX (Daily)")
        if not series:
            raise DataNotFoundError(f"No FX time series data found for {symbol}")

        points = _parse_close_series(series)
        self.cache.set(key, points)
        return points

    @log_execution(log_args=False)
    async def fetch_treasury_yield(self, maturity: str = "10year") -> List[IndicatorDataPoint]:
        symbol = f"US{maturity.upper()}"
        key = self._cache_key(symbol)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        data = await self._fetch(symbol, {
            "function": "TREASURY_YIELD",
            "interval": "daily",
            "maturity": maturity,
        })
        rows = data.get("data")
        if not rows or not isinstance(rows, list):
            raise DataNotFoundError("No treasury yield data found")

        points = []
        for row in rows:
            # Holidays come through as "."
            try:
                points.append(IndicatorDataPoint(date=row["date"], value=float(row["value"])))
            except (KeyError, TypeError, ValueError):
                continue
        points.sort(key=lambda p: p.date)

        self.cache.set(key, points)
        return points
