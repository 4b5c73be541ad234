"""Market data service: concurrent quote and history lookups."""

import asyncio
import logging
import time
from typing import Optional

from portfolio_tracker.domain.views import HistoricalSeries, Quote, QuoteBatch
from portfolio_tracker.providers.market_data_provider import MarketDataProvider

logger = logging.getLogger(__name__)


class MarketDataService:
    """
    Fan-out/fan-in wrapper around a market data provider.

    One concurrent request per ticker; results are joined before returning,
    so the slowest ticker sets the latency. A failure for one ticker is logged
    and reported in the batch, never raised. Quotes are cached per ticker
    for a short TTL; fallback quotes are not cached.
    """

    def __init__(
        self,
        provider: MarketDataProvider,
        cache_ttl_seconds: float = 60,
    ):
        self._provider = provider
        self._cache_ttl = cache_ttl_seconds
        # Cache: ticker -> (quote, cached_at)
        self._quote_cache: dict[str, tuple[Quote, float]] = {}

    async def get_quotes(self, tickers: list[str]) -> QuoteBatch:
        """Fetch quotes for tickers concurrently."""
        symbols = self._normalize(tickers)
        batch = QuoteBatch()
        if not symbols:
            return batch

        to_fetch: list[str] = []
        for symbol in symbols:
            cached = self._cached_quote(symbol)
            if cached is not None:
                batch.quotes[symbol] = cached
            else:
                to_fetch.append(symbol)

        results = await asyncio.gather(
            *(self._provider.fetch_quote(symbol) for symbol in to_fetch),
            return_exceptions=True,
        )
        for symbol, result in zip(to_fetch, results):
            if isinstance(result, BaseException):
                logger.warning(f"Quote fetch failed for {symbol}: {result}")
                batch.failed.append(symbol)
                continue
            batch.quotes[symbol] = result
            if not result.is_fallback:
                self._quote_cache[symbol] = (result, time.monotonic())

        if batch.is_degraded:
            logger.warning(f"Degraded market data for: {', '.join(batch.degraded_tickers)}")
        return batch

    async def get_histories(
        self,
        tickers: list[str],
        days: int,
    ) -> tuple[dict[str, HistoricalSeries], list[str]]:
        """Fetch daily histories concurrently; returns (series by ticker, failed tickers)."""
        symbols = self._normalize(tickers)
        results = await asyncio.gather(
            *(self._provider.fetch_historical_data(symbol, days) for symbol in symbols),
            return_exceptions=True,
        )

        series: dict[str, HistoricalSeries] = {}
        failed: list[str] = []
        for symbol, result in zip(symbols, results):
            if isinstance(result, BaseException):
                logger.warning(f"History fetch failed for {symbol}: {result}")
                failed.append(symbol)
            else:
                series[symbol] = result
        return series, failed

    def clear_cache(self) -> None:
        self._quote_cache.clear()

    def _cached_quote(self, symbol: str) -> Optional[Quote]:
        entry = self._quote_cache.get(symbol)
        if entry is None:
            return None
        quote, cached_at = entry
        if time.monotonic() - cached_at > self._cache_ttl:
            return None
        return quote

    @staticmethod
    def _normalize(tickers: list[str]) -> list[str]:
        """Uppercase, strip and de-duplicate, keeping first-seen order."""
        seen: dict[str, None] = {}
        for ticker in tickers:
            key = (ticker or "").strip().upper()
            if key:
                seen.setdefault(key, None)
        return list(seen)
