"""Market data provider protocol."""

from typing import Protocol

from portfolio_tracker.domain.views import Quote, HistoricalSeries


class MarketDataProvider(Protocol):
    """
    Protocol for market data providers.

    Implementations own their fallback behavior: when real data is
    unavailable they may return synthetic data flagged with is_fallback=True.
    Raising is allowed; callers treat a raised error as a missing ticker.
    """

    async def fetch_quote(self, ticker: str) -> Quote:
        """Fetch the latest quote for a ticker."""
        ...

    async def fetch_historical_data(self, ticker: str, days: int) -> HistoricalSeries:
        """Fetch daily closing prices for the last `days` calendar days, oldest first."""
        ...
