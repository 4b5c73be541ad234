"""Stub market data provider for offline/testing use."""

import random
from datetime import timedelta
from decimal import Decimal

from portfolio_tracker.core.timezone import today_eastern
from portfolio_tracker.domain.views import Quote, HistoricalPrice, HistoricalSeries


# Deterministic fake prices for common symbols: (last, previous close, name)
_STUB_PRICES: dict[str, tuple[Decimal, Decimal, str]] = {
    "AAPL": (Decimal("185.50"), Decimal("184.25"), "Apple Inc."),
    "GOOGL": (Decimal("142.75"), Decimal("141.50"), "Alphabet Inc."),
    "MSFT": (Decimal("378.25"), Decimal("376.80"), "Microsoft Corporation"),
    "AMZN": (Decimal("178.50"), Decimal("177.25"), "Amazon.com, Inc."),
    "TSLA": (Decimal("248.75"), Decimal("250.10"), "Tesla, Inc."),
    "NVDA": (Decimal("485.25"), Decimal("482.50"), "NVIDIA Corporation"),
    "META": (Decimal("505.50"), Decimal("502.75"), "Meta Platforms, Inc."),
    "SPY": (Decimal("485.25"), Decimal("484.10"), "SPDR S&P 500 ETF Trust"),
    "QQQ": (Decimal("418.75"), Decimal("417.50"), "Invesco QQQ Trust"),
    "VTI": (Decimal("252.30"), Decimal("251.80"), "Vanguard Total Stock Market ETF"),
}


class StubMarketDataProvider:
    """
    Stub provider with deterministic fake data for offline operation.

    Every quote is flagged is_fallback=True so consumers surface it as
    degraded data. Unknown tickers get a price derived from the seed and the
    ticker, so repeated calls agree.
    """

    def __init__(self, seed: int = 42):
        """Initialize with optional random seed for reproducibility."""
        self._seed = seed

    def _rng(self, ticker: str) -> random.Random:
        return random.Random(f"{self._seed}:{ticker}")

    def quote_for(self, ticker: str) -> Quote:
        """Build the stub quote for a ticker synchronously."""
        symbol = ticker.strip().upper()
        if symbol in _STUB_PRICES:
            price, prev_close, name = _STUB_PRICES[symbol]
        else:
            rng = self._rng(symbol)
            price = Decimal(str(50 + rng.random() * 200)).quantize(Decimal("0.01"))
            change_pct = Decimal(str((rng.random() - 0.5) * 0.04))
            prev_close = (price / (1 + change_pct)).quantize(Decimal("0.01"))
            name = symbol

        spread = (price * Decimal("0.01")).quantize(Decimal("0.01"))
        return Quote(
            ticker=symbol,
            company_name=name,
            price=price,
            volume=1_000_000,
            day_high=price + spread,
            day_low=price - spread,
            previous_close=prev_close,
            is_fallback=True,
        )

    def history_for(self, ticker: str, days: int) -> HistoricalSeries:
        """Random walk ending at the stub price, one point per calendar day."""
        symbol = ticker.strip().upper()
        rng = self._rng(f"history:{symbol}")
        price = self.quote_for(symbol).price
        today = today_eastern()

        points: list[HistoricalPrice] = []
        for offset in range(days):
            points.append(HistoricalPrice(date=today - timedelta(days=offset), price=price))
            step = Decimal(str((rng.random() - 0.5) * 0.02))
            price = (price * (1 - step)).quantize(Decimal("0.01"))
        points.reverse()
        return HistoricalSeries(ticker=symbol, data=points, is_fallback=True)

    async def fetch_quote(self, ticker: str) -> Quote:
        """Return the stub quote for a ticker."""
        return self.quote_for(ticker)

    async def fetch_historical_data(self, ticker: str, days: int) -> HistoricalSeries:
        """Return a stub price series for a ticker."""
        return self.history_for(ticker, days)
