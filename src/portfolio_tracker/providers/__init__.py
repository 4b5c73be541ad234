"""Market data providers module."""

from portfolio_tracker.providers.market_data_provider import MarketDataProvider
from portfolio_tracker.providers.stub_provider import StubMarketDataProvider
from portfolio_tracker.providers.yfinance_provider import YFinanceMarketDataProvider

__all__ = [
    "MarketDataProvider",
    "StubMarketDataProvider",
    "YFinanceMarketDataProvider",
]
