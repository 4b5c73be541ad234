"""Market data provider backed by Yahoo Finance via yfinance."""

import asyncio
import logging
from decimal import Decimal
from typing import Any, Optional

from portfolio_tracker.domain.views import Quote, HistoricalPrice, HistoricalSeries
from portfolio_tracker.providers.stub_provider import StubMarketDataProvider

logger = logging.getLogger(__name__)


# Lazy import so tests can patch before import
def _get_yf():
    import yfinance as yf
    return yf


def _to_decimal(value: Any) -> Optional[Decimal]:
    if value is None:
        return None
    try:
        return Decimal(str(round(float(value), 4)))
    except (TypeError, ValueError):
        return None


def _fetch_quote_impl(ticker: str) -> Quote:
    """Blocking yfinance lookup for one ticker."""
    info = _get_yf().Ticker(ticker).info
    if not isinstance(info, dict):
        raise ValueError(f"No quote info for {ticker}")
    # Price: currentPrice preferred, then regularMarketPrice
    price = _to_decimal(info.get("currentPrice") or info.get("regularMarketPrice"))
    if price is None:
        raise ValueError(f"No price for {ticker}")
    name = (info.get("longName") or info.get("shortName") or "").strip() or ticker
    return Quote(
        ticker=ticker,
        company_name=name,
        price=price,
        volume=int(info.get("volume") or info.get("regularMarketVolume") or 0),
        day_high=_to_decimal(info.get("dayHigh") or info.get("regularMarketDayHigh")),
        day_low=_to_decimal(info.get("dayLow") or info.get("regularMarketDayLow")),
        previous_close=_to_decimal(
            info.get("previousClose") or info.get("regularMarketPreviousClose")
        ),
        is_fallback=False,
    )


def _fetch_history_impl(ticker: str, days: int) -> HistoricalSeries:
    """Blocking yfinance daily history for one ticker."""
    frame = _get_yf().Ticker(ticker).history(period=f"{days}d", interval="1d", auto_adjust=False)
    if frame is None or frame.empty:
        raise ValueError(f"No history for {ticker}")
    points = [
        HistoricalPrice(date=index.date(), price=_to_decimal(close))
        for index, close in frame["Close"].items()
        if _to_decimal(close) is not None
    ]
    return HistoricalSeries(ticker=ticker, data=points, is_fallback=False)


class YFinanceMarketDataProvider:
    """
    Fetches quotes and daily closes from Yahoo Finance.

    yfinance is blocking, so each lookup runs in a worker thread with a
    timeout. On timeout or any lookup failure the stub's synthetic data is
    returned with is_fallback=True.
    """

    def __init__(
        self,
        fetch_timeout_seconds: float = 10.0,
        fallback: Optional[StubMarketDataProvider] = None,
    ):
        self._timeout = fetch_timeout_seconds
        self._fallback = fallback or StubMarketDataProvider()

    async def fetch_quote(self, ticker: str) -> Quote:
        symbol = ticker.strip().upper()
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(_fetch_quote_impl, symbol),
                timeout=self._timeout,
            )
        except Exception as e:
            logger.warning(f"Quote lookup for {symbol} failed, using fallback data: {e}")
            return self._fallback.quote_for(symbol)

    async def fetch_historical_data(self, ticker: str, days: int) -> HistoricalSeries:
        symbol = ticker.strip().upper()
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(_fetch_history_impl, symbol, days),
                timeout=self._timeout,
            )
        except Exception as e:
            logger.warning(f"History lookup for {symbol} failed, using fallback data: {e}")
            return self._fallback.history_for(symbol, days)
