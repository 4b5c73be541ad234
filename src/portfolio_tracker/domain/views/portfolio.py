"""View models for derived portfolio and market data outputs."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional


@dataclass
class Position:
    """Derived holding for one ticker in one account. Never persisted."""

    ticker: str
    company_name: str
    shares: Decimal
    cost_basis: Decimal
    average_cost: Decimal


@dataclass
class Quote:
    """Market quote for a ticker."""

    ticker: str
    company_name: str
    price: Decimal
    volume: int = 0
    day_high: Optional[Decimal] = None
    day_low: Optional[Decimal] = None
    previous_close: Optional[Decimal] = None
    is_fallback: bool = False


@dataclass
class HistoricalPrice:
    """Closing price of a ticker on one day."""

    date: date
    price: Decimal


@dataclass
class HistoricalSeries:
    """Daily price history for a ticker."""

    ticker: str
    data: list[HistoricalPrice] = field(default_factory=list)
    is_fallback: bool = False


@dataclass
class QuoteBatch:
    """Result of a concurrent quote fetch across tickers."""

    quotes: dict[str, Quote] = field(default_factory=dict)
    failed: list[str] = field(default_factory=list)

    @property
    def is_degraded(self) -> bool:
        """True if any ticker failed or was served from fallback data."""
        return bool(self.failed) or any(q.is_fallback for q in self.quotes.values())

    @property
    def degraded_tickers(self) -> list[str]:
        fallback = [t for t, q in self.quotes.items() if q.is_fallback]
        return sorted(set(fallback) | set(self.failed))


@dataclass
class PositionView:
    """Position enriched with market data."""

    ticker: str
    company_name: str
    shares: Decimal
    average_cost: Decimal
    current_price: Optional[Decimal] = None
    market_value: Optional[Decimal] = None
    gain_loss: Optional[Decimal] = None
    volume: Optional[int] = None
    day_high: Optional[Decimal] = None
    day_low: Optional[Decimal] = None
    previous_close: Optional[Decimal] = None


@dataclass
class PortfolioSummary:
    """Totals for the active account."""

    total_market_value: Decimal = field(default_factory=lambda: Decimal("0"))
    total_cost_basis: Decimal = field(default_factory=lambda: Decimal("0"))
    total_gain_loss: Decimal = field(default_factory=lambda: Decimal("0"))
    total_gain_loss_percent: Decimal = field(default_factory=lambda: Decimal("0"))
    trading_cash: Decimal = field(default_factory=lambda: Decimal("0"))


@dataclass
class PortfolioValuation:
    """Valued positions and summary for one account at one epoch."""

    account_id: str
    epoch: int
    positions: list[PositionView] = field(default_factory=list)
    summary: PortfolioSummary = field(default_factory=PortfolioSummary)
    is_degraded: bool = False
    degraded_tickers: list[str] = field(default_factory=list)
    as_of: Optional[datetime] = None


@dataclass
class HistoricalPoint:
    """Total holdings value on one day."""

    date: date
    value: Decimal


@dataclass
class PortfolioHistory:
    """Daily holdings value for one account at one epoch."""

    epoch: int
    points: list[HistoricalPoint] = field(default_factory=list)
    is_degraded: bool = False
    degraded_tickers: list[str] = field(default_factory=list)
