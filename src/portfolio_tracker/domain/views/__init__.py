"""View models for service outputs."""

from portfolio_tracker.domain.views.portfolio import (
    Position,
    Quote,
    HistoricalPrice,
    HistoricalSeries,
    QuoteBatch,
    PositionView,
    PortfolioSummary,
    PortfolioValuation,
    HistoricalPoint,
    PortfolioHistory,
)

__all__ = [
    "Position",
    "Quote",
    "HistoricalPrice",
    "HistoricalSeries",
    "QuoteBatch",
    "PositionView",
    "PortfolioSummary",
    "PortfolioValuation",
    "HistoricalPoint",
    "PortfolioHistory",
]
