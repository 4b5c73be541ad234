"""API routers package."""

from portfolio_tracker.api.routers.accounts import router as accounts_router
from portfolio_tracker.api.routers.transactions import router as transactions_router
from portfolio_tracker.api.routers.portfolio import router as portfolio_router
from portfolio_tracker.api.routers.data import router as data_router

__all__ = [
    "accounts_router",
    "transactions_router",
    "portfolio_router",
    "data_router",
]
