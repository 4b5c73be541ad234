"""Domain layer - pure business models with no external dependencies."""

from portfolio_tracker.domain.models import (
    Account,
    Transaction,
    PortfolioSnapshot,
    TransactionKind,
    SyncState,
)

__all__ = [
    "Account",
    "Transaction",
    "PortfolioSnapshot",
    "TransactionKind",
    "SyncState",
]
