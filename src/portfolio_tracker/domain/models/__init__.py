"""Domain models package."""

from portfolio_tracker.domain.models.enums import TransactionKind, SyncState
from portfolio_tracker.domain.models.account import Account
from portfolio_tracker.domain.models.transaction import Transaction
from portfolio_tracker.domain.models.snapshot import PortfolioSnapshot
from portfolio_tracker.domain.models.precision import (
    MONEY_SCALE,
    SHARES_SCALE,
    round_money,
    round_shares,
)

__all__ = [
    "TransactionKind",
    "SyncState",
    "Account",
    "Transaction",
    "PortfolioSnapshot",
    "MONEY_SCALE",
    "SHARES_SCALE",
    "round_money",
    "round_shares",
]
