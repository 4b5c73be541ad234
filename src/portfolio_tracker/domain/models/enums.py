"""Enumerations for domain models."""

from enum import Enum


class TransactionKind(str, Enum):
    """Types of ledger transactions."""

    BUY = "BUY"
    SELL = "SELL"
    DEPOSIT = "DEPOSIT"
    WITHDRAWAL = "WITHDRAWAL"


class SyncState(str, Enum):
    """Lifecycle of an owner's portfolio session."""

    UNINITIALIZED = "UNINITIALIZED"
    LOADING = "LOADING"
    READY = "READY"
