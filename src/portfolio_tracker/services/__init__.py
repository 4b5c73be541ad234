"""Service layer - business logic orchestration."""

from portfolio_tracker.services.position_calculator import calculate_positions, sort_chronologically
from portfolio_tracker.services.cash_accountant import CashAccountant, cash_delta
from portfolio_tracker.services.snapshot_cache import SnapshotCache
from portfolio_tracker.services.sync_coordinator import SessionContext, SyncCoordinator
from portfolio_tracker.services.ledger_service import (
    TransactionCreate,
    TransactionLedger,
    TransactionUpdate,
)
from portfolio_tracker.services.account_service import AccountService
from portfolio_tracker.services.import_reconciler import ImportPlan, ImportReconciler, ImportResult
from portfolio_tracker.services.market_data_service import MarketDataService
from portfolio_tracker.services.valuation_service import ValuationService
from portfolio_tracker.services.portfolio_session import PortfolioSession

__all__ = [
    "calculate_positions",
    "sort_chronologically",
    "CashAccountant",
    "cash_delta",
    "SnapshotCache",
    "SessionContext",
    "SyncCoordinator",
    "TransactionCreate",
    "TransactionLedger",
    "TransactionUpdate",
    "AccountService",
    "ImportPlan",
    "ImportReconciler",
    "ImportResult",
    "MarketDataService",
    "ValuationService",
    "PortfolioSession",
]
