"""Per-owner bundle of the portfolio services."""

import logging
from decimal import Decimal

from portfolio_tracker.backup.exporter import BackupExporter
from portfolio_tracker.domain.models import PortfolioSnapshot
from portfolio_tracker.repositories.protocols import RemoteStore
from portfolio_tracker.services.account_service import AccountService
from portfolio_tracker.services.cash_accountant import CashAccountant
from portfolio_tracker.services.import_reconciler import ImportReconciler
from portfolio_tracker.services.ledger_service import TransactionLedger
from portfolio_tracker.services.market_data_service import MarketDataService
from portfolio_tracker.services.position_calculator import DEFAULT_EPSILON
from portfolio_tracker.services.snapshot_cache import SnapshotCache
from portfolio_tracker.services.sync_coordinator import SessionContext, SyncCoordinator
from portfolio_tracker.services.valuation_service import ValuationService

logger = logging.getLogger(__name__)


class PortfolioSession:
    """
    Everything one owner's session needs, sharing a single SyncCoordinator.

    All mutations for an owner go through one session, which keeps the
    single-writer assumption of the ledger and cash bookkeeping.
    """

    def __init__(
        self,
        store: RemoteStore,
        cache: SnapshotCache,
        market_data_service: MarketDataService,
        context: SessionContext,
        default_account_name: str = "My First Account",
        default_starting_cash: Decimal = Decimal("10000"),
        epsilon: Decimal = DEFAULT_EPSILON,
    ):
        self.coordinator = SyncCoordinator(
            store=store,
            cache=cache,
            context=context,
            default_account_name=default_account_name,
            default_starting_cash=default_starting_cash,
        )
        self.cash = CashAccountant(store)
        self.ledger = TransactionLedger(store, self.coordinator, self.cash)
        self.accounts = AccountService(store, self.coordinator, self.cash)
        self.importer = ImportReconciler(store, self.coordinator)
        self.valuation = ValuationService(self.coordinator, market_data_service, epsilon=epsilon)

    @property
    def owner_id(self) -> str:
        return self.coordinator.owner_id

    @property
    def snapshot(self) -> PortfolioSnapshot:
        return self.coordinator.require_snapshot()

    def exporter(self) -> BackupExporter:
        """Exporter over the currently published snapshot."""
        return BackupExporter(self.snapshot)

    async def start(self) -> PortfolioSnapshot:
        """Warm start from cache, then load from the remote store."""
        logger.debug(f"Starting session for owner {self.owner_id}")
        return await self.coordinator.start()
