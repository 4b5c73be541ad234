"""Sync coordinator: reconciles the local snapshot with the remote store."""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from portfolio_tracker.core.exceptions import AppError, CacheInvalidError, SyncStateError
from portfolio_tracker.domain.models import PortfolioSnapshot, SyncState, Transaction
from portfolio_tracker.repositories.protocols import RemoteStore
from portfolio_tracker.services.snapshot_cache import SnapshotCache

logger = logging.getLogger(__name__)


@dataclass
class SessionContext:
    """Explicit per-session identity and cross-session continuity."""

    owner_id: str
    last_active_account_id: Optional[str] = None


class SyncCoordinator:
    """
    Owns an owner's published PortfolioSnapshot.

    The remote store is the single source of truth. Loading walks
    UNINITIALIZED -> LOADING -> READY; a failed load stays in LOADING and the
    error is raised to the caller (no retry). Every publish bumps the epoch and
    is written through to the SnapshotCache.
    """

    def __init__(
        self,
        store: RemoteStore,
        cache: SnapshotCache,
        context: SessionContext,
        default_account_name: str = "My First Account",
        default_starting_cash: Decimal = Decimal("10000"),
    ):
        self._store = store
        self._cache = cache
        self._context = context
        self._default_account_name = default_account_name
        self._default_starting_cash = default_starting_cash
        self._state = SyncState.UNINITIALIZED
        self._snapshot: Optional[PortfolioSnapshot] = None
        self._epoch = 0

    @property
    def owner_id(self) -> str:
        return self._context.owner_id

    @property
    def context(self) -> SessionContext:
        return self._context

    @property
    def state(self) -> SyncState:
        return self._state

    @property
    def epoch(self) -> int:
        """Generation counter; changes whenever a new snapshot is published."""
        return self._epoch

    @property
    def snapshot(self) -> Optional[PortfolioSnapshot]:
        return self._snapshot

    def require_snapshot(self) -> PortfolioSnapshot:
        """Return the current snapshot or raise if nothing has been loaded."""
        if self._snapshot is None:
            raise SyncStateError(f"Portfolio for owner {self.owner_id} is not loaded")
        return self._snapshot

    def warm_start(self) -> Optional[PortfolioSnapshot]:
        """
        Adopt the cached snapshot for instant display, if it validates.

        An invalid cache is discarded and None is returned; the caller then
        relies on load() for a fresh remote fetch.
        """
        try:
            cached = self._cache.load(self.owner_id)
        except CacheInvalidError as e:
            logger.warning(f"Discarding snapshot cache for owner {self.owner_id}: {e.message}")
            self._cache.discard(self.owner_id)
            return None
        if cached is None:
            return None

        self._snapshot = cached
        self._epoch += 1
        logger.info(
            f"Warm start for owner {self.owner_id}: {len(cached.accounts)} accounts, "
            f"{cached.transaction_count()} transactions from cache"
        )
        return cached

    async def start(self) -> PortfolioSnapshot:
        """Warm start from cache, then load authoritative state."""
        self.warm_start()
        return await self.load()

    async def load(self) -> PortfolioSnapshot:
        """Fetch accounts and transactions, bootstrap if empty, and publish."""
        self._state = SyncState.LOADING
        try:
            accounts = await self._store.list_accounts(self.owner_id)
            if not accounts:
                logger.info(f"No accounts for owner {self.owner_id}; creating default account")
                default = await self._store.create_account(
                    self.owner_id,
                    self._default_account_name,
                    self._default_starting_cash,
                )
                accounts = [default]
            transactions = await self._store.list_transactions(self.owner_id)
        except AppError as e:
            logger.error(f"Load failed for owner {self.owner_id}: {e.message}")
            raise

        transactions_by_account: dict[str, list[Transaction]] = {a.id: [] for a in accounts}
        dropped = 0
        for txn in transactions:
            if txn.account_id in transactions_by_account:
                transactions_by_account[txn.account_id].append(txn)
            else:
                dropped += 1
        if dropped:
            logger.debug(f"Dropped {dropped} transactions with unknown accounts for owner {self.owner_id}")

        remembered = self._context.last_active_account_id
        if remembered is None:
            remembered = self._cache.last_active_account_id(self.owner_id)
        known_ids = {a.id for a in accounts}
        active_id = remembered if remembered in known_ids else accounts[0].id

        snapshot = PortfolioSnapshot(
            accounts=accounts,
            transactions_by_account=transactions_by_account,
            active_account_id=active_id,
        )
        self.publish(snapshot)
        self._state = SyncState.READY
        logger.info(
            f"Loaded portfolio for owner {self.owner_id}: {len(accounts)} accounts, "
            f"{len(transactions) - dropped} transactions"
        )
        return snapshot

    async def reload(self) -> PortfolioSnapshot:
        """Discard in-memory state in favor of a full remote fetch."""
        return await self.load()

    def publish(self, snapshot: PortfolioSnapshot) -> None:
        """Make a snapshot current and mirror it into the local cache."""
        snapshot.validate()
        self._snapshot = snapshot
        self._epoch += 1
        if snapshot.active_account_id:
            self._context.last_active_account_id = snapshot.active_account_id
        self._cache.save(self.owner_id, snapshot)

    def switch_account(self, account_id: str) -> PortfolioSnapshot:
        """Select another existing account as active."""
        snapshot = self.require_snapshot().with_active(account_id)
        self.publish(snapshot)
        return snapshot
