"""
Unit tests for SyncCoordinator and SnapshotCache.

Tests cover:
- Bootstrap of exactly one default account
- Loading, grouping and dropping transactions with unknown accounts
- Active account resolution (session context, cache, first account)
- State machine and load failures
- Warm start from a valid cache, discard of an invalid cache
- Write-through on publish and epoch bumps
"""

import datetime as dt
import json
from decimal import Decimal

import pytest

from portfolio_tracker.core.exceptions import CacheInvalidError, StoreError, SyncStateError
from portfolio_tracker.domain.models import SyncState, Transaction, TransactionKind
from portfolio_tracker.services import SessionContext, SnapshotCache, SyncCoordinator

from tests.conftest import OWNER_ID


def _deposit(account_id: str, amount: str) -> Transaction:
    return Transaction(
        id="",
        account_id=account_id,
        owner_id=OWNER_ID,
        kind=TransactionKind.DEPOSIT,
        shares=Decimal("1"),
        price=Decimal(amount),
        date=dt.date(2024, 2, 1),
    )


# =============================================================================
# LOAD TESTS
# =============================================================================


class TestLoad:
    """Tests for the initial load."""

    async def test_bootstrap_creates_single_default_account(self, coordinator, remote_store):
        """
        GIVEN an owner with no accounts
        WHEN the coordinator loads
        THEN exactly one "My First Account" with 10000 cash exists and is active
        """
        assert coordinator.state == SyncState.UNINITIALIZED

        snapshot = await coordinator.load()

        assert coordinator.state == SyncState.READY
        assert len(snapshot.accounts) == 1
        account = snapshot.accounts[0]
        assert account.name == "My First Account"
        assert account.cash_balance == Decimal("10000")
        assert snapshot.active_account_id == account.id
        assert snapshot.transactions_by_account == {account.id: []}

        await coordinator.reload()
        assert len(await remote_store.list_accounts(OWNER_ID)) == 1

    async def test_transactions_grouped_by_account(self, coordinator, sqlalchemy_store):
        first = await sqlalchemy_store.create_account(OWNER_ID, "A", Decimal("0"))
        second = await sqlalchemy_store.create_account(OWNER_ID, "B", Decimal("0"))
        await sqlalchemy_store.insert_transactions([
            _deposit(first.id, "10"),
            _deposit(second.id, "20"),
            _deposit(second.id, "30"),
        ])

        snapshot = await coordinator.load()

        assert len(snapshot.transactions_for(first.id)) == 1
        assert len(snapshot.transactions_for(second.id)) == 2
        assert snapshot.active_account_id == first.id

    async def test_transactions_of_unknown_accounts_dropped(self, coordinator, sqlalchemy_store, remote_store):
        """
        GIVEN a transaction whose account is not among the owner's accounts
        WHEN the coordinator loads
        THEN the load succeeds and the orphan is not in the snapshot
        """
        account = await sqlalchemy_store.create_account(OWNER_ID, "Mine", Decimal("0"))
        other = await sqlalchemy_store.create_account("someone-else", "Theirs", Decimal("0"))
        # Tagged with this owner but filed under another owner's account
        await sqlalchemy_store.insert_transaction(_deposit(other.id, "99"))

        snapshot = await coordinator.load()

        assert [a.id for a in snapshot.accounts] == [account.id]
        assert snapshot.transaction_count() == 0

    async def test_remembered_active_account_is_restored(self, remote_store, snapshot_cache, sqlalchemy_store):
        await sqlalchemy_store.create_account(OWNER_ID, "A", Decimal("0"))
        second = await sqlalchemy_store.create_account(OWNER_ID, "B", Decimal("0"))
        coordinator = SyncCoordinator(
            store=remote_store,
            cache=snapshot_cache,
            context=SessionContext(owner_id=OWNER_ID, last_active_account_id=second.id),
        )

        snapshot = await coordinator.load()

        assert snapshot.active_account_id == second.id

    async def test_stale_remembered_account_falls_back_to_first(self, remote_store, snapshot_cache, sqlalchemy_store):
        first = await sqlalchemy_store.create_account(OWNER_ID, "A", Decimal("0"))
        coordinator = SyncCoordinator(
            store=remote_store,
            cache=snapshot_cache,
            context=SessionContext(owner_id=OWNER_ID, last_active_account_id="deleted-account"),
        )

        snapshot = await coordinator.load()

        assert snapshot.active_account_id == first.id

    async def test_load_failure_stays_loading(self, coordinator, remote_store):
        """
        GIVEN the store cannot list transactions
        WHEN the coordinator loads
        THEN StoreError is raised, state stays LOADING and nothing is published
        """
        remote_store.fail_on.add("list_transactions")

        with pytest.raises(StoreError):
            await coordinator.load()

        assert coordinator.state == SyncState.LOADING
        assert coordinator.snapshot is None
        with pytest.raises(SyncStateError):
            coordinator.require_snapshot()

    async def test_bootstrap_failure_aborts_load(self, coordinator, remote_store):
        remote_store.fail_on.add("create_account")

        with pytest.raises(StoreError):
            await coordinator.load()

        assert "list_transactions" not in remote_store.calls
        assert coordinator.state == SyncState.LOADING


# =============================================================================
# CACHE TESTS
# =============================================================================


class TestSnapshotCache:
    """Tests for write-through and warm start."""

    async def test_publish_writes_through_and_bumps_epoch(self, coordinator, snapshot_cache):
        snapshot = await coordinator.load()
        epoch = coordinator.epoch

        coordinator.publish(snapshot)

        assert coordinator.epoch == epoch + 1
        cached = snapshot_cache.load(OWNER_ID)
        assert [a.id for a in cached.accounts] == [a.id for a in snapshot.accounts]
        assert snapshot_cache.last_active_account_id(OWNER_ID) == snapshot.active_account_id

    async def test_warm_start_uses_valid_cache(self, coordinator, remote_store, snapshot_cache):
        """
        GIVEN a cache written by a previous session
        WHEN a new coordinator warm-starts
        THEN the cached snapshot is available before any remote call
        """
        previous = await coordinator.load()
        fresh_store_calls = len(remote_store.calls)
        new_coordinator = SyncCoordinator(
            store=remote_store,
            cache=snapshot_cache,
            context=SessionContext(owner_id=OWNER_ID),
        )

        cached = new_coordinator.warm_start()

        assert cached.active_account_id == previous.active_account_id
        assert new_coordinator.snapshot is cached
        assert len(remote_store.calls) == fresh_store_calls

    async def test_invalid_cache_discarded_and_reloaded(self, coordinator, snapshot_store, snapshot_cache):
        """
        GIVEN a cached record missing the transactions map
        WHEN the coordinator starts
        THEN the record is discarded and a fresh remote load publishes a valid snapshot
        """
        snapshot_store.write_snapshot(
            OWNER_ID,
            json.dumps({"accounts": [], "activeAccountId": "x"}),
        )

        assert coordinator.warm_start() is None
        assert snapshot_store.read_snapshot(OWNER_ID) is None

        snapshot = await coordinator.start()
        assert len(snapshot.accounts) == 1
        assert snapshot_cache.load(OWNER_ID) is not None

    @pytest.mark.parametrize(
        "payload",
        [
            "not json",
            "[]",
            json.dumps({"accounts": [], "transactionsByAccount": {}, "activeAccountId": None}),
            json.dumps({
                "accounts": [{"id": "a1", "name": "A", "cashBalance": "1"}],
                "transactionsByAccount": {},
                "activeAccountId": "a1",
            }),
            json.dumps({
                "accounts": [{"id": "a1", "name": "A", "cashBalance": "1"}],
                "transactionsByAccount": {"a1": []},
                "activeAccountId": "a2",
            }),
        ],
    )
    def test_parse_rejects_malformed_records(self, payload):
        with pytest.raises(CacheInvalidError):
            SnapshotCache.parse(payload)

    def test_parse_accepts_valid_record(self):
        snapshot = SnapshotCache.parse(json.dumps({
            "accounts": [{"id": "a1", "ownerId": OWNER_ID, "name": "A", "cashBalance": "12.50"}],
            "transactionsByAccount": {"a1": []},
            "activeAccountId": "a1",
        }))

        assert snapshot.active_account.cash_balance == Decimal("12.50")


# =============================================================================
# SWITCH TESTS
# =============================================================================


class TestSwitch:
    async def test_switch_is_remembered_across_sessions(self, coordinator, remote_store, snapshot_cache):
        await coordinator.load()
        second = await remote_store.create_account(OWNER_ID, "Second", Decimal("0"))
        await coordinator.reload()

        coordinator.switch_account(second.id)

        next_session = SyncCoordinator(
            store=remote_store,
            cache=snapshot_cache,
            context=SessionContext(owner_id=OWNER_ID),
        )
        snapshot = await next_session.load()
        assert snapshot.active_account_id == second.id
