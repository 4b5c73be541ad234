"""Transaction ledger: append, update and delete ledger entries."""

import datetime as dt
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional

from portfolio_tracker.core.exceptions import NotFoundError, ValidationError
from portfolio_tracker.core.timezone import today_eastern
from portfolio_tracker.domain.models import Transaction, TransactionKind, round_money, round_shares
from portfolio_tracker.repositories.protocols import RemoteStore
from portfolio_tracker.services.cash_accountant import CashAccountant
from portfolio_tracker.services.sync_coordinator import SyncCoordinator

logger = logging.getLogger(__name__)


@dataclass
class TransactionCreate:
    """Input data for appending a transaction."""

    kind: TransactionKind
    shares: Decimal
    price: Decimal
    date: Optional[dt.date] = None
    ticker: str = ""
    company_name: str = ""
    notes: Optional[str] = None

    @classmethod
    def cash_movement(
        cls,
        kind: TransactionKind,
        amount: Decimal,
        on: Optional[dt.date] = None,
        notes: Optional[str] = None,
    ) -> "TransactionCreate":
        """Build a DEPOSIT/WITHDRAWAL entry (one unit at the amount)."""
        return cls(kind=kind, shares=Decimal("1"), price=amount, date=on, notes=notes)


@dataclass
class TransactionUpdate:
    """Partial update; only these fields of a transaction are mutable."""

    shares: Optional[Decimal] = None
    price: Optional[Decimal] = None
    date: Optional[dt.date] = None
    notes: Optional[str] = None

    def changed_fields(self) -> dict[str, Any]:
        return {
            key: value
            for key, value in (
                ("shares", self.shares),
                ("price", self.price),
                ("date", self.date),
                ("notes", self.notes),
            )
            if value is not None
        }


class TransactionLedger:
    """
    Ordered transaction log per account.

    Every operation requires the owning account to be present in the current
    snapshot. Appends and deletes carry a paired cash adjustment; updates do
    not recompute cash. Only shape is checked here.
    """

    def __init__(
        self,
        store: RemoteStore,
        coordinator: SyncCoordinator,
        cash_accountant: CashAccountant,
    ):
        self._store = store
        self._coordinator = coordinator
        self._cash = cash_accountant

    async def append(self, account_id: str, data: TransactionCreate) -> Transaction:
        """Record a new transaction; identity is assigned by the store."""
        snapshot = self._coordinator.require_snapshot()
        account = snapshot.get_account(account_id)
        self._validate_shape(data)

        is_trade = data.kind in (TransactionKind.BUY, TransactionKind.SELL)
        draft = Transaction(
            id="",
            account_id=account.id,
            owner_id=account.owner_id,
            kind=data.kind,
            shares=round_shares(data.shares),
            price=round_money(data.price),
            date=data.date or today_eastern(),
            ticker=data.ticker.strip().upper() if is_trade else "",
            company_name=data.company_name.strip() if is_trade else "",
            notes=data.notes,
        )

        updated_account, created = await self._cash.record(account, draft)
        self._coordinator.publish(
            snapshot.with_account(updated_account).with_transaction(created)
        )
        logger.info(f"Appended {created.kind.value} {created.id} to account {account.id}")
        return created

    async def update(self, txn_id: str, patch: TransactionUpdate) -> Transaction:
        """
        Edit shares, price, date or notes of an existing transaction.

        The account's cash is not recomputed.
        """
        snapshot = self._coordinator.require_snapshot()
        txn = snapshot.find_transaction(txn_id)
        if txn is None:
            raise NotFoundError("Transaction", txn_id)
        snapshot.get_account(txn.account_id)

        fields = patch.changed_fields()
        for key in ("shares", "price"):
            if key in fields and fields[key] < 0:
                raise ValidationError(f"{key} cannot be negative")
        if not fields:
            return txn
        if "shares" in fields:
            fields["shares"] = round_shares(fields["shares"])
        if "price" in fields:
            fields["price"] = round_money(fields["price"])

        await self._store.update_transaction(txn_id, fields)
        updated = Transaction(
            id=txn.id,
            account_id=txn.account_id,
            owner_id=txn.owner_id,
            kind=txn.kind,
            shares=fields.get("shares", txn.shares),
            price=fields.get("price", txn.price),
            date=fields.get("date", txn.date),
            ticker=txn.ticker,
            company_name=txn.company_name,
            notes=fields.get("notes", txn.notes),
        )
        self._coordinator.publish(snapshot.with_transaction(updated))
        if txn.is_trade and ("shares" in fields or "price" in fields):
            logger.debug(f"Transaction {txn_id} amount edited; account cash not recomputed")
        return updated

    async def delete(self, txn_id: str) -> None:
        """Remove a transaction and reverse its cash adjustment."""
        snapshot = self._coordinator.require_snapshot()
        txn = snapshot.find_transaction(txn_id)
        if txn is None:
            raise NotFoundError("Transaction", txn_id)
        account = snapshot.get_account(txn.account_id)

        updated_account = await self._cash.remove(account, txn)
        self._coordinator.publish(
            snapshot.with_account(updated_account).without_transaction(txn)
        )
        logger.info(f"Deleted {txn.kind.value} {txn_id} from account {account.id}")

    def list_transactions(self, account_id: Optional[str] = None) -> list[Transaction]:
        """Transactions of an account (default: the active account), in ledger order."""
        snapshot = self._coordinator.require_snapshot()
        target = account_id or snapshot.active_account_id
        if target is None:
            return []
        snapshot.get_account(target)
        return snapshot.transactions_for(target)

    @staticmethod
    def _validate_shape(data: TransactionCreate) -> None:
        """Validate transaction input shape."""
        if data.kind in (TransactionKind.BUY, TransactionKind.SELL) and not data.ticker.strip():
            raise ValidationError(f"{data.kind.value} requires a ticker")
        if data.shares < 0:
            raise ValidationError("shares cannot be negative")
        if data.price < 0:
            raise ValidationError("price cannot be negative")
