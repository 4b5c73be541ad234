"""Cash accountant: keeps account cash consistent with ledger mutations."""

import logging
from decimal import Decimal

from portfolio_tracker.core.exceptions import ValidationError
from portfolio_tracker.domain.models import Account, Transaction, TransactionKind, round_money
from portfolio_tracker.repositories.protocols import RemoteStore

logger = logging.getLogger(__name__)


def cash_delta(txn: Transaction) -> Decimal:
    """
    Cash impact of recording a transaction.

    Positive = cash added, Negative = cash removed.
    """
    if txn.kind == TransactionKind.BUY:
        return -txn.amount
    if txn.kind == TransactionKind.SELL:
        return txn.amount
    if txn.kind == TransactionKind.DEPOSIT:
        return txn.amount
    if txn.kind == TransactionKind.WITHDRAWAL:
        return -txn.amount
    return Decimal("0")


class CashAccountant:
    """
    Computes and persists cash balance changes.

    Ledger appends and deletes go through record()/remove(), which hand the
    new balance and the transaction write to the store as one unit: the
    balance is written first and nothing is kept if either step fails.
    Explicit edits (set_cash, deposit, withdraw) touch the balance only.
    """

    def __init__(self, store: RemoteStore):
        self._store = store

    @staticmethod
    def balance_after_append(account: Account, txn: Transaction) -> Decimal:
        return round_money(account.cash_balance + cash_delta(txn))

    @staticmethod
    def balance_after_delete(account: Account, txn: Transaction) -> Decimal:
        return round_money(account.cash_balance - cash_delta(txn))

    async def record(self, account: Account, txn: Transaction) -> tuple[Account, Transaction]:
        """Persist a new transaction with its cash adjustment."""
        new_cash = self.balance_after_append(account, txn)
        created = await self._store.record_transaction(account.id, new_cash, txn)
        logger.debug(
            f"Recorded {txn.kind.value} in account {account.id}: cash {account.cash_balance} -> {new_cash}"
        )
        return self._with_cash(account, new_cash), created

    async def remove(self, account: Account, txn: Transaction) -> Account:
        """Delete a transaction and reverse its cash adjustment."""
        new_cash = self.balance_after_delete(account, txn)
        await self._store.remove_transaction(account.id, new_cash, txn.id)
        logger.debug(
            f"Removed {txn.kind.value} {txn.id} from account {account.id}: "
            f"cash {account.cash_balance} -> {new_cash}"
        )
        return self._with_cash(account, new_cash)

    async def set_cash(self, account: Account, cash: Decimal) -> Account:
        """Overwrite the balance directly; no transaction is recorded."""
        cash = round_money(cash)
        await self._store.update_account_cash(account.id, cash)
        return self._with_cash(account, cash)

    async def deposit(self, account: Account, amount: Decimal) -> Account:
        if amount <= 0:
            raise ValidationError("Deposit amount must be > 0")
        return await self.set_cash(account, account.cash_balance + amount)

    async def withdraw(self, account: Account, amount: Decimal) -> Account:
        if amount <= 0:
            raise ValidationError("Withdrawal amount must be > 0")
        return await self.set_cash(account, account.cash_balance - amount)

    @staticmethod
    def _with_cash(account: Account, cash: Decimal) -> Account:
        return Account(
            id=account.id,
            owner_id=account.owner_id,
            name=account.name,
            cash_balance=cash,
        )
