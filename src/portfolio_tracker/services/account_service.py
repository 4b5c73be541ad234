"""Account management: create, rename, delete, switch and explicit cash edits."""

import logging
from decimal import Decimal

from portfolio_tracker.core.exceptions import LastAccountError, ValidationError
from portfolio_tracker.domain.models import Account
from portfolio_tracker.repositories.protocols import RemoteStore
from portfolio_tracker.services.cash_accountant import CashAccountant
from portfolio_tracker.services.sync_coordinator import SyncCoordinator

logger = logging.getLogger(__name__)


class AccountService:
    """Service for an owner's accounts; every change is republished through the coordinator."""

    def __init__(
        self,
        store: RemoteStore,
        coordinator: SyncCoordinator,
        cash_accountant: CashAccountant,
    ):
        self._store = store
        self._coordinator = coordinator
        self._cash = cash_accountant

    def list_accounts(self) -> list[Account]:
        return list(self._coordinator.require_snapshot().accounts)

    def get_account(self, account_id: str) -> Account:
        return self._coordinator.require_snapshot().get_account(account_id)

    async def create_account(self, name: str, cash: Decimal = Decimal("0")) -> Account:
        """Create an account and make it the active one."""
        name = name.strip()
        if not name:
            raise ValidationError("Account name cannot be empty")
        snapshot = self._coordinator.require_snapshot()

        account = await self._store.create_account(self._coordinator.owner_id, name, cash)
        self._coordinator.publish(snapshot.with_account(account).with_active(account.id))
        logger.info(f"Created account {account.id} ({name}) for owner {account.owner_id}")
        return account

    async def rename_account(self, account_id: str, name: str) -> Account:
        name = name.strip()
        if not name:
            raise ValidationError("Account name cannot be empty")
        snapshot = self._coordinator.require_snapshot()
        account = snapshot.get_account(account_id)

        await self._store.rename_account(account_id, name)
        renamed = Account(
            id=account.id,
            owner_id=account.owner_id,
            name=name,
            cash_balance=account.cash_balance,
        )
        self._coordinator.publish(snapshot.with_account(renamed))
        return renamed

    async def delete_account(self, account_id: str) -> None:
        """
        Delete an account and its transactions.

        Refused for the owner's only account. If the deleted account was
        active, the first remaining account becomes active.
        """
        snapshot = self._coordinator.require_snapshot()
        snapshot.get_account(account_id)
        if len(snapshot.accounts) <= 1:
            raise LastAccountError(account_id)

        await self._store.delete_account(account_id)
        self._coordinator.publish(snapshot.without_account(account_id))
        logger.info(f"Deleted account {account_id} for owner {self._coordinator.owner_id}")

    def switch_account(self, account_id: str) -> Account:
        snapshot = self._coordinator.switch_account(account_id)
        return snapshot.get_account(account_id)

    async def set_cash(self, account_id: str, cash: Decimal) -> Account:
        """Override the cash balance directly, outside the ledger."""
        return await self._apply_cash_edit(account_id, "set", cash)

    async def deposit(self, account_id: str, amount: Decimal) -> Account:
        return await self._apply_cash_edit(account_id, "deposit", amount)

    async def withdraw(self, account_id: str, amount: Decimal) -> Account:
        return await self._apply_cash_edit(account_id, "withdraw", amount)

    async def _apply_cash_edit(self, account_id: str, action: str, value: Decimal) -> Account:
        snapshot = self._coordinator.require_snapshot()
        account = snapshot.get_account(account_id)
        if action == "deposit":
            updated = await self._cash.deposit(account, value)
        elif action == "withdraw":
            updated = await self._cash.withdraw(account, value)
        else:
            updated = await self._cash.set_cash(account, value)
        self._coordinator.publish(snapshot.with_account(updated))
        logger.info(
            f"Cash {action} on account {account_id}: {account.cash_balance} -> {updated.cash_balance}"
        )
        return updated
