"""Remote store protocol (authoritative persistence)."""

from decimal import Decimal
from typing import Any, Protocol

from portfolio_tracker.domain.models import Account, Transaction


class RemoteStore(Protocol):
    """
    Interface for the authoritative account/transaction store.

    Every call is a suspension point and fails with StoreError. No call is
    retried. Identifiers are assigned by the store: ids on inserted records
    are ignored.
    """

    async def list_accounts(self, owner_id: str) -> list[Account]:
        """List an owner's accounts in creation order."""
        ...

    async def create_account(self, owner_id: str, name: str, cash: Decimal) -> Account:
        """Create an account and return it with its assigned id."""
        ...

    async def update_account_cash(self, account_id: str, cash: Decimal) -> None:
        """Overwrite an account's cash balance."""
        ...

    async def rename_account(self, account_id: str, name: str) -> None:
        """Change an account's display name."""
        ...

    async def delete_account(self, account_id: str) -> None:
        """Delete an account and every transaction it owns."""
        ...

    async def list_transactions(self, owner_id: str) -> list[Transaction]:
        """List all of an owner's transactions, oldest first."""
        ...

    async def insert_transaction(self, txn: Transaction) -> Transaction:
        """Insert one transaction and return it with its assigned id."""
        ...

    async def insert_transactions(self, txns: list[Transaction]) -> list[Transaction]:
        """Insert many transactions in a single unit of work."""
        ...

    async def update_transaction(self, txn_id: str, fields: dict[str, Any]) -> None:
        """Update mutable fields (shares, price, date, notes) of a transaction."""
        ...

    async def delete_transaction(self, txn_id: str) -> None:
        """Delete one transaction."""
        ...

    async def record_transaction(
        self,
        account_id: str,
        cash: Decimal,
        txn: Transaction,
    ) -> Transaction:
        """Set the account's cash, then insert the transaction, atomically."""
        ...

    async def remove_transaction(self, account_id: str, cash: Decimal, txn_id: str) -> None:
        """Set the account's cash, then delete the transaction, atomically."""
        ...
