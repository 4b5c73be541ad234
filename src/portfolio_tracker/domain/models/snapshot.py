"""Portfolio snapshot: accounts, their ledgers and the active selection."""

from dataclasses import dataclass, field, replace
from typing import Optional

from portfolio_tracker.core.exceptions import NotFoundError, ValidationError
from portfolio_tracker.domain.models.account import Account
from portfolio_tracker.domain.models.transaction import Transaction


@dataclass
class PortfolioSnapshot:
    """
    Full in-memory picture of one owner's portfolio.

    Helpers never mutate in place; each returns a new snapshot so a published
    snapshot can be cached and compared safely.
    """

    accounts: list[Account] = field(default_factory=list)
    transactions_by_account: dict[str, list[Transaction]] = field(default_factory=dict)
    active_account_id: Optional[str] = None

    def validate(self) -> None:
        """Raise ValidationError if the snapshot invariants do not hold."""
        account_ids = [a.id for a in self.accounts]
        if len(set(account_ids)) != len(account_ids):
            raise ValidationError("Snapshot contains duplicate account ids")
        for account_id in account_ids:
            if account_id not in self.transactions_by_account:
                raise ValidationError(f"Snapshot has no transaction list for account {account_id}")
        if self.active_account_id is not None and self.active_account_id not in account_ids:
            raise ValidationError(
                f"Active account {self.active_account_id} is not among the snapshot accounts"
            )

    @property
    def active_account(self) -> Optional[Account]:
        if self.active_account_id is None:
            return None
        return self.find_account(self.active_account_id)

    def find_account(self, account_id: str) -> Optional[Account]:
        for account in self.accounts:
            if account.id == account_id:
                return account
        return None

    def get_account(self, account_id: str) -> Account:
        """Get account by ID or raise NotFoundError."""
        account = self.find_account(account_id)
        if account is None:
            raise NotFoundError("Account", account_id)
        return account

    def transactions_for(self, account_id: str) -> list[Transaction]:
        return list(self.transactions_by_account.get(account_id, []))

    def find_transaction(self, txn_id: str) -> Optional[Transaction]:
        for transactions in self.transactions_by_account.values():
            for txn in transactions:
                if txn.id == txn_id:
                    return txn
        return None

    def transaction_count(self) -> int:
        return sum(len(txns) for txns in self.transactions_by_account.values())

    # Copy-on-write helpers

    def with_account(self, account: Account) -> "PortfolioSnapshot":
        """Return a snapshot with the account replaced, or appended if new."""
        if self.find_account(account.id) is None:
            transactions = dict(self.transactions_by_account)
            transactions.setdefault(account.id, [])
            return replace(
                self,
                accounts=[*self.accounts, account],
                transactions_by_account=transactions,
            )
        return replace(
            self,
            accounts=[account if a.id == account.id else a for a in self.accounts],
        )

    def without_account(self, account_id: str) -> "PortfolioSnapshot":
        """Return a snapshot with the account and its transactions removed."""
        accounts = [a for a in self.accounts if a.id != account_id]
        transactions = {
            acc_id: txns
            for acc_id, txns in self.transactions_by_account.items()
            if acc_id != account_id
        }
        active_id = self.active_account_id
        if active_id == account_id:
            active_id = accounts[0].id if accounts else None
        return PortfolioSnapshot(
            accounts=accounts,
            transactions_by_account=transactions,
            active_account_id=active_id,
        )

    def with_active(self, account_id: str) -> "PortfolioSnapshot":
        self.get_account(account_id)
        return replace(self, active_account_id=account_id)

    def with_transaction(self, txn: Transaction) -> "PortfolioSnapshot":
        """Return a snapshot with the transaction replaced, or appended if new."""
        current = self.transactions_by_account.get(txn.account_id, [])
        if any(t.id == txn.id for t in current):
            updated = [txn if t.id == txn.id else t for t in current]
        else:
            updated = [*current, txn]
        transactions = dict(self.transactions_by_account)
        transactions[txn.account_id] = updated
        return replace(self, transactions_by_account=transactions)

    def without_transaction(self, txn: Transaction) -> "PortfolioSnapshot":
        transactions = dict(self.transactions_by_account)
        transactions[txn.account_id] = [
            t for t in transactions.get(txn.account_id, []) if t.id != txn.id
        ]
        return replace(self, transactions_by_account=transactions)
