"""Export of transactions and backups."""

import csv
import io
from typing import Any, Optional

from portfolio_tracker.backup.formats import (
    AccountDocument,
    AccountHeader,
    dump_record,
    snapshot_to_document,
    transaction_to_record,
    wrap,
)
from portfolio_tracker.core.timezone import today_eastern
from portfolio_tracker.domain.models import Account, PortfolioSnapshot, Transaction

# Columns of a transaction CSV export; the reader accepts the same header
CSV_COLUMNS = [
    "date",
    "type",
    "ticker",
    "companyName",
    "shares",
    "price",
    "notes",
]


class BackupExporter:
    """
    Builds export documents from a published snapshot.

    JSON exports are wrapped in the tagged envelope so they can be imported
    back unambiguously. CSV covers the transactions of one account only.
    """

    def __init__(self, snapshot: PortfolioSnapshot):
        self._snapshot = snapshot

    def transactions_csv(self, account_id: Optional[str] = None) -> str:
        """Transactions of an account (default: active) as CSV text."""
        _, transactions = self._account_and_transactions(account_id)

        buffer = io.StringIO()
        writer = csv.DictWriter(buffer, fieldnames=CSV_COLUMNS)
        writer.writeheader()
        for txn in transactions:
            writer.writerow({
                "date": txn.date.isoformat(),
                "type": txn.kind.value,
                "ticker": txn.ticker,
                "companyName": txn.company_name,
                "shares": str(txn.shares),
                "price": str(txn.price),
                "notes": txn.notes or "",
            })
        return buffer.getvalue()

    def transactions_json(self, account_id: Optional[str] = None) -> dict[str, Any]:
        """Transactions of an account (default: active) as a tagged JSON list."""
        _, transactions = self._account_and_transactions(account_id)
        return wrap("transactions", [dump_record(transaction_to_record(t)) for t in transactions])

    def account_backup(self, account_id: Optional[str] = None) -> dict[str, Any]:
        """One account (name, cash and transactions) as a tagged document."""
        account, transactions = self._account_and_transactions(account_id)
        document = AccountDocument(
            account=AccountHeader(name=account.name, cash_balance=account.cash_balance),
            transactions=[transaction_to_record(t) for t in transactions],
        )
        return wrap("account", dump_record(document))

    def full_backup(self) -> dict[str, Any]:
        """Every account and transaction of the owner as a tagged snapshot document."""
        return wrap("snapshot", dump_record(snapshot_to_document(self._snapshot)))

    def _account_and_transactions(
        self,
        account_id: Optional[str],
    ) -> tuple[Account, list[Transaction]]:
        target = account_id or self._snapshot.active_account_id
        account = self._snapshot.get_account(target or "")
        return account, self._snapshot.transactions_for(account.id)


def export_filename(kind: str, extension: str) -> str:
    """Download filename such as ``portfolio_snapshot_2024-05-01.json``."""
    return f"portfolio_{kind}_{today_eastern().isoformat()}.{extension}"
