"""Import reconciler: classify a backup payload, preview it, then commit it."""

import logging
from dataclasses import dataclass, field
from typing import Any

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from portfolio_tracker.backup.formats import (
    FORMAT_NAME,
    SUPPORTED_VERSIONS,
    AccountDocument,
    AccountHeader,
    ExportEnvelope,
    PayloadKind,
    SnapshotDocument,
    TransactionRecord,
    transaction_from_record,
)
from portfolio_tracker.backup.reader import read_payload
from portfolio_tracker.core.exceptions import ImportPayloadError, StoreError, ValidationError
from portfolio_tracker.domain.models import Transaction
from portfolio_tracker.repositories.protocols import RemoteStore
from portfolio_tracker.services.sync_coordinator import SyncCoordinator

logger = logging.getLogger(__name__)

_TRANSACTION_LIST = TypeAdapter(list[TransactionRecord])

ACCOUNT_KEYS = frozenset({"account", "transactions"})
SNAPSHOT_KEYS = frozenset(
    {
        "accounts",
        "transactionsByAccount",
        "transactions_by_account",
        "transactions",
        "activeAccountId",
        "active_account_id",
    }
)


@dataclass
class AccountImport:
    """One account to create, with the transactions that go into it."""

    header: AccountHeader
    transactions: list[TransactionRecord] = field(default_factory=list)


@dataclass
class ImportPlan:
    """A classified, validated payload awaiting confirmation."""

    kind: PayloadKind
    message: str
    # Rows for the active account (kind == "transactions")
    transactions: list[TransactionRecord] = field(default_factory=list)
    # Accounts to create (kind == "account" or "snapshot")
    accounts: list[AccountImport] = field(default_factory=list)

    @property
    def account_count(self) -> int:
        return len(self.accounts)

    @property
    def transaction_count(self) -> int:
        return len(self.transactions) + sum(len(a.transactions) for a in self.accounts)


@dataclass
class ImportResult:
    accounts_created: int
    transactions_imported: int


class ImportReconciler:
    """
    Brings an exported payload back into an owner's portfolio.

    Three shapes are accepted, either inside the tagged export envelope or as
    legacy untagged JSON:

    - a list of transactions, imported into the active account;
    - a single-account backup, imported as a new account;
    - a full snapshot backup, every account recreated with new ids.

    Nothing is deduplicated: importing the same payload twice doubles its
    rows. Imported transactions carry no cash adjustment; account cash comes
    from the payload.
    """

    def __init__(self, store: RemoteStore, coordinator: SyncCoordinator):
        self._store = store
        self._coordinator = coordinator

    def prepare(self, payload: Any) -> ImportPlan:
        """Classify and validate a payload, returning a plan with a preview message."""
        if isinstance(payload, dict) and "format" in payload:
            kind, data = self._unwrap(payload)
        else:
            kind, data = self._classify_legacy(payload), payload

        try:
            if kind == "transactions":
                return self._plan_transactions(data)
            if kind == "account":
                return self._plan_account(data)
            return self._plan_snapshot(data)
        except PydanticValidationError as e:
            raise ImportPayloadError(f"Invalid {kind} payload: {e.error_count()} validation errors") from e

    def prepare_file(self, path: str) -> ImportPlan:
        """Read a JSON or CSV export from disk and prepare it."""
        plan = self.prepare(read_payload(path))
        logger.info(f"Prepared {plan.kind} import from {path}")
        return plan

    async def commit(self, plan: ImportPlan, confirmed: bool = False) -> ImportResult:
        """
        Write a prepared plan to the remote store and reload the portfolio.

        Refused unless confirmed. A failure midway leaves whatever was already
        written (for example a newly created account) in place; it is logged,
        raised as StoreError and no reload happens.
        """
        if not confirmed:
            raise ValidationError("Import must be confirmed before it is committed")

        owner_id = self._coordinator.owner_id
        accounts_created = 0
        imported = 0
        try:
            if plan.kind == "transactions":
                active = self._coordinator.require_snapshot().active_account
                if active is None:
                    raise ValidationError("No active account to import transactions into")
                imported += await self._insert(plan.transactions, active.id, owner_id)
            else:
                for item in plan.accounts:
                    account = await self._store.create_account(
                        owner_id,
                        item.header.name,
                        item.header.cash_balance,
                    )
                    accounts_created += 1
                    imported += await self._insert(item.transactions, account.id, owner_id)
        except StoreError as e:
            logger.error(
                f"Import failed for owner {owner_id} after {accounts_created} accounts "
                f"and {imported} transactions: {e.message}"
            )
            raise StoreError(f"Import failed: {e.message}") from e

        await self._coordinator.reload()
        logger.info(
            f"Imported {imported} transactions and {accounts_created} accounts for owner {owner_id}"
        )
        return ImportResult(accounts_created=accounts_created, transactions_imported=imported)

    async def _insert(
        self,
        records: list[TransactionRecord],
        account_id: str,
        owner_id: str,
    ) -> int:
        if not records:
            return 0
        transactions: list[Transaction] = [
            transaction_from_record(record, account_id=account_id, owner_id=owner_id)
            for record in records
        ]
        await self._store.insert_transactions(transactions)
        return len(transactions)

    # Classification

    @staticmethod
    def _unwrap(payload: dict) -> tuple[PayloadKind, Any]:
        try:
            envelope = ExportEnvelope.model_validate(payload)
        except PydanticValidationError as e:
            raise ImportPayloadError(f"Not a valid {FORMAT_NAME} export envelope") from e
        if envelope.version not in SUPPORTED_VERSIONS:
            raise ImportPayloadError(f"Unsupported export version: {envelope.version}")
        return envelope.kind, envelope.data

    @staticmethod
    def _classify_legacy(payload: Any) -> PayloadKind:
        """Structural classification of untagged payloads; ambiguous shapes are rejected."""
        if isinstance(payload, list):
            return "transactions"
        if not isinstance(payload, dict):
            raise ImportPayloadError("Import payload must be a JSON list or object")

        keys = set(payload)
        has_account = "account" in keys
        has_accounts = "accounts" in keys
        if has_account and has_accounts:
            raise ImportPayloadError("Ambiguous payload: both 'account' and 'accounts' present")
        if has_account and keys <= ACCOUNT_KEYS:
            return "account"
        if has_accounts and keys <= SNAPSHOT_KEYS:
            return "snapshot"
        raise ImportPayloadError(f"Unrecognized import payload with keys: {', '.join(sorted(keys))}")

    # Plans

    @staticmethod
    def _plan_transactions(data: Any) -> ImportPlan:
        if not isinstance(data, list):
            raise ImportPayloadError("Transaction import must be a list")
        records = _TRANSACTION_LIST.validate_python(data)
        return ImportPlan(
            kind="transactions",
            message=(
                f"Found {len(records)} transactions. "
                "These will be imported into your active account."
            ),
            transactions=records,
        )

    @staticmethod
    def _plan_account(data: Any) -> ImportPlan:
        if not isinstance(data, dict) or "account" not in data:
            raise ImportPayloadError("Account backup must contain an 'account' object")
        document = AccountDocument.model_validate(data)
        return ImportPlan(
            kind="account",
            message=(
                f'Found account "{document.account.name}" '
                f"with {len(document.transactions)} transactions."
            ),
            accounts=[AccountImport(header=document.account, transactions=document.transactions)],
        )

    @staticmethod
    def _plan_snapshot(data: Any) -> ImportPlan:
        if not isinstance(data, dict) or "accounts" not in data:
            raise ImportPayloadError("Portfolio backup must contain an 'accounts' list")
        document = SnapshotDocument.model_validate(data)

        ids = [record.id.strip() for record in document.accounts]
        if not all(ids):
            raise ImportPayloadError("Portfolio backup has an account without an id")
        if len(set(ids)) != len(ids):
            raise ImportPayloadError("Portfolio backup has duplicate account ids")

        accounts: list[AccountImport] = []
        for record in document.accounts:
            accounts.append(
                AccountImport(
                    header=AccountHeader(name=record.name, cash_balance=record.cash_balance),
                    transactions=document.transactions_by_account.get(record.id, []),
                )
            )
        known_ids = {record.id for record in document.accounts}
        orphaned = sum(
            len(records)
            for account_id, records in document.transactions_by_account.items()
            if account_id not in known_ids
        )
        if orphaned:
            logger.warning(f"Skipping {orphaned} backup transactions that belong to no listed account")

        plan = ImportPlan(kind="snapshot", message="", accounts=accounts)
        plan.message = (
            f"Found full portfolio backup: {plan.account_count} accounts "
            f"and {plan.transaction_count} transactions."
        )
        return plan
