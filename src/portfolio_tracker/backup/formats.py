"""Serialized shapes of portfolio data (cache records, exports, imports)."""

import datetime as dt
from decimal import Decimal
from typing import Any, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from portfolio_tracker.core.timezone import parse_trade_date
from portfolio_tracker.domain.models import (
    Account,
    PortfolioSnapshot,
    Transaction,
    TransactionKind,
)

FORMAT_NAME = "portfolio-tracker"
SCHEMA_VERSION = 1
SUPPORTED_VERSIONS = (1,)

PayloadKind = Literal["transactions", "account", "snapshot"]


class _Record(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class AccountRecord(_Record):
    """Serialized account."""

    id: str = ""
    owner_id: str = Field(
        default="",
        validation_alias=AliasChoices("ownerId", "owner_id", "user_id"),
        serialization_alias="ownerId",
    )
    name: str = Field(min_length=1)
    cash_balance: Decimal = Field(
        default=Decimal("0"),
        validation_alias=AliasChoices("cashBalance", "cash_balance", "cash"),
        serialization_alias="cashBalance",
    )


class AccountHeader(_Record):
    """Name and cash of an account carried by a single-account backup."""

    name: str = Field(min_length=1)
    cash_balance: Decimal = Field(
        default=Decimal("0"),
        validation_alias=AliasChoices("cashBalance", "cash_balance", "cash"),
        serialization_alias="cashBalance",
    )


class TransactionRecord(_Record):
    """Serialized transaction."""

    id: str = ""
    account_id: str = Field(
        default="",
        validation_alias=AliasChoices("accountId", "account_id"),
        serialization_alias="accountId",
    )
    owner_id: str = Field(
        default="",
        validation_alias=AliasChoices("ownerId", "owner_id", "user_id"),
        serialization_alias="ownerId",
    )
    ticker: str = ""
    company_name: str = Field(
        default="",
        validation_alias=AliasChoices("companyName", "company_name"),
        serialization_alias="companyName",
    )
    kind: TransactionKind = Field(
        validation_alias=AliasChoices("kind", "type"),
        serialization_alias="kind",
    )
    shares: Decimal = Field(ge=0)
    price: Decimal = Field(ge=0)
    date: dt.date = Field(validation_alias=AliasChoices("date", "transaction_date"))
    notes: Optional[str] = None

    @field_validator("ticker", mode="before")
    @classmethod
    def _normalize_ticker(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @field_validator("company_name", mode="before")
    @classmethod
    def _normalize_company(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("kind", mode="before")
    @classmethod
    def _normalize_kind(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @field_validator("date", mode="before")
    @classmethod
    def _parse_date(cls, value: Any) -> Any:
        if isinstance(value, str):
            try:
                return parse_trade_date(value)
            except (ValueError, OverflowError) as e:
                raise ValueError(f"Invalid date: {value}") from e
        return value


class SnapshotDocument(_Record):
    """Serialized PortfolioSnapshot (full backup and local cache blob)."""

    accounts: list[AccountRecord]
    transactions_by_account: dict[str, list[TransactionRecord]] = Field(
        validation_alias=AliasChoices("transactionsByAccount", "transactions_by_account", "transactions"),
        serialization_alias="transactionsByAccount",
    )
    active_account_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("activeAccountId", "active_account_id"),
        serialization_alias="activeAccountId",
    )


class AccountDocument(_Record):
    """Single-account backup: one account header plus its transactions."""

    account: AccountHeader
    transactions: list[TransactionRecord] = Field(default_factory=list)


class ExportEnvelope(BaseModel):
    """Tagged, versioned wrapper around exported data."""

    model_config = ConfigDict(extra="forbid")

    format: Literal["portfolio-tracker"]
    version: int
    kind: PayloadKind
    data: Any


# Conversions between records and domain models


def account_to_record(account: Account) -> AccountRecord:
    return AccountRecord(
        id=account.id,
        owner_id=account.owner_id,
        name=account.name,
        cash_balance=account.cash_balance,
    )


def account_from_record(record: AccountRecord) -> Account:
    return Account(
        id=record.id,
        owner_id=record.owner_id,
        name=record.name,
        cash_balance=record.cash_balance,
    )


def transaction_to_record(txn: Transaction) -> TransactionRecord:
    return TransactionRecord(
        id=txn.id,
        account_id=txn.account_id,
        owner_id=txn.owner_id,
        ticker=txn.ticker,
        company_name=txn.company_name,
        kind=txn.kind,
        shares=txn.shares,
        price=txn.price,
        date=txn.date,
        notes=txn.notes,
    )


def transaction_from_record(
    record: TransactionRecord,
    account_id: Optional[str] = None,
    owner_id: Optional[str] = None,
) -> Transaction:
    """Build a domain transaction, optionally re-homing it to another account/owner."""
    is_trade = record.kind in (TransactionKind.BUY, TransactionKind.SELL)
    return Transaction(
        id=record.id,
        account_id=account_id if account_id is not None else record.account_id,
        owner_id=owner_id if owner_id is not None else record.owner_id,
        kind=record.kind,
        shares=record.shares,
        price=record.price,
        date=record.date,
        ticker=record.ticker if is_trade else "",
        company_name=record.company_name if is_trade else "",
        notes=record.notes,
    )


def snapshot_to_document(snapshot: PortfolioSnapshot) -> SnapshotDocument:
    return SnapshotDocument(
        accounts=[account_to_record(a) for a in snapshot.accounts],
        transactions_by_account={
            account_id: [transaction_to_record(t) for t in txns]
            for account_id, txns in snapshot.transactions_by_account.items()
        },
        active_account_id=snapshot.active_account_id,
    )


def snapshot_from_document(document: SnapshotDocument) -> PortfolioSnapshot:
    return PortfolioSnapshot(
        accounts=[account_from_record(a) for a in document.accounts],
        transactions_by_account={
            account_id: [transaction_from_record(t) for t in records]
            for account_id, records in document.transactions_by_account.items()
        },
        active_account_id=document.active_account_id,
    )


def dump_record(model: BaseModel) -> Any:
    """JSON-compatible dict of a record, using the camelCase wire names."""
    return model.model_dump(mode="json", by_alias=True)


def wrap(kind: PayloadKind, data: Any) -> dict[str, Any]:
    """Wrap JSON-compatible data in the tagged export envelope."""
    return ExportEnvelope(
        format=FORMAT_NAME,
        version=SCHEMA_VERSION,
        kind=kind,
        data=data,
    ).model_dump(mode="json")
