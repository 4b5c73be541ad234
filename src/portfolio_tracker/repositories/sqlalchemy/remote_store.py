"""SQLAlchemy implementation of RemoteStore."""

import logging
import uuid
from contextlib import contextmanager
from datetime import datetime
from decimal import Decimal
from typing import Any, Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from portfolio_tracker.core.exceptions import StoreError
from portfolio_tracker.domain.models import Account, Transaction, round_money, round_shares
from portfolio_tracker.repositories.sqlalchemy.orm_models import AccountORM, TransactionORM

logger = logging.getLogger(__name__)

# Fields a stored transaction may change after creation
MUTABLE_TRANSACTION_FIELDS = ("shares", "price", "date", "notes")


class SqlAlchemyRemoteStore:
    """
    SQLAlchemy-backed authoritative store.

    Each call runs in its own session and unit of work. Statements run inline on
    the event loop thread; the coroutine interface is the suspension boundary
    callers program against.
    """

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    @contextmanager
    def _unit_of_work(self, operation: str) -> Iterator[Session]:
        """Yield a session; commit on success, roll back and raise StoreError on failure."""
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Store operation {operation} failed: {e}")
            raise StoreError(f"{operation} failed: {e}") from e
        except StoreError:
            session.rollback()
            raise
        finally:
            session.close()

    # Accounts

    async def list_accounts(self, owner_id: str) -> list[Account]:
        with self._unit_of_work("list_accounts") as db:
            rows = (
                db.query(AccountORM)
                .filter(AccountORM.owner_id == owner_id)
                .order_by(AccountORM.seq)
                .all()
            )
            return [self._account_to_domain(a) for a in rows]

    async def create_account(self, owner_id: str, name: str, cash: Decimal) -> Account:
        with self._unit_of_work("create_account") as db:
            orm_account = AccountORM(
                id=str(uuid.uuid4()),
                owner_id=owner_id,
                name=name,
                cash_balance=round_money(cash),
                created_at=datetime.utcnow(),
            )
            db.add(orm_account)
            db.flush()
            return self._account_to_domain(orm_account)

    async def update_account_cash(self, account_id: str, cash: Decimal) -> None:
        with self._unit_of_work("update_account_cash") as db:
            self._set_cash(db, account_id, cash)

    async def rename_account(self, account_id: str, name: str) -> None:
        with self._unit_of_work("rename_account") as db:
            orm_account = self._get_account_row(db, account_id)
            orm_account.name = name

    async def delete_account(self, account_id: str) -> None:
        with self._unit_of_work("delete_account") as db:
            orm_account = self._get_account_row(db, account_id)
            db.query(TransactionORM).filter(
                TransactionORM.account_id == account_id
            ).delete(synchronize_session=False)
            db.delete(orm_account)

    # Transactions

    async def list_transactions(self, owner_id: str) -> list[Transaction]:
        with self._unit_of_work("list_transactions") as db:
            rows = (
                db.query(TransactionORM)
                .filter(TransactionORM.owner_id == owner_id)
                .order_by(TransactionORM.trade_date, TransactionORM.seq)
                .all()
            )
            return [self._transaction_to_domain(t) for t in rows]

    async def insert_transaction(self, txn: Transaction) -> Transaction:
        with self._unit_of_work("insert_transaction") as db:
            return self._insert(db, txn)

    async def insert_transactions(self, txns: list[Transaction]) -> list[Transaction]:
        if not txns:
            return []
        with self._unit_of_work("insert_transactions") as db:
            return [self._insert(db, txn) for txn in txns]

    async def update_transaction(self, txn_id: str, fields: dict[str, Any]) -> None:
        unknown = set(fields) - set(MUTABLE_TRANSACTION_FIELDS)
        if unknown:
            raise StoreError(f"update_transaction rejected immutable fields: {sorted(unknown)}")
        with self._unit_of_work("update_transaction") as db:
            orm_txn = self._get_transaction_row(db, txn_id)
            for key, value in self._rounded(fields).items():
                setattr(orm_txn, "trade_date" if key == "date" else key, value)

    async def delete_transaction(self, txn_id: str) -> None:
        with self._unit_of_work("delete_transaction") as db:
            db.delete(self._get_transaction_row(db, txn_id))

    async def record_transaction(
        self,
        account_id: str,
        cash: Decimal,
        txn: Transaction,
    ) -> Transaction:
        with self._unit_of_work("record_transaction") as db:
            # Cash first; if it fails the row is never written
            self._set_cash(db, account_id, cash)
            db.flush()
            return self._insert(db, txn)

    async def remove_transaction(self, account_id: str, cash: Decimal, txn_id: str) -> None:
        with self._unit_of_work("remove_transaction") as db:
            self._set_cash(db, account_id, cash)
            db.flush()
            orm_txn = self._get_transaction_row(db, txn_id)
            if orm_txn.account_id != account_id:
                raise StoreError(f"Transaction {txn_id} does not belong to account {account_id}")
            db.delete(orm_txn)

    # Helpers

    def _set_cash(self, db: Session, account_id: str, cash: Decimal) -> None:
        orm_account = self._get_account_row(db, account_id)
        orm_account.cash_balance = round_money(cash)

    @staticmethod
    def _rounded(fields: dict[str, Any]) -> dict[str, Any]:
        """Round amount fields to their column scales."""
        rounded = dict(fields)
        if "shares" in rounded:
            rounded["shares"] = round_shares(rounded["shares"])
        if "price" in rounded:
            rounded["price"] = round_money(rounded["price"])
        return rounded

    @staticmethod
    def _get_account_row(db: Session, account_id: str) -> AccountORM:
        orm_account = db.query(AccountORM).filter(AccountORM.id == account_id).first()
        if orm_account is None:
            raise StoreError(f"Account not found: {account_id}")
        return orm_account

    @staticmethod
    def _get_transaction_row(db: Session, txn_id: str) -> TransactionORM:
        orm_txn = db.query(TransactionORM).filter(TransactionORM.id == txn_id).first()
        if orm_txn is None:
            raise StoreError(f"Transaction not found: {txn_id}")
        return orm_txn

    def _insert(self, db: Session, txn: Transaction) -> Transaction:
        self._get_account_row(db, txn.account_id)
        orm_txn = TransactionORM(
            id=str(uuid.uuid4()),
            account_id=txn.account_id,
            owner_id=txn.owner_id,
            kind=txn.kind,
            ticker=txn.ticker,
            company_name=txn.company_name,
            shares=round_shares(txn.shares),
            price=round_money(txn.price),
            trade_date=txn.date,
            notes=txn.notes,
            created_at=datetime.utcnow(),
        )
        db.add(orm_txn)
        db.flush()
        return self._transaction_to_domain(orm_txn)

    @staticmethod
    def _account_to_domain(orm: AccountORM) -> Account:
        """Convert ORM model to domain model."""
        return Account(
            id=orm.id,
            owner_id=orm.owner_id,
            name=orm.name,
            cash_balance=Decimal(str(orm.cash_balance)) if orm.cash_balance is not None else Decimal("0"),
        )

    @staticmethod
    def _transaction_to_domain(orm: TransactionORM) -> Transaction:
        """Convert ORM model to domain model."""
        return Transaction(
            id=orm.id,
            account_id=orm.account_id,
            owner_id=orm.owner_id,
            kind=orm.kind,
            ticker=orm.ticker or "",
            company_name=orm.company_name or "",
            shares=Decimal(str(orm.shares)),
            price=Decimal(str(orm.price)),
            date=orm.trade_date,
            notes=orm.notes,
        )
