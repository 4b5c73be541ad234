"""SQLAlchemy ORM model definitions."""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    Enum as SqlEnum,
)
from sqlalchemy.orm import relationship

from portfolio_tracker.repositories.sqlalchemy.database import StoreBase, CacheBase
from portfolio_tracker.domain.models.enums import TransactionKind
from portfolio_tracker.domain.models.precision import MONEY_SCALE, SHARES_SCALE


class AccountORM(StoreBase):
    """SQLAlchemy model for Account."""

    __tablename__ = "accounts"

    # Surrogate key preserves creation order
    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(36), unique=True, nullable=False, index=True)
    owner_id = Column(String(255), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    cash_balance = Column(Numeric(precision=18, scale=MONEY_SCALE), nullable=False, default=Decimal("0"))
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    transactions = relationship("TransactionORM", back_populates="account")


class TransactionORM(StoreBase):
    """SQLAlchemy model for Transaction (ledger entry)."""

    __tablename__ = "transactions"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(36), unique=True, nullable=False, index=True)
    account_id = Column(String(36), ForeignKey("accounts.id"), nullable=False, index=True)
    owner_id = Column(String(255), nullable=False, index=True)
    kind = Column(SqlEnum(TransactionKind), nullable=False)
    ticker = Column(String(20), nullable=False, default="")
    company_name = Column(String(255), nullable=False, default="")
    shares = Column(Numeric(precision=18, scale=SHARES_SCALE), nullable=False)
    price = Column(Numeric(precision=18, scale=MONEY_SCALE), nullable=False)
    trade_date = Column(Date, nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    account = relationship("AccountORM", back_populates="transactions")


class SnapshotCacheORM(CacheBase):
    """Serialized portfolio snapshot, one row per owner."""

    __tablename__ = "snapshot_cache"

    owner_id = Column(String(255), primary_key=True)
    payload = Column(Text, nullable=False)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow)


class ActiveAccountORM(CacheBase):
    """Last active account per owner."""

    __tablename__ = "active_accounts"

    owner_id = Column(String(255), primary_key=True)
    account_id = Column(String(36), nullable=False)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow)
