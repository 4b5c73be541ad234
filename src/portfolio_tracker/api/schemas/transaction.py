"""Pydantic schemas for transaction endpoints."""

import datetime as dt
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from portfolio_tracker.domain.models import TransactionKind


class TransactionCreateRequest(BaseModel):
    """
    Request schema for creating a transaction.

    BUY/SELL need ticker, shares and price. DEPOSIT/WITHDRAWAL take an
    amount (or shares and price, recorded as given).
    """

    account_id: Optional[str] = Field(default=None, description="Account ID; defaults to the active account")
    kind: TransactionKind = Field(..., description="Transaction kind")
    ticker: Optional[str] = Field(default=None, max_length=20, description="Ticker (required for BUY/SELL)")
    company_name: str = Field(default="", max_length=255)
    shares: Optional[Decimal] = Field(default=None, ge=0)
    price: Optional[Decimal] = Field(default=None, ge=0)
    amount: Optional[Decimal] = Field(default=None, gt=0, description="Cash amount for DEPOSIT/WITHDRAWAL")
    date: Optional[dt.date] = Field(default=None, description="Trade date (US/Eastern); defaults to today")
    notes: Optional[str] = Field(default=None, max_length=500)

    @field_validator("ticker")
    @classmethod
    def uppercase_ticker(cls, v: Optional[str]) -> Optional[str]:
        return v.strip().upper() if v else None


class TransactionUpdateRequest(BaseModel):
    """Request schema for updating a transaction (partial update)."""

    shares: Optional[Decimal] = Field(default=None, ge=0)
    price: Optional[Decimal] = Field(default=None, ge=0)
    date: Optional[dt.date] = None
    notes: Optional[str] = Field(default=None, max_length=500)


class TransactionResponse(BaseModel):
    """Response schema for a single transaction."""

    model_config = {"from_attributes": True}

    id: str
    account_id: str
    kind: TransactionKind
    ticker: str
    company_name: str
    shares: Decimal
    price: Decimal
    amount: Decimal
    date: dt.date
    notes: Optional[str] = None


class TransactionListResponse(BaseModel):
    """Response schema for listing transactions."""

    account_id: Optional[str] = None
    transactions: list[TransactionResponse]
    count: int
