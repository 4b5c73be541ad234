"""Pydantic schemas for account endpoints."""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class AccountCreate(BaseModel):
    """Request schema for creating an account."""

    name: str = Field(..., min_length=1, max_length=255, description="Account display name")
    cash_balance: Decimal = Field(default=Decimal("0"), ge=0, description="Starting cash")


class AccountRename(BaseModel):
    """Request schema for renaming an account."""

    name: str = Field(..., min_length=1, max_length=255)


class CashSetRequest(BaseModel):
    """Request schema for overriding an account's cash balance."""

    cash_balance: Decimal = Field(..., description="New cash balance")


class CashAmountRequest(BaseModel):
    """Request schema for a deposit or withdrawal outside the ledger."""

    amount: Decimal = Field(..., gt=0)


class AccountResponse(BaseModel):
    """Response schema for a single account."""

    model_config = {"from_attributes": True}

    id: str
    name: str
    cash_balance: Decimal
    is_active: bool = False
    transaction_count: int = 0


class AccountListResponse(BaseModel):
    """Response schema for listing accounts."""

    accounts: list[AccountResponse]
    active_account_id: Optional[str] = None
    count: int
