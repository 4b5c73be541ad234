"""Pydantic schemas for portfolio valuation endpoints."""

import datetime as dt
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel


class PositionResponse(BaseModel):
    """Response schema for a valued position."""

    model_config = {"from_attributes": True}

    ticker: str
    company_name: str
    shares: Decimal
    average_cost: Decimal
    current_price: Optional[Decimal] = None
    market_value: Optional[Decimal] = None
    gain_loss: Optional[Decimal] = None
    volume: Optional[int] = None
    day_high: Optional[Decimal] = None
    day_low: Optional[Decimal] = None
    previous_close: Optional[Decimal] = None


class SummaryResponse(BaseModel):
    model_config = {"from_attributes": True}

    total_market_value: Decimal
    total_cost_basis: Decimal
    total_gain_loss: Decimal
    total_gain_loss_percent: Decimal
    trading_cash: Decimal


class ValuationResponse(BaseModel):
    """Response schema for the active account's valuation."""

    model_config = {"from_attributes": True}

    account_id: str
    epoch: int
    positions: list[PositionResponse]
    summary: SummaryResponse
    is_degraded: bool
    degraded_tickers: list[str]
    as_of: Optional[dt.datetime] = None


class HistoryPointResponse(BaseModel):
    model_config = {"from_attributes": True}

    date: dt.date
    value: Decimal


class HistoryResponse(BaseModel):
    """Response schema for portfolio value history."""

    days: int
    epoch: int
    points: list[HistoryPointResponse]
    is_degraded: bool
    degraded_tickers: list[str]


class ReloadResponse(BaseModel):
    """Response schema after a full reload from the remote store."""

    account_count: int
    transaction_count: int
    active_account_id: Optional[str] = None
