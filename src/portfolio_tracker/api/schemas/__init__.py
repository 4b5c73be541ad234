"""Pydantic schemas for API request/response."""

from portfolio_tracker.api.schemas.account import (
    AccountCreate,
    AccountRename,
    CashSetRequest,
    CashAmountRequest,
    AccountResponse,
    AccountListResponse,
)
from portfolio_tracker.api.schemas.transaction import (
    TransactionCreateRequest,
    TransactionUpdateRequest,
    TransactionResponse,
    TransactionListResponse,
)
from portfolio_tracker.api.schemas.portfolio import (
    PositionResponse,
    SummaryResponse,
    ValuationResponse,
    HistoryPointResponse,
    HistoryResponse,
    ReloadResponse,
)
from portfolio_tracker.api.schemas.data import (
    ImportPreviewResponse,
    ImportResultResponse,
)

__all__ = [
    "AccountCreate",
    "AccountRename",
    "CashSetRequest",
    "CashAmountRequest",
    "AccountResponse",
    "AccountListResponse",
    "TransactionCreateRequest",
    "TransactionUpdateRequest",
    "TransactionResponse",
    "TransactionListResponse",
    "PositionResponse",
    "SummaryResponse",
    "ValuationResponse",
    "HistoryPointResponse",
    "HistoryResponse",
    "ReloadResponse",
    "ImportPreviewResponse",
    "ImportResultResponse",
]
