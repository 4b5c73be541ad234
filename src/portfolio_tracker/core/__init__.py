"""Core utilities and shared functionality."""

from portfolio_tracker.core.timezone import (
    now_eastern,
    today_eastern,
    to_eastern,
    parse_trade_date,
    EASTERN_TZ,
)
from portfolio_tracker.core.exceptions import (
    AppError,
    ValidationError,
    NotFoundError,
    LastAccountError,
    StoreError,
    CacheInvalidError,
    ImportPayloadError,
    SyncStateError,
)

__all__ = [
    "now_eastern",
    "today_eastern",
    "to_eastern",
    "parse_trade_date",
    "EASTERN_TZ",
    "AppError",
    "ValidationError",
    "NotFoundError",
    "LastAccountError",
    "StoreError",
    "CacheInvalidError",
    "ImportPayloadError",
    "SyncStateError",
]
