"""Timezone utilities for US/Eastern market time."""

from datetime import date, datetime
from typing import Union

import pytz
from dateutil import parser as date_parser

EASTERN_TZ = pytz.timezone("US/Eastern")


def now_eastern() -> datetime:
    """Return current time in US/Eastern timezone."""
    return datetime.now(EASTERN_TZ)


def today_eastern() -> date:
    """Return the current calendar date in US/Eastern timezone."""
    return now_eastern().date()


def to_eastern(dt: datetime) -> datetime:
    """Convert a datetime to US/Eastern timezone."""
    if dt.tzinfo is None:
        # Assume naive datetime is already Eastern
        return EASTERN_TZ.localize(dt)
    return dt.astimezone(EASTERN_TZ)


def parse_trade_date(value: Union[str, date, datetime]) -> date:
    """
    Parse a trade date from a string, date or datetime.

    Timestamps with an offset are converted to Eastern before taking the date.
    """
    if isinstance(value, datetime):
        return to_eastern(value).date()
    if isinstance(value, date):
        return value
    dt = date_parser.parse(value)
    if dt.tzinfo is not None:
        dt = dt.astimezone(EASTERN_TZ)
    return dt.date()
