"""Decimal scales of stored quantities and amounts."""

from decimal import Decimal

# Column scales in the remote store
SHARES_SCALE = 8
MONEY_SCALE = 4

_SHARES_QUANTUM = Decimal(1).scaleb(-SHARES_SCALE)
_MONEY_QUANTUM = Decimal(1).scaleb(-MONEY_SCALE)


def round_shares(value: Decimal) -> Decimal:
    """Round a share count to the stored scale."""
    return value.quantize(_SHARES_QUANTUM)


def round_money(value: Decimal) -> Decimal:
    """Round a price or cash balance to the stored scale."""
    return value.quantize(_MONEY_QUANTUM)
