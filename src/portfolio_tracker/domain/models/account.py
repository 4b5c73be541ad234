"""Account domain model."""

from dataclasses import dataclass, field
from decimal import Decimal


@dataclass
class Account:
    """
    Brokerage-style account.

    Holds exactly one cash balance and belongs to exactly one owner.
    """

    id: str
    owner_id: str
    name: str
    cash_balance: Decimal = field(default_factory=lambda: Decimal("0"))
