"""Transaction domain model."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from portfolio_tracker.domain.models.enums import TransactionKind


@dataclass
class Transaction:
    """
    Ledger entry (source of truth for positions).

    Supports: BUY, SELL, DEPOSIT, WITHDRAWAL.
    - BUY/SELL carry ticker, company_name, shares and price
    - DEPOSIT/WITHDRAWAL leave ticker empty; the amount is shares * price
      (recorded as one unit at the amount)
    - Only shares, price, date and notes change after creation
    """

    id: str
    account_id: str
    owner_id: str
    kind: TransactionKind
    shares: Decimal
    price: Decimal
    date: date
    ticker: str = ""
    company_name: str = ""
    notes: Optional[str] = None

    def __post_init__(self) -> None:
        if isinstance(self.kind, str):
            self.kind = TransactionKind(self.kind)

    @property
    def is_trade(self) -> bool:
        """Return True if this is a BUY or SELL transaction."""
        return self.kind in (TransactionKind.BUY, TransactionKind.SELL)

    @property
    def amount(self) -> Decimal:
        """Gross value of the transaction (shares * price)."""
        return self.shares * self.price
