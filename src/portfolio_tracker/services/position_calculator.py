"""Position calculator: derives holdings and average cost from a ledger."""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable

from portfolio_tracker.domain.models import Transaction, TransactionKind
from portfolio_tracker.domain.views import Position

DEFAULT_EPSILON = Decimal("0.00001")


@dataclass
class _RunningPosition:
    company_name: str
    shares: Decimal = field(default_factory=lambda: Decimal("0"))
    cost_basis: Decimal = field(default_factory=lambda: Decimal("0"))


def sort_chronologically(transactions: Iterable[Transaction]) -> list[Transaction]:
    """Order transactions by trade date, keeping ledger order within a day."""
    return sorted(transactions, key=lambda t: t.date)


def calculate_positions(
    transactions: Iterable[Transaction],
    epsilon: Decimal = DEFAULT_EPSILON,
) -> list[Position]:
    """
    Reduce one account's transactions to open positions.

    Weighted-average cost method, applied in the order received:
    - BUY adds shares and shares * price to the cost basis
    - SELL removes shares and cost at the running per-share cost, so the
      average cost of what remains never changes on a sale
    - DEPOSIT/WITHDRAWAL do not touch positions

    Selling more than is held is not rejected and leaves shares negative;
    such positions (and closed ones, at or below epsilon) are omitted.
    Output is sorted by ticker.
    """
    running: dict[str, _RunningPosition] = {}

    for txn in transactions:
        if not txn.is_trade:
            continue

        pos = running.get(txn.ticker)
        if pos is None:
            pos = running[txn.ticker] = _RunningPosition(company_name=txn.company_name)

        if txn.kind == TransactionKind.BUY:
            pos.shares += txn.shares
            pos.cost_basis += txn.shares * txn.price
        else:
            per_share_cost = pos.cost_basis / pos.shares if pos.shares > 0 else Decimal("0")
            pos.cost_basis -= txn.shares * per_share_cost
            pos.shares -= txn.shares

        if txn.company_name:
            pos.company_name = txn.company_name

    return [
        Position(
            ticker=ticker,
            company_name=pos.company_name,
            shares=pos.shares,
            cost_basis=pos.cost_basis,
            average_cost=pos.cost_basis / pos.shares,
        )
        for ticker, pos in sorted(running.items())
        if pos.shares > epsilon
    ]
