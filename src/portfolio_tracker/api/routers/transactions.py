"""Transaction ledger endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response

from portfolio_tracker.api.deps import get_session
from portfolio_tracker.api.schemas import (
    TransactionCreateRequest,
    TransactionListResponse,
    TransactionResponse,
    TransactionUpdateRequest,
)
from portfolio_tracker.core.exceptions import ValidationError
from portfolio_tracker.domain.models import TransactionKind
from portfolio_tracker.services import PortfolioSession, TransactionCreate, TransactionUpdate

router = APIRouter(prefix="/transactions", tags=["transactions"])


def _to_create(data: TransactionCreateRequest) -> TransactionCreate:
    if data.kind in (TransactionKind.DEPOSIT, TransactionKind.WITHDRAWAL) and data.amount is not None:
        return TransactionCreate.cash_movement(data.kind, data.amount, on=data.date, notes=data.notes)

    if data.shares is None or data.price is None:
        raise ValidationError(f"{data.kind.value} requires shares and price")
    return TransactionCreate(
        kind=data.kind,
        shares=data.shares,
        price=data.price,
        date=data.date,
        ticker=data.ticker or "",
        company_name=data.company_name,
        notes=data.notes,
    )


@router.get("", response_model=TransactionListResponse)
def list_transactions(
    account_id: Optional[str] = Query(None, description="Account ID (active account if empty)"),
    session: PortfolioSession = Depends(get_session),
) -> TransactionListResponse:
    """List an account's transactions in ledger order."""
    target = account_id or session.snapshot.active_account_id
    transactions = session.ledger.list_transactions(target)
    return TransactionListResponse(
        account_id=target,
        transactions=[TransactionResponse.model_validate(t) for t in transactions],
        count=len(transactions),
    )


@router.post("", response_model=TransactionResponse, status_code=201)
async def create_transaction(
    data: TransactionCreateRequest,
    session: PortfolioSession = Depends(get_session),
) -> TransactionResponse:
    """Record a transaction and adjust the account's cash."""
    account_id = data.account_id or session.snapshot.active_account_id
    if account_id is None:
        raise ValidationError("No account selected")
    txn = await session.ledger.append(account_id, _to_create(data))
    return TransactionResponse.model_validate(txn)


@router.patch("/{txn_id}", response_model=TransactionResponse)
async def update_transaction(
    txn_id: str,
    data: TransactionUpdateRequest,
    session: PortfolioSession = Depends(get_session),
) -> TransactionResponse:
    """Edit shares, price, date or notes. Cash is not recomputed."""
    patch = TransactionUpdate(
        shares=data.shares,
        price=data.price,
        date=data.date,
        notes=data.notes,
    )
    txn = await session.ledger.update(txn_id, patch)
    return TransactionResponse.model_validate(txn)


@router.delete("/{txn_id}", status_code=204)
async def delete_transaction(
    txn_id: str,
    session: PortfolioSession = Depends(get_session),
) -> Response:
    """Delete a transaction and reverse its cash adjustment."""
    await session.ledger.delete(txn_id)
    return Response(status_code=204)
