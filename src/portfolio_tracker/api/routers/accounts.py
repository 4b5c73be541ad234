"""Account management endpoints."""

from fastapi import APIRouter, Depends, Response

from portfolio_tracker.api.deps import get_session
from portfolio_tracker.api.schemas import (
    AccountCreate,
    AccountListResponse,
    AccountRename,
    AccountResponse,
    CashAmountRequest,
    CashSetRequest,
)
from portfolio_tracker.domain.models import Account
from portfolio_tracker.services import PortfolioSession

router = APIRouter(prefix="/accounts", tags=["accounts"])


def _to_response(session: PortfolioSession, account: Account) -> AccountResponse:
    snapshot = session.snapshot
    return AccountResponse(
        id=account.id,
        name=account.name,
        cash_balance=account.cash_balance,
        is_active=account.id == snapshot.active_account_id,
        transaction_count=len(snapshot.transactions_for(account.id)),
    )


@router.get("", response_model=AccountListResponse)
def list_accounts(session: PortfolioSession = Depends(get_session)) -> AccountListResponse:
    """List the owner's accounts in creation order."""
    accounts = session.accounts.list_accounts()
    return AccountListResponse(
        accounts=[_to_response(session, a) for a in accounts],
        active_account_id=session.snapshot.active_account_id,
        count=len(accounts),
    )


@router.post("", response_model=AccountResponse, status_code=201)
async def create_account(
    data: AccountCreate,
    session: PortfolioSession = Depends(get_session),
) -> AccountResponse:
    """Create an account; it becomes the active account."""
    account = await session.accounts.create_account(data.name, data.cash_balance)
    return _to_response(session, account)


@router.patch("/{account_id}", response_model=AccountResponse)
async def rename_account(
    account_id: str,
    data: AccountRename,
    session: PortfolioSession = Depends(get_session),
) -> AccountResponse:
    account = await session.accounts.rename_account(account_id, data.name)
    return _to_response(session, account)


@router.delete("/{account_id}", status_code=204)
async def delete_account(
    account_id: str,
    session: PortfolioSession = Depends(get_session),
) -> Response:
    """Delete an account and its transactions. The only account cannot be deleted."""
    await session.accounts.delete_account(account_id)
    return Response(status_code=204)


@router.post("/{account_id}/activate", response_model=AccountResponse)
async def activate_account(
    account_id: str,
    session: PortfolioSession = Depends(get_session),
) -> AccountResponse:
    """Make an account the active one."""
    account = session.accounts.switch_account(account_id)
    return _to_response(session, account)


@router.put("/{account_id}/cash", response_model=AccountResponse)
async def set_cash(
    account_id: str,
    data: CashSetRequest,
    session: PortfolioSession = Depends(get_session),
) -> AccountResponse:
    """Override the cash balance without recording a transaction."""
    account = await session.accounts.set_cash(account_id, data.cash_balance)
    return _to_response(session, account)


@router.post("/{account_id}/deposit", response_model=AccountResponse)
async def deposit_cash(
    account_id: str,
    data: CashAmountRequest,
    session: PortfolioSession = Depends(get_session),
) -> AccountResponse:
    """Add cash without recording a transaction."""
    account = await session.accounts.deposit(account_id, data.amount)
    return _to_response(session, account)


@router.post("/{account_id}/withdraw", response_model=AccountResponse)
async def withdraw_cash(
    account_id: str,
    data: CashAmountRequest,
    session: PortfolioSession = Depends(get_session),
) -> AccountResponse:
    """Remove cash without recording a transaction."""
    account = await session.accounts.withdraw(account_id, data.amount)
    return _to_response(session, account)
