"""Portfolio valuation endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from portfolio_tracker.api.deps import get_context, get_session
from portfolio_tracker.api.schemas import (
    HistoryPointResponse,
    HistoryResponse,
    ReloadResponse,
    ValuationResponse,
)
from portfolio_tracker.app_context import AppContext
from portfolio_tracker.services import PortfolioSession

router = APIRouter(prefix="/portfolio", tags=["portfolio"])

STALE_DETAIL = "Portfolio changed while market data was loading; retry the request"


@router.get("/valuation", response_model=ValuationResponse)
async def get_valuation(session: PortfolioSession = Depends(get_session)) -> ValuationResponse:
    """Positions of the active account with quotes and summary totals."""
    valuation = await session.valuation.value_active_account()
    if valuation is None:
        raise HTTPException(status_code=409, detail=STALE_DETAIL)
    return ValuationResponse.model_validate(valuation)


@router.get("/history", response_model=HistoryResponse)
async def get_history(
    days: Optional[int] = Query(None, ge=1, le=365, description="Number of days (default from settings)"),
    session: PortfolioSession = Depends(get_session),
    context: AppContext = Depends(get_context),
) -> HistoryResponse:
    """Daily value of the active account's current holdings."""
    span = days or context.settings.historical_days
    history = await session.valuation.portfolio_history(span)
    if history is None:
        raise HTTPException(status_code=409, detail=STALE_DETAIL)
    return HistoryResponse(
        days=span,
        epoch=history.epoch,
        points=[HistoryPointResponse.model_validate(p) for p in history.points],
        is_degraded=history.is_degraded,
        degraded_tickers=history.degraded_tickers,
    )


@router.post("/reload", response_model=ReloadResponse)
async def reload_portfolio(session: PortfolioSession = Depends(get_session)) -> ReloadResponse:
    """Discard local state and reload everything from the remote store."""
    snapshot = await session.coordinator.reload()
    return ReloadResponse(
        account_count=len(snapshot.accounts),
        transaction_count=snapshot.transaction_count(),
        active_account_id=snapshot.active_account_id,
    )
