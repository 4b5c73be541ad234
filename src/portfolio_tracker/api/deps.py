"""Dependency injection for FastAPI."""

from fastapi import Depends, Header

from portfolio_tracker.app_context import AppContext, get_app_context
from portfolio_tracker.core.exceptions import ValidationError
from portfolio_tracker.services import PortfolioSession


def get_context() -> AppContext:
    """Provide the application context."""
    return get_app_context()


def get_owner_id(x_owner_id: str = Header(..., alias="X-Owner-Id")) -> str:
    """Owner identity supplied by the authenticating front end."""
    owner_id = x_owner_id.strip()
    if not owner_id:
        raise ValidationError("X-Owner-Id header cannot be empty")
    return owner_id


async def get_session(
    owner_id: str = Depends(get_owner_id),
    context: AppContext = Depends(get_context),
) -> PortfolioSession:
    """Provide the owner's loaded PortfolioSession."""
    return await context.session_for(owner_id)
