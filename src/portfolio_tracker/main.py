"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from portfolio_tracker import __version__
from portfolio_tracker.api.routers import (
    accounts_router,
    data_router,
    portfolio_router,
    transactions_router,
)
from portfolio_tracker.app_context import get_app_context
from portfolio_tracker.config.logging_config import setup_logging
from portfolio_tracker.config.settings import get_settings
from portfolio_tracker.core.exceptions import AppError

ERROR_STATUS = {
    "NOT_FOUND": 404,
    "STORE_ERROR": 502,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    setup_logging()
    context = get_app_context()
    if not context.is_initialized:
        context.initialize()
    yield
    # Shutdown
    context.close()


settings = get_settings()

app = FastAPI(
    title=settings.app_name,
    description="Multi-account portfolio tracker with a ledger-derived position engine",
    version=__version__,
    lifespan=lifespan,
)

# Include routers
app.include_router(accounts_router)
app.include_router(transactions_router)
app.include_router(portfolio_router)
app.include_router(data_router)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Global handler for application errors."""
    return JSONResponse(
        status_code=ERROR_STATUS.get(exc.code, 400),
        content={"error": exc.code, "message": exc.message},
    )


@app.get("/health")
def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/")
def root() -> dict[str, str]:
    """Root endpoint with API info."""
    return {
        "app": settings.app_name,
        "version": __version__,
        "docs": "/docs",
    }
