"""
Pytest configuration and fixtures for portfolio tracker tests.

This module provides:
- In-memory SQLite engines for the remote store and the snapshot cache
- Deterministic, failing and gated market data providers
- A remote store wrapper that fails selected operations
- Coordinator, service and session fixtures for one owner
- A FastAPI test client wired to in-memory databases
"""

import asyncio
import datetime as dt
from decimal import Decimal
from typing import Any, Optional

import pytest
from fastapi.testclient import TestClient

from portfolio_tracker.app_context import AppContext, set_app_context
from portfolio_tracker.config.settings import Settings, reset_settings
from portfolio_tracker.core.exceptions import StoreError
from portfolio_tracker.domain.models import Transaction, TransactionKind
from portfolio_tracker.domain.views import HistoricalPrice, HistoricalSeries, Quote
from portfolio_tracker.main import app
from portfolio_tracker.repositories.sqlalchemy import (
    SqlAlchemyRemoteStore,
    SqlAlchemySnapshotStore,
    build_engine,
    build_session_factory,
    init_cache_schema,
    init_store_schema,
)
from portfolio_tracker.services import (
    CashAccountant,
    MarketDataService,
    PortfolioSession,
    SessionContext,
    SnapshotCache,
    SyncCoordinator,
)

OWNER_ID = "owner-1"


# =============================================================================
# DATABASE FIXTURES
# =============================================================================


@pytest.fixture(scope="function")
def store_engine():
    """Shared in-memory SQLite engine for the remote store."""
    reset_settings()
    engine = build_engine("sqlite://")
    init_store_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def cache_engine():
    """Shared in-memory SQLite engine for the local snapshot cache."""
    engine = build_engine("sqlite://")
    init_cache_schema(engine)
    yield engine
    engine.dispose()


# =============================================================================
# STORE FIXTURES
# =============================================================================


class FailingRemoteStore:
    """
    Remote store wrapper that raises StoreError for selected operations.

    Operations not listed in fail_on are delegated to the wrapped store.
    """

    def __init__(self, inner: SqlAlchemyRemoteStore):
        self._inner = inner
        self.fail_on: set[str] = set()
        self.calls: list[str] = []

    def __getattr__(self, name: str) -> Any:
        target = getattr(self._inner, name)
        if not callable(target):
            return target

        async def _call(*args, **kwargs):
            self.calls.append(name)
            if name in self.fail_on:
                raise StoreError(f"{name} failed: simulated outage")
            return await target(*args, **kwargs)

        return _call


@pytest.fixture
def sqlalchemy_store(store_engine) -> SqlAlchemyRemoteStore:
    """Provide the SQLAlchemy remote store over the test engine."""
    return SqlAlchemyRemoteStore(build_session_factory(store_engine))


@pytest.fixture
def remote_store(sqlalchemy_store) -> FailingRemoteStore:
    """Provide a remote store whose operations can be made to fail."""
    return FailingRemoteStore(sqlalchemy_store)


@pytest.fixture
def snapshot_store(cache_engine) -> SqlAlchemySnapshotStore:
    return SqlAlchemySnapshotStore(build_session_factory(cache_engine))


@pytest.fixture
def snapshot_cache(snapshot_store) -> SnapshotCache:
    return SnapshotCache(snapshot_store)


# =============================================================================
# MARKET DATA FIXTURES
# =============================================================================


class DeterministicMarketProvider:
    """
    Deterministic market data provider for testing.

    Provides fixed live (non-fallback) quotes; unknown tickers raise.
    """

    FIXED_QUOTES = {
        "AAPL": (Decimal("185.50"), Decimal("184.25"), "Apple Inc."),
        "GOOGL": (Decimal("142.75"), Decimal("141.50"), "Alphabet Inc."),
        "MSFT": (Decimal("378.25"), Decimal("376.80"), "Microsoft Corporation"),
        "TSLA": (Decimal("248.75"), Decimal("250.10"), "Tesla, Inc."),
    }

    def __init__(self):
        self.quote_calls: list[str] = []

    async def fetch_quote(self, ticker: str) -> Quote:
        self.quote_calls.append(ticker)
        if ticker not in self.FIXED_QUOTES:
            raise LookupError(f"No quote for {ticker}")
        price, prev_close, name = self.FIXED_QUOTES[ticker]
        return Quote(
            ticker=ticker,
            company_name=name,
            price=price,
            volume=1_000_000,
            day_high=price + 1,
            day_low=price - 1,
            previous_close=prev_close,
        )

    async def fetch_historical_data(self, ticker: str, days: int) -> HistoricalSeries:
        if ticker not in self.FIXED_QUOTES:
            raise LookupError(f"No history for {ticker}")
        price = self.FIXED_QUOTES[ticker][0]
        start = dt.date(2024, 6, 1)
        return HistoricalSeries(
            ticker=ticker,
            data=[
                HistoricalPrice(date=start + dt.timedelta(days=i), price=price + i)
                for i in range(days)
            ],
        )


class FailingMarketProvider:
    """Market provider that always raises an exception."""

    async def fetch_quote(self, ticker: str) -> Quote:
        raise ConnectionError("Network unavailable")

    async def fetch_historical_data(self, ticker: str, days: int) -> HistoricalSeries:
        raise ConnectionError("Network unavailable")


class GatedMarketProvider(DeterministicMarketProvider):
    """Deterministic provider whose lookups wait until the gate is opened."""

    def __init__(self):
        super().__init__()
        self.started = asyncio.Event()
        self.gate = asyncio.Event()

    async def fetch_quote(self, ticker: str) -> Quote:
        self.started.set()
        await self.gate.wait()
        return await super().fetch_quote(ticker)

    async def fetch_historical_data(self, ticker: str, days: int) -> HistoricalSeries:
        self.started.set()
        await self.gate.wait()
        return await super().fetch_historical_data(ticker, days)


@pytest.fixture
def deterministic_provider() -> DeterministicMarketProvider:
    return DeterministicMarketProvider()


@pytest.fixture
def failing_provider() -> FailingMarketProvider:
    return FailingMarketProvider()


@pytest.fixture
def market_data_service(deterministic_provider) -> MarketDataService:
    """Provide test MarketDataService with deterministic provider."""
    return MarketDataService(provider=deterministic_provider, cache_ttl_seconds=60)


# =============================================================================
# SERVICE FIXTURES
# =============================================================================


@pytest.fixture
def session_context() -> SessionContext:
    return SessionContext(owner_id=OWNER_ID)


@pytest.fixture
def coordinator(remote_store, snapshot_cache, session_context) -> SyncCoordinator:
    """Provide an unloaded SyncCoordinator for OWNER_ID."""
    return SyncCoordinator(
        store=remote_store,
        cache=snapshot_cache,
        context=session_context,
        default_account_name="My First Account",
        default_starting_cash=Decimal("10000"),
    )


@pytest.fixture
def cash_accountant(remote_store) -> CashAccountant:
    return CashAccountant(remote_store)


@pytest.fixture
async def session(remote_store, snapshot_cache, market_data_service, session_context) -> PortfolioSession:
    """Provide a started PortfolioSession (bootstrapped with the default account)."""
    portfolio_session = PortfolioSession(
        store=remote_store,
        cache=snapshot_cache,
        market_data_service=market_data_service,
        context=session_context,
    )
    await portfolio_session.start()
    return portfolio_session


# =============================================================================
# API TEST CLIENT FIXTURE
# =============================================================================


@pytest.fixture
def api_context(deterministic_provider) -> AppContext:
    """Application context over in-memory databases."""
    settings = Settings(database_url="sqlite://", cache_database_url="sqlite://")
    context = AppContext(settings=settings, provider=deterministic_provider)
    set_app_context(context)
    yield context
    set_app_context(None)


@pytest.fixture
def client(api_context) -> TestClient:
    """Provide FastAPI test client with in-memory databases."""
    with TestClient(app) as c:
        c.headers.update({"X-Owner-Id": OWNER_ID})
        yield c


# =============================================================================
# HELPER FUNCTIONS (exported for use in tests)
# =============================================================================


def make_transaction(
    kind: TransactionKind,
    shares: str,
    price: str,
    ticker: str = "",
    on: Optional[dt.date] = None,
    account_id: str = "acct-1",
    txn_id: str = "",
    company_name: str = "",
) -> Transaction:
    """Build an in-memory Transaction for pure calculations."""
    return Transaction(
        id=txn_id,
        account_id=account_id,
        owner_id=OWNER_ID,
        kind=kind,
        shares=Decimal(shares),
        price=Decimal(price),
        date=on or dt.date(2024, 1, 15),
        ticker=ticker,
        company_name=company_name,
    )


def assert_decimal_equal(
    actual: Decimal,
    expected: Decimal,
    tolerance: Decimal = Decimal("0.01"),
) -> None:
    """Assert two Decimals are equal within tolerance."""
    diff = abs(actual - expected)
    assert diff <= tolerance, f"Expected {expected}, got {actual} (diff={diff})"
