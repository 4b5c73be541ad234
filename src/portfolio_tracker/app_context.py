"""Application context: wiring of settings, databases, providers and sessions.

One AppContext serves every owner. It holds the engines and the shared
market data service, and keeps one PortfolioSession per owner so all of an
owner's mutations go through a single coordinator.
"""

import asyncio
import logging
from typing import Optional

from sqlalchemy import Engine

from portfolio_tracker.config.settings import Settings, get_settings
from portfolio_tracker.providers import (
    MarketDataProvider,
    StubMarketDataProvider,
    YFinanceMarketDataProvider,
)
from portfolio_tracker.repositories.sqlalchemy import (
    SqlAlchemyRemoteStore,
    SqlAlchemySnapshotStore,
    build_engine,
    build_session_factory,
    init_cache_schema,
    init_store_schema,
)
from portfolio_tracker.services import (
    MarketDataService,
    PortfolioSession,
    SessionContext,
    SnapshotCache,
)

logger = logging.getLogger(__name__)


def build_provider(settings: Settings) -> MarketDataProvider:
    """Market data provider selected by settings."""
    if settings.market_data_provider == "yfinance":
        return YFinanceMarketDataProvider(
            fetch_timeout_seconds=settings.quote_fetch_timeout_seconds,
            fallback=StubMarketDataProvider(),
        )
    return StubMarketDataProvider()


class AppContext:
    """
    Application context providing access to per-owner portfolio sessions.

    Call initialize() before use; the FastAPI lifespan does this on startup.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        provider: Optional[MarketDataProvider] = None,
    ):
        self._settings = settings
        self._provider = provider
        self._store_engine: Optional[Engine] = None
        self._cache_engine: Optional[Engine] = None
        self._store: Optional[SqlAlchemyRemoteStore] = None
        self._cache: Optional[SnapshotCache] = None
        self._market_data: Optional[MarketDataService] = None
        self._sessions: dict[str, PortfolioSession] = {}
        self._sessions_lock: Optional[asyncio.Lock] = None
        self._initialized = False

    def initialize(self) -> None:
        """Create engines and schemas and the shared services."""
        settings = self.settings

        self._store_engine = build_engine(settings.get_database_url())
        self._cache_engine = build_engine(settings.get_cache_database_url())
        init_store_schema(self._store_engine)
        init_cache_schema(self._cache_engine)

        self._store = SqlAlchemyRemoteStore(build_session_factory(self._store_engine))
        self._cache = SnapshotCache(SqlAlchemySnapshotStore(build_session_factory(self._cache_engine)))
        self._market_data = MarketDataService(
            provider=self._provider or build_provider(settings),
            cache_ttl_seconds=settings.market_data_cache_ttl_seconds,
        )
        self._sessions = {}
        self._initialized = True
        logger.info(f"Initialized {settings.app_name} ({settings.market_data_provider} market data)")

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    @property
    def store(self) -> SqlAlchemyRemoteStore:
        self._require_initialized()
        return self._store

    @property
    def cache(self) -> SnapshotCache:
        self._require_initialized()
        return self._cache

    @property
    def market_data(self) -> MarketDataService:
        self._require_initialized()
        return self._market_data

    async def session_for(self, owner_id: str) -> PortfolioSession:
        """
        Get the owner's session, loading it on first use.

        A session whose initial load fails is not kept; the next request
        starts a fresh one.
        """
        self._require_initialized()
        if self._sessions_lock is None:
            self._sessions_lock = asyncio.Lock()

        async with self._sessions_lock:
            session = self._sessions.get(owner_id)
            if session is not None:
                return session

            settings = self.settings
            context = SessionContext(
                owner_id=owner_id,
                last_active_account_id=self._cache.last_active_account_id(owner_id),
            )
            session = PortfolioSession(
                store=self._store,
                cache=self._cache,
                market_data_service=self._market_data,
                context=context,
                default_account_name=settings.default_account_name,
                default_starting_cash=settings.default_starting_cash,
                epsilon=settings.position_epsilon,
            )
            await session.start()
            self._sessions[owner_id] = session
            return session

    def close(self) -> None:
        """Dispose engines and forget all sessions."""
        self._sessions.clear()
        for engine in (self._store_engine, self._cache_engine):
            if engine is not None:
                engine.dispose()
        self._store_engine = None
        self._cache_engine = None
        self._initialized = False

    def _require_initialized(self) -> None:
        if not self._initialized:
            self.initialize()


# Global application context
_app_context: Optional[AppContext] = None


def get_app_context() -> AppContext:
    """Get or create the global application context."""
    global _app_context
    if _app_context is None:
        _app_context = AppContext()
    return _app_context


def set_app_context(context: Optional[AppContext]) -> None:
    """Set (or clear) the global application context."""
    global _app_context
    _app_context = context
