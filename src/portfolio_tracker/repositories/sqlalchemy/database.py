"""Database engines and session factories for the remote store and local cache."""

from sqlalchemy import create_engine, Engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

# Authoritative store tables
StoreBase = declarative_base()

# Local snapshot cache tables (kept in a separate database)
CacheBase = declarative_base()


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """Create an engine, applying SQLite-specific connection settings."""
    if not database_url.startswith("sqlite"):
        return create_engine(database_url, echo=echo)

    kwargs = {"connect_args": {"check_same_thread": False}, "echo": echo}
    if ":memory:" in database_url or database_url in ("sqlite://", "sqlite:///"):
        # One shared connection so every session sees the same in-memory database
        kwargs["poolclass"] = StaticPool
    return create_engine(database_url, **kwargs)


def build_session_factory(engine: Engine) -> sessionmaker:
    """Create a session factory bound to an engine."""
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        bind=engine,
    )


def init_store_schema(engine: Engine) -> None:
    """Create remote store tables."""
    from portfolio_tracker.repositories.sqlalchemy import orm_models  # noqa: F401

    StoreBase.metadata.create_all(bind=engine)


def init_cache_schema(engine: Engine) -> None:
    """Create local cache tables."""
    from portfolio_tracker.repositories.sqlalchemy import orm_models  # noqa: F401

    CacheBase.metadata.create_all(bind=engine)
