"""Application settings and configuration."""

from decimal import Decimal
from pathlib import Path
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


def get_default_data_dir() -> Path:
    """Return the default data directory based on platform."""
    return Path.home() / "Documents" / "Portfolio Tracker Data"


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="PORTFOLIO_",
    )

    app_name: str = "Portfolio Tracker"
    app_version: str = "0.1.0"

    # Data directory (local cache and default store live here)
    data_dir: Optional[Path] = None

    # Authoritative store; derived from data_dir if not set explicitly
    database_url: Optional[str] = None

    # Local snapshot cache; derived from data_dir if not set explicitly
    cache_database_url: Optional[str] = None

    # Bootstrap account for owners with no accounts
    default_account_name: str = "My First Account"
    default_starting_cash: Decimal = Decimal("10000")

    # Holdings at or below this share count are treated as closed
    position_epsilon: Decimal = Decimal("0.00001")

    # Market data settings
    market_data_provider: Literal["stub", "yfinance"] = "stub"
    historical_days: int = 30
    quote_fetch_timeout_seconds: float = 10.0
    market_data_cache_ttl_seconds: int = 60

    log_level: str = "INFO"

    def get_data_dir(self) -> Path:
        """Get the data directory, creating it if needed."""
        data_dir = self.data_dir or get_default_data_dir()
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir

    def get_database_url(self) -> str:
        """Get the remote store URL, deriving from data_dir if not set."""
        if self.database_url:
            return self.database_url
        db_path = self.get_data_dir() / "portfolio.db"
        return f"sqlite:///{db_path}"

    def get_cache_database_url(self) -> str:
        """Get the local cache URL, deriving from data_dir if not set."""
        if self.cache_database_url:
            return self.cache_database_url
        cache_path = self.get_data_dir() / "snapshot_cache.db"
        return f"sqlite:///{cache_path}"


# Global settings instance (can be replaced at runtime)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Return the current settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings: Settings) -> None:
    """Set the global settings instance."""
    global _settings
    _settings = settings


def reset_settings() -> None:
    """Reset settings to force reload."""
    global _settings
    _settings = None
