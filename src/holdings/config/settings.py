"""Application settings and configuration."""

from pathlib import Path
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CACHE_KEY = "stock_holdings_cache"
DEFAULT_HOLDINGS_URL = "https://35dee773a9ec441e9f38d5fc249406ce.api.mockbin.io/"


def get_default_data_dir() -> Path:
    """Return the default data directory based on platform."""
    return Path.home() / ".holdings"


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    app_name: str = "Stock Holdings"
    app_version: str = "0.1.0"

    # Data directory (the cache database lives here)
    data_dir: Optional[Path] = None

    # Database URL (derived from data_dir if not set explicitly)
    database_url: Optional[str] = None

    log_level: str = "INFO"

    # Cache behavior
    cache_key: str = DEFAULT_CACHE_KEY
    cache_expiry_seconds: float = 300.0
    cache_retention_hours: float = 24.0
    stale_after_seconds: float = 300.0

    # Remote source
    holdings_provider: Literal["http", "stub"] = "http"
    holdings_url: str = DEFAULT_HOLDINGS_URL
    request_timeout_seconds: float = 30.0

    # Raise AllSourcesFailedError instead of NoDataAvailableError when both
    # the network and the cache fallback raised.
    detailed_errors: bool = False

    def get_data_dir(self) -> Path:
        """Get the data directory, creating it if needed."""
        data_dir = self.data_dir or get_default_data_dir()
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir

    def get_database_url(self) -> str:
        """Get database URL, deriving from data_dir if not set."""
        if self.database_url:
            return self.database_url
        db_path = self.get_data_dir() / "holdings_cache.db"
        return f"sqlite:///{db_path}"


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
