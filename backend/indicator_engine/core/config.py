"""
Application Configuration

All settings loaded from environment variables.
"""

import logging
from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings from environment variables."""

    # Application
    app_name: str = "Indicator Engine"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: str = "development"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # SQLite (local persistence for prices, indicator cache and presets)
    sqlite_path: Optional[str] = None  # Defaults to ./data/indicators.db
    database_url: Optional[str] = None  # Full URL override, e.g. for tests

    # Indicator cache backend: "sql" (same SQLite file) or "redis"
    cache_backend: str = "sql"
    redis_url: str = "redis://localhost:6379"

    # CORS (Frontend URL)
    allowed_origins: list[str] = ["http://localhost:3000"]

    # Presets
    preset_slots: int = 5
    default_user_id: str = "default"

    # Chart defaults
    default_timeframe: str = "1d"
    default_indicator_color: int = -256  # ARGB yellow
    default_indicator_period: int = 20
    default_indicator_width: float = 1.0
    default_std_dev_multiplier: float = 2.0

    # Demo data (development only)
    seed_demo_data: bool = False
    demo_symbols: list[str] = ["AAPL", "MSFT", "TSLA"]
    demo_lookback: int = 250

    # Logging
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()


def configure_logging(level: Optional[str] = None) -> None:
    """Apply the configured log level and format to the root logger."""
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format=settings.log_format,
    )
