"""
Database module for the indicator engine.

Provides SQLite database connection and models.
"""

from indicator_engine.db.database import (
    get_db,
    get_db_context,
    init_db,
    close_db,
    create_engine,
    create_session_factory,
    get_session_factory,
    add_price_bars,
)
from indicator_engine.db.models import (
    Base,
    StockData,
    IndicatorData,
    BollingerBandsData,
    ChartPreset,
)

__all__ = [
    "get_db",
    "get_db_context",
    "init_db",
    "close_db",
    "create_engine",
    "create_session_factory",
    "get_session_factory",
    "add_price_bars",
    "Base",
    "StockData",
    "IndicatorData",
    "BollingerBandsData",
    "ChartPreset",
]
