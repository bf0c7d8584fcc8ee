"""
SQLAlchemy models for the indicator engine database.

Uses SQLite for local persistence of:
- Price bars per symbol/timeframe (the price source)
- Computed indicator series (the indicator cache)
- Chart presets per user/symbol
"""

from datetime import datetime

from sqlalchemy import (
    Column,
    String,
    Float,
    Integer,
    DateTime,
    Index,
)
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class StockData(Base):
    """
    OHLCV bars per symbol and timeframe.
    Read by the price source as a close-only projection.
    """
    __tablename__ = "stock_data"

    id = Column(Integer, primary_key=True, autoincrement=True)
    symbol = Column(String(20), nullable=False)
    name = Column(String(100), nullable=True)
    date = Column(DateTime, nullable=False)
    timeframe = Column(String(10), nullable=False)  # 5m, 15m, 1h, 1d

    open = Column(Float, nullable=False)
    high = Column(Float, nullable=False)
    low = Column(Float, nullable=False)
    close = Column(Float, nullable=False)
    volume = Column(Integer, default=0)

    __table_args__ = (
        Index("ix_stock_symbol_tf_date", "symbol", "timeframe", "date", unique=True),
    )


class IndicatorData(Base):
    """
    Cached single-line indicator series (SMA, EMA).
    One row per emitted point; a series is the set of rows sharing
    (symbol, indicator_name, indicator_period, timeframe).
    """
    __tablename__ = "indicator_data"

    id = Column(Integer, primary_key=True, autoincrement=True)
    symbol = Column(String(20), nullable=False)
    date = Column(Float, nullable=False)  # chart x index
    indicator_value = Column(Float, nullable=False)
    indicator_period = Column(Integer, nullable=False)
    timeframe = Column(String(10), nullable=False)
    indicator_name = Column(String(30), nullable=False)

    __table_args__ = (
        Index(
            "ix_indicator_lookup",
            "symbol", "indicator_name", "indicator_period", "timeframe",
        ),
    )


class BollingerBandsData(Base):
    """
    Cached Bollinger Bands series.
    Middle/upper/lower share one x index per row.
    """
    __tablename__ = "bollinger_bands_data"

    id = Column(Integer, primary_key=True, autoincrement=True)
    symbol = Column(String(20), nullable=False)
    date = Column(Float, nullable=False)  # chart x index
    middle_band_value = Column(Float, nullable=False)
    upper_band_value = Column(Float, nullable=False)
    lower_band_value = Column(Float, nullable=False)
    period = Column(Integer, nullable=False)
    std_dev_multiplier = Column(Float, nullable=False)
    timeframe = Column(String(10), nullable=False)

    __table_args__ = (
        Index(
            "idx_bollinger_bands_lookup",
            "symbol", "period", "std_dev_multiplier", "timeframe",
        ),
    )


class ChartPreset(Base):
    """
    Saved indicator sets.
    Each row is one indicator inside preset slot preset_id (1..5).
    """
    __tablename__ = "chart_presets"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(50), nullable=False)
    preset_id = Column(Integer, nullable=False)
    symbol = Column(String(20), nullable=False)
    type = Column(String(30), nullable=False)  # IndicatorKind name
    params = Column(String(200), nullable=False)  # color:period:...:width

    created_at = Column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        Index("ix_presets_user_symbol_slot", "user_id", "symbol", "preset_id"),
    )
