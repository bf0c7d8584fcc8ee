"""
Database connection and session management.

Uses SQLite with aiosqlite for async support.
"""

import os
import logging
from typing import AsyncGenerator, Optional
from contextlib import asynccontextmanager

from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from indicator_engine.db.models import Base, StockData
from indicator_engine.core.config import settings
from indicator_engine.schemas.market import PriceBar, Timeframe, normalize_symbol

logger = logging.getLogger(__name__)

# Database path - create data directory if needed
DATA_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(__file__))), "data")

# SQLite database URL
SQLITE_PATH = settings.sqlite_path or os.path.join(DATA_DIR, "indicators.db")
DATABASE_URL = settings.database_url or f"sqlite+aiosqlite:///{SQLITE_PATH}"


def create_engine(url: str = DATABASE_URL) -> AsyncEngine:
    """
    Create an async SQLite engine.
    Note: SQLite requires check_same_thread=False for async
    """
    if url == DATABASE_URL and not settings.database_url:
        os.makedirs(DATA_DIR, exist_ok=True)
    return create_async_engine(
        url,
        echo=False,  # Set to True for SQL debugging
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,  # Recommended for SQLite
    )


def create_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


# Created lazily so importing the package never touches the filesystem
engine: Optional[AsyncEngine] = None
AsyncSessionLocal: Optional[async_sessionmaker[AsyncSession]] = None


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get the application session factory, creating the engine on first use."""
    global engine, AsyncSessionLocal
    if AsyncSessionLocal is None:
        engine = create_engine()
        AsyncSessionLocal = create_session_factory(engine)
    return AsyncSessionLocal


async def init_db(bind: Optional[AsyncEngine] = None) -> None:
    """
    Initialize the database - create all tables.
    Called on application startup.
    """
    if bind is None:
        get_session_factory()
        bind = engine
    try:
        async with bind.begin() as conn:
            # Create all tables
            await conn.run_sync(Base.metadata.create_all)
        logger.info(f"Database initialized at: {bind.url}")
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        raise


async def close_db() -> None:
    """
    Close database connections.
    Called on application shutdown.
    """
    global engine, AsyncSessionLocal
    if engine is not None:
        await engine.dispose()
        logger.info("Database connections closed")
    engine = None
    AsyncSessionLocal = None


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency that provides a database session.
    Use with FastAPI Depends().
    """
    async with get_session_factory()() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


@asynccontextmanager
async def get_db_context() -> AsyncGenerator[AsyncSession, None]:
    """
    Context manager for database sessions.
    Use when not in a FastAPI route.
    """
    async with get_session_factory()() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# CRUD helper functions

async def add_price_bars(
    session: AsyncSession,
    symbol: str,
    timeframe: Timeframe,
    bars: list[PriceBar],
    name: Optional[str] = None,
) -> int:
    """
    Insert price bars for a symbol/timeframe.
    A bar at an existing date replaces the stored one.
    """
    if not bars:
        return 0

    symbol = normalize_symbol(symbol)
    rows = [
        {
            "symbol": symbol,
            "name": name,
            "date": bar.timestamp,
            "timeframe": timeframe.value,
            "open": bar.open,
            "high": bar.high,
            "low": bar.low,
            "close": bar.close,
            "volume": bar.volume,
        }
        for bar in bars
    ]
    stmt = sqlite_insert(StockData).values(rows)
    stmt = stmt.on_conflict_do_update(
        index_elements=["symbol", "timeframe", "date"],
        set_={
            "open": stmt.excluded.open,
            "high": stmt.excluded.high,
            "low": stmt.excluded.low,
            "close": stmt.excluded.close,
            "volume": stmt.excluded.volume,
        },
    )
    await session.execute(stmt)
    await session.flush()
    logger.info(f"Stored {len(rows)} {timeframe.value} bars for {symbol}")
    return len(rows)
