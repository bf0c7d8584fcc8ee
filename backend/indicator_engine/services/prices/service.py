"""
Price Source Implementation

Reads close prices from the stock_data table.
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from indicator_engine.db.models import StockData
from indicator_engine.schemas.market import PricePoint, Timeframe, normalize_symbol
from indicator_engine.services.prices.interface import PriceSourceInterface

logger = logging.getLogger(__name__)


class SQLPriceSource(PriceSourceInterface):
    """Price source over the local SQLite stock_data table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def get_closes(self, symbol: str, timeframe: Timeframe) -> list[PricePoint]:
        symbol = normalize_symbol(symbol)
        async with self._session_factory() as session:
            result = await session.execute(
                select(StockData.close)
                .where(
                    StockData.symbol == symbol,
                    StockData.timeframe == timeframe.value,
                )
                .order_by(StockData.date.asc())
            )
            closes = result.scalars().all()

        logger.info(f"Fetched {len(closes)} {timeframe.value} closes for {symbol}")
        return [PricePoint(index=i, close=close) for i, close in enumerate(closes)]
