"""
SQLite-backed series store.

SMA/EMA points live in indicator_data, Bollinger Bands in
bollinger_bands_data. Lookups always filter on the full key.
"""

import logging
from typing import Optional

from sqlalchemy import delete, exists, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from indicator_engine.db.models import BollingerBandsData, IndicatorData
from indicator_engine.schemas.indicators import IndicatorKind
from indicator_engine.schemas.series import (
    BandSeries,
    CacheKey,
    LineSeries,
    Series,
)
from indicator_engine.services.cache.interface import SeriesStore

logger = logging.getLogger(__name__)


def _is_bands(key: CacheKey) -> bool:
    return key.name == IndicatorKind.BOLLINGER_BANDS.name


def _line_filter(key: CacheKey):
    return (
        IndicatorData.symbol == key.symbol,
        IndicatorData.indicator_name == key.name,
        IndicatorData.indicator_period == key.period,
        IndicatorData.timeframe == key.timeframe,
    )


def _band_filter(key: CacheKey):
    return (
        BollingerBandsData.symbol == key.symbol,
        BollingerBandsData.period == key.period,
        BollingerBandsData.std_dev_multiplier == key.params[0],
        BollingerBandsData.timeframe == key.timeframe,
    )


class SQLSeriesStore(SeriesStore):
    """Series store over the SQLite indicator tables."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    @property
    def name(self) -> str:
        return "SQLSeriesStore"

    async def get(self, key: CacheKey) -> Optional[Series]:
        async with self._session_factory() as session:
            if _is_bands(key):
                result = await session.execute(
                    select(
                        BollingerBandsData.date,
                        BollingerBandsData.middle_band_value,
                        BollingerBandsData.upper_band_value,
                        BollingerBandsData.lower_band_value,
                    )
                    .where(*_band_filter(key))
                    .order_by(BollingerBandsData.date.asc())
                )
                rows = result.all()
                if not rows:
                    return None
                x, middle, upper, lower = zip(*rows)
                return BandSeries(x=x, middle=middle, upper=upper, lower=lower)

            result = await session.execute(
                select(IndicatorData.date, IndicatorData.indicator_value)
                .where(*_line_filter(key))
                .order_by(IndicatorData.date.asc())
            )
            rows = result.all()
            if not rows:
                return None
            return LineSeries(points=tuple((x, v) for x, v in rows))

    async def put_batch(self, key: CacheKey, series: Series) -> None:
        async with self._session_factory() as session:
            # Commits on success, rolls back on any exception
            async with session.begin():
                model = BollingerBandsData if _is_bands(key) else IndicatorData
                where = _band_filter(key) if _is_bands(key) else _line_filter(key)
                already = await session.scalar(select(exists().where(*where)))
                if already:
                    logger.debug(f"Cache entry {key} already written, skipping")
                    return

                if isinstance(series, BandSeries):
                    session.add_all(
                        BollingerBandsData(
                            symbol=key.symbol,
                            date=x,
                            middle_band_value=m,
                            upper_band_value=u,
                            lower_band_value=lo,
                            period=key.period,
                            std_dev_multiplier=key.params[0],
                            timeframe=key.timeframe,
                        )
                        for x, m, u, lo in zip(
                            series.x, series.middle, series.upper, series.lower
                        )
                    )
                else:
                    session.add_all(
                        IndicatorData(
                            symbol=key.symbol,
                            date=x,
                            indicator_value=v,
                            indicator_period=key.period,
                            timeframe=key.timeframe,
                            indicator_name=key.name,
                        )
                        for x, v in series.points
                    )
                await session.flush()
        logger.info(f"Inserted {len(series)} {model.__tablename__} rows for {key}")

    async def delete_prefix(self, symbol: str, name: Optional[str] = None) -> int:
        removed = 0
        async with self._session_factory() as session:
            async with session.begin():
                if name is None or name != IndicatorKind.BOLLINGER_BANDS.name:
                    stmt = delete(IndicatorData).where(IndicatorData.symbol == symbol)
                    if name is not None:
                        stmt = stmt.where(IndicatorData.indicator_name == name)
                    removed += (await session.execute(stmt)).rowcount
                if name is None or name == IndicatorKind.BOLLINGER_BANDS.name:
                    stmt = delete(BollingerBandsData).where(
                        BollingerBandsData.symbol == symbol
                    )
                    removed += (await session.execute(stmt)).rowcount
        logger.info(f"Cleared {removed} cached rows for {symbol}")
        return removed
