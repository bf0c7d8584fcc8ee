"""
Chart sessions.

One session per (user, symbol): a SeriesChart, the IndicatorManager drawing
on it and the PresetManager for the same pair. The HTTP layer holds the
session lock for the whole of each request, so a chart only ever sees one
caller at a time.
"""

import asyncio
import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Dict, Tuple

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from indicator_engine.core.config import settings
from indicator_engine.schemas.market import Timeframe
from indicator_engine.services.base import ServiceError
from indicator_engine.services.cache.indicator_cache import IndicatorCache
from indicator_engine.services.charts.chart import SeriesChart
from indicator_engine.services.indicators.factory import IndicatorFactory
from indicator_engine.services.indicators.manager import IndicatorManager
from indicator_engine.services.presets.manager import PresetManager
from indicator_engine.services.prices.interface import PriceSourceInterface

logger = logging.getLogger(__name__)


@dataclass
class ChartSession:
    user_id: str
    symbol: str
    chart: SeriesChart
    manager: IndicatorManager
    presets: PresetManager
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    warnings: deque = field(default_factory=lambda: deque(maxlen=20))

    def record_warning(self, indicator_id: str, error: ServiceError) -> None:
        self.warnings.append(f"{indicator_id}: {error.message}")


class ChartSessionRegistry:
    """
    Sessions keyed by (user_id, symbol).

    Usage:
        registry = ChartSessionRegistry(cache, price_source, session_factory)
        session = await registry.get_or_create("default", "AAPL")
        async with session.lock:
            await session.manager.create(IndicatorKind.SMA, [-256, 20, 1.0])
    """

    def __init__(
        self,
        cache: IndicatorCache,
        price_source: PriceSourceInterface,
        session_factory: async_sessionmaker[AsyncSession],
    ):
        self.cache = cache
        self.price_source = price_source
        self.factory = IndicatorFactory(cache, price_source)
        self._session_factory = session_factory
        self._sessions: Dict[Tuple[str, str], ChartSession] = {}
        self._creating = asyncio.Lock()

    async def get_or_create(self, user_id: str, symbol: str) -> ChartSession:
        """Return the session for (user, symbol), loading its presets on first use."""
        key = (user_id, symbol)
        session = self._sessions.get(key)
        if session is not None:
            return session

        async with self._creating:
            session = self._sessions.get(key)
            if session is not None:
                return session

            chart = SeriesChart(symbol)
            presets = PresetManager(
                self._session_factory, self.factory, user_id, symbol, settings.preset_slots
            )
            await presets.load()
            manager = IndicatorManager(
                chart, symbol, self.factory, Timeframe(settings.default_timeframe)
            )
            session = ChartSession(
                user_id=user_id,
                symbol=symbol,
                chart=chart,
                manager=manager,
                presets=presets,
            )
            manager.on_warning = session.record_warning
            self._sessions[key] = session
            logger.info(f"Opened chart session {user_id}/{symbol}")
            return session

    def close(self, user_id: str, symbol: str) -> bool:
        return self._sessions.pop((user_id, symbol), None) is not None
