"""
Indicator cache.

Answers "is this series already computed?" and persists newly computed
series. Read failures degrade to a miss; write failures surface as
CachePersistError so the caller can keep the in-memory result.
"""

import logging
from typing import Optional

from indicator_engine.services.base import CachePersistError
from indicator_engine.schemas.market import normalize_symbol
from indicator_engine.services.cache.interface import SeriesStore
from indicator_engine.schemas.series import CacheKey, Series

logger = logging.getLogger(__name__)


class IndicatorCache:
    """CacheKey -> series cache over a SeriesStore."""

    def __init__(self, store: SeriesStore):
        self._store = store

    async def lookup(self, key: CacheKey) -> Optional[Series]:
        try:
            series = await self._store.get(key)
        except Exception as e:
            logger.warning(f"Cache lookup failed for {key}, treating as miss: {e}")
            return None

        if series is None:
            logger.info(f"Cache miss for {key}")
        else:
            logger.info(f"Cache hit for {key} ({len(series)} points)")
        return series

    async def contains(self, key: CacheKey) -> bool:
        return await self.lookup(key) is not None

    async def store(self, key: CacheKey, series: Series) -> None:
        """Persist a computed series in one atomic batch. Empty series are not cached."""
        if series.is_empty:
            return
        try:
            await self._store.put_batch(key, series)
        except Exception as e:
            logger.error(f"Failed to cache {key} via {self._store.name}: {e}")
            raise CachePersistError(
                "IndicatorCache",
                f"Could not cache {key.name} for {key.symbol}",
                {"key": str(key), "error": str(e)},
            ) from e

    async def invalidate(self, symbol: str, name: Optional[str] = None) -> int:
        """Drop cached series for a symbol, e.g. after new bars arrive."""
        return await self._store.delete_prefix(normalize_symbol(symbol), name)
