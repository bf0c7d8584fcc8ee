"""
Redis cache client for computed indicator series.

Keeps the indicator cache out of the SQLite file when several chart
processes share one cache. Falls back to process memory when Redis is
unreachable.
"""

import json
import logging
from typing import Optional, Dict, Any

import redis.asyncio as redis

from indicator_engine.core.config import settings
from indicator_engine.services.cache.interface import SeriesStore
from indicator_engine.schemas.series import (
    CacheKey,
    Series,
    series_from_dict,
)

logger = logging.getLogger(__name__)

# Global Redis connection pool
_redis_pool: Optional[redis.Redis] = None


async def init_redis(url: Optional[str] = None) -> Optional[redis.Redis]:
    """
    Initialize Redis connection pool.
    Called on application startup.
    """
    global _redis_pool

    if _redis_pool is not None:
        return _redis_pool

    url = url or settings.redis_url
    try:
        _redis_pool = redis.from_url(
            url,
            encoding="utf-8",
            decode_responses=True,
        )
        # Test connection
        await _redis_pool.ping()
        logger.info(f"Redis connected: {url}")
        return _redis_pool
    except Exception as e:
        logger.warning(f"Redis connection failed: {e}. Using in-memory fallback.")
        _redis_pool = None
        return None


async def close_redis() -> None:
    """Close Redis connection pool."""
    global _redis_pool
    if _redis_pool:
        await _redis_pool.aclose()
        _redis_pool = None
        logger.info("Redis connection closed")


def get_redis() -> Optional[redis.Redis]:
    """Get the Redis connection pool."""
    return _redis_pool


class RedisSeriesStore(SeriesStore):
    """
    Redis-based series store.

    Keys:
    - series:{symbol}:{name}:{period}:{timeframe}[:{params}] → JSON series
    - series-index:{symbol} → set of series keys for that symbol
    """

    def __init__(self, redis_client: Optional[redis.Redis] = None):
        self._redis = redis_client
        # In-memory fallback when Redis is unavailable
        self._memory_cache: Dict[str, Any] = {}

    @property
    def name(self) -> str:
        return "RedisSeriesStore"

    @property
    def redis(self) -> Optional[redis.Redis]:
        return self._redis or _redis_pool

    @staticmethod
    def _key(key: CacheKey) -> str:
        return f"series:{key}"

    @staticmethod
    def _index_key(symbol: str) -> str:
        return f"series-index:{symbol}"

    async def get(self, key: CacheKey) -> Optional[Series]:
        redis_key = self._key(key)

        if self.redis:
            try:
                value = await self.redis.get(redis_key)
                return series_from_dict(json.loads(value)) if value else None
            except Exception as e:
                logger.warning(f"Redis get failed for {redis_key}, reading memory fallback: {e}")

        # Fallback to memory
        value = self._memory_cache.get(redis_key)
        return series_from_dict(json.loads(value)) if value else None

    async def put_batch(self, key: CacheKey, series: Series) -> None:
        redis_key = self._key(key)
        value = json.dumps(series.to_dict())

        if self.redis:
            try:
                # MULTI/EXEC: value and index entry land together or not at all
                async with self.redis.pipeline(transaction=True) as pipe:
                    pipe.set(redis_key, value, nx=True)
                    pipe.sadd(self._index_key(key.symbol), redis_key)
                    await pipe.execute()
                return
            except Exception as e:
                logger.warning(f"Redis put_batch failed for {redis_key}, writing to memory fallback: {e}")

        self._memory_cache.setdefault(redis_key, value)

    async def delete_prefix(self, symbol: str, name: Optional[str] = None) -> int:
        prefix = f"series:{symbol}:" + (f"{name}:" if name else "")

        if self.redis:
            try:
                members = await self.redis.smembers(self._index_key(symbol))
                doomed = [m for m in members if m.startswith(prefix)]
                if not doomed:
                    return 0
                async with self.redis.pipeline(transaction=True) as pipe:
                    pipe.delete(*doomed)
                    pipe.srem(self._index_key(symbol), *doomed)
                    await pipe.execute()
                return len(doomed)
            except Exception as e:
                logger.warning(f"Redis delete_prefix failed for {prefix}, clearing memory fallback only: {e}")

        doomed = [k for k in self._memory_cache if k.startswith(prefix)]
        for k in doomed:
            del self._memory_cache[k]
        return len(doomed)
