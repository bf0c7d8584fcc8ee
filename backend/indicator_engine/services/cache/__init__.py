"""
Cache module for the indicator engine.

Provides the indicator series cache over SQLite or Redis.
"""

from indicator_engine.services.cache.interface import SeriesStore
from indicator_engine.services.cache.indicator_cache import IndicatorCache
from indicator_engine.services.cache.sql_store import SQLSeriesStore
from indicator_engine.services.cache.redis_client import (
    RedisSeriesStore,
    get_redis,
    init_redis,
    close_redis,
)

__all__ = [
    "SeriesStore",
    "IndicatorCache",
    "SQLSeriesStore",
    "RedisSeriesStore",
    "get_redis",
    "init_redis",
    "close_redis",
]
