import logging

import pytest

from indicator_engine.schemas.series import BandSeries, CacheKey, LineSeries
from indicator_engine.services.base import CachePersistError
from indicator_engine.services.cache import IndicatorCache, RedisSeriesStore, SQLSeriesStore
from indicator_engine.services.cache.interface import SeriesStore

SMA_KEY = CacheKey("AAPL", "SMA", 3, "1d")
EMA_KEY = CacheKey("AAPL", "EMA", 3, "1d")
BB_KEY = CacheKey("AAPL", "BOLLINGER_BANDS", 3, "1d", (2.0,))

LINE = LineSeries(points=((2.0, 11.0), (3.0, 12.0), (4.0, 13.0)))
BANDS = BandSeries(
    x=(2.0, 3.0),
    middle=(11.0, 12.0),
    upper=(12.5, 13.5),
    lower=(9.5, 10.5),
)


class BrokenStore(SeriesStore):
    @property
    def name(self):
        return "BrokenStore"

    async def get(self, key):
        raise ConnectionError("store offline")

    async def put_batch(self, key, series):
        raise ConnectionError("store offline")

    async def delete_prefix(self, symbol, name=None):
        return 0


class UnreachableRedis:
    """Client whose every command fails as if the server went away."""

    async def get(self, key):
        raise ConnectionError("redis went away")

    async def smembers(self, key):
        raise ConnectionError("redis went away")

    def pipeline(self, transaction=True):
        raise ConnectionError("redis went away")


class TestSQLSeriesStore:
    @pytest.mark.asyncio
    async def test_miss_is_none(self, session_factory):
        store = SQLSeriesStore(session_factory)
        assert await store.get(SMA_KEY) is None

    @pytest.mark.asyncio
    async def test_line_and_band_entries(self, session_factory):
        store = SQLSeriesStore(session_factory)
        await store.put_batch(SMA_KEY, LINE)
        await store.put_batch(BB_KEY, BANDS)

        assert await store.get(SMA_KEY) == LINE
        assert await store.get(BB_KEY) == BANDS
        # Same period, different name or multiplier: separate entries
        assert await store.get(EMA_KEY) is None
        assert await store.get(CacheKey("AAPL", "BOLLINGER_BANDS", 3, "1d", (2.5,))) is None

    @pytest.mark.asyncio
    async def test_entries_are_written_once(self, session_factory):
        store = SQLSeriesStore(session_factory)
        await store.put_batch(SMA_KEY, LINE)
        await store.put_batch(SMA_KEY, LineSeries(points=((2.0, 99.0),)))
        assert await store.get(SMA_KEY) == LINE

    @pytest.mark.asyncio
    async def test_delete_prefix(self, session_factory):
        store = SQLSeriesStore(session_factory)
        await store.put_batch(SMA_KEY, LINE)
        await store.put_batch(EMA_KEY, LINE)
        await store.put_batch(BB_KEY, BANDS)

        assert await store.delete_prefix("AAPL", "EMA") == 3
        assert await store.get(EMA_KEY) is None
        assert await store.get(SMA_KEY) == LINE

        assert await store.delete_prefix("AAPL") == 5
        assert await store.get(BB_KEY) is None


class TestRedisSeriesStore:
    """Without a reachable server the store runs on its in-memory fallback."""

    @pytest.mark.asyncio
    async def test_memory_fallback(self):
        store = RedisSeriesStore()
        assert await store.get(BB_KEY) is None
        await store.put_batch(BB_KEY, BANDS)
        await store.put_batch(SMA_KEY, LINE)
        assert await store.get(BB_KEY) == BANDS
        assert await store.get(SMA_KEY) == LINE

    @pytest.mark.asyncio
    async def test_delete_prefix(self):
        store = RedisSeriesStore()
        await store.put_batch(SMA_KEY, LINE)
        await store.put_batch(EMA_KEY, LINE)
        await store.put_batch(CacheKey("MSFT", "SMA", 3, "1d"), LINE)

        assert await store.delete_prefix("AAPL", "SMA") == 1
        assert await store.get(EMA_KEY) == LINE
        assert await store.delete_prefix("AAPL") == 1
        assert await store.get(CacheKey("MSFT", "SMA", 3, "1d")) == LINE

    @pytest.mark.asyncio
    async def test_failed_write_is_logged_and_kept_in_memory(self, caplog):
        store = RedisSeriesStore(UnreachableRedis())
        with caplog.at_level(logging.WARNING, logger="indicator_engine.services.cache.redis_client"):
            await store.put_batch(SMA_KEY, LINE)

        assert any("put_batch failed" in r.getMessage() for r in caplog.records)
        assert await store.get(SMA_KEY) == LINE
        assert await store.delete_prefix("AAPL") == 1


class TestIndicatorCache:
    @pytest.mark.asyncio
    async def test_lookup_after_store(self, cache):
        assert not await cache.contains(SMA_KEY)
        await cache.store(SMA_KEY, LINE)
        assert await cache.lookup(SMA_KEY) == LINE

    @pytest.mark.asyncio
    async def test_empty_series_not_cached(self, cache):
        await cache.store(SMA_KEY, LineSeries())
        assert await cache.lookup(SMA_KEY) is None

    @pytest.mark.asyncio
    async def test_read_failure_is_a_miss(self):
        assert await IndicatorCache(BrokenStore()).lookup(SMA_KEY) is None

    @pytest.mark.asyncio
    async def test_write_failure_raises_persist_error(self):
        with pytest.raises(CachePersistError):
            await IndicatorCache(BrokenStore()).store(SMA_KEY, LINE)

    @pytest.mark.asyncio
    async def test_invalidate(self, cache):
        await cache.store(SMA_KEY, LINE)
        assert await cache.invalidate("AAPL") == 3
        assert await cache.lookup(SMA_KEY) is None
