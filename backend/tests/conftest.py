import os

# Settings are read at import time, so point them at a throwaway database first
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["CACHE_BACKEND"] = "sql"
os.environ["SEED_DEMO_DATA"] = "false"

from typing import Sequence

import pytest

from indicator_engine.db.database import create_engine, create_session_factory, init_db
from indicator_engine.schemas.market import PricePoint, Timeframe
from indicator_engine.services.cache import IndicatorCache, SQLSeriesStore
from indicator_engine.services.indicators import ChartHandle, IndicatorFactory
from indicator_engine.services.prices import PriceSourceInterface


class FakeChart(ChartHandle):
    """Records every call; raises on add for ids listed in reject."""

    def __init__(self):
        self.series = {}
        self.added = []
        self.removed = []
        self.invalidations = 0
        self.reject = set()

    def add_series(self, series_id, points, style):
        if series_id in self.reject:
            raise RuntimeError(f"chart rejected {series_id}")
        self.added.append(series_id)
        self.series[series_id] = (list(points), style)

    def remove_series_by_id(self, series_id):
        self.removed.append(series_id)
        return self.series.pop(series_id, None) is not None

    def invalidate(self):
        self.invalidations += 1


class CountingPriceSource(PriceSourceInterface):
    """In-memory closes per (symbol, timeframe) that counts reads."""

    def __init__(self):
        self.closes = {}
        self.calls = 0
        self.fail = False

    def set_closes(self, symbol: str, timeframe: Timeframe, closes: Sequence[float]):
        self.closes[(symbol, timeframe)] = list(closes)

    async def get_closes(self, symbol, timeframe):
        self.calls += 1
        if self.fail:
            raise ConnectionError("price database unavailable")
        return [
            PricePoint(index=i, close=c)
            for i, c in enumerate(self.closes.get((symbol, timeframe), []))
        ]


def ramp(n: int, start: float = 100.0) -> list[float]:
    return [start + i for i in range(n)]


@pytest.fixture
async def engine():
    engine = create_engine("sqlite+aiosqlite:///:memory:")
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def cache(session_factory):
    return IndicatorCache(SQLSeriesStore(session_factory))


@pytest.fixture
def prices():
    source = CountingPriceSource()
    source.set_closes("AAPL", Timeframe.DAILY, ramp(60))
    return source


@pytest.fixture
def factory(cache, prices):
    return IndicatorFactory(cache, prices)


@pytest.fixture
def chart():
    return FakeChart()
