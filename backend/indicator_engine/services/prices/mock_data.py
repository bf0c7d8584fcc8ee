"""
Mock Data Generator

Generates a reproducible random-walk price history for development, so a
fresh database has something to chart.
"""

import logging
import random
from datetime import datetime, timedelta
from typing import Iterable, Optional

from indicator_engine.db.database import add_price_bars, get_db_context
from indicator_engine.schemas.market import PriceBar, Timeframe

logger = logging.getLogger(__name__)


# Base prices for common symbols
SYMBOL_BASE_PRICES = {
    "AAPL": 190.0,
    "MSFT": 410.0,
    "TSLA": 240.0,
    "NVDA": 880.0,
    "AMZN": 178.0,
}

TIMEFRAME_DELTAS = {
    Timeframe.FIVE_MIN: timedelta(minutes=5),
    Timeframe.FIFTEEN_MIN: timedelta(minutes=15),
    Timeframe.HOURLY: timedelta(hours=1),
    Timeframe.DAILY: timedelta(days=1),
}


def get_base_price(symbol: str) -> float:
    return SYMBOL_BASE_PRICES.get(symbol, 100.0)


def generate_mock_bars(
    symbol: str,
    timeframe: Timeframe,
    lookback: int,
    end_time: Optional[datetime] = None,
    seed: Optional[int] = None,
) -> list[PriceBar]:
    """Generate mock OHLCV bars. The same seed gives the same walk."""
    rng = random.Random(seed if seed is not None else f"{symbol}:{timeframe.value}")
    if end_time is None:
        end_time = datetime.now().replace(second=0, microsecond=0)

    interval = TIMEFRAME_DELTAS[timeframe]
    price = get_base_price(symbol)
    volatility = price * 0.02  # 2% volatility

    timestamp = end_time - interval * lookback
    bars = []
    for _ in range(lookback):
        # Random walk
        change = (rng.random() - 0.5) * volatility

        open_price = price
        close_price = max(open_price + change, 0.01)
        high_price = max(open_price, close_price) + rng.random() * volatility * 0.5
        low_price = max(min(open_price, close_price) - rng.random() * volatility * 0.5, 0.01)

        bars.append(
            PriceBar(
                timestamp=timestamp,
                open=round(open_price, 2),
                high=round(high_price, 2),
                low=round(low_price, 2),
                close=round(close_price, 2),
                volume=rng.randint(100_000, 5_000_000),
            )
        )

        price = close_price
        timestamp += interval

    return bars


async def seed_demo_data(symbols: Iterable[str], lookback: int) -> int:
    """Write mock bars for every symbol and timeframe. Returns bars written."""
    total = 0
    async with get_db_context() as session:
        for symbol in symbols:
            for timeframe in Timeframe:
                bars = generate_mock_bars(symbol, timeframe, lookback)
                total += await add_price_bars(session, symbol, timeframe, bars)
    logger.info(f"Seeded {total} demo bars")
    return total
