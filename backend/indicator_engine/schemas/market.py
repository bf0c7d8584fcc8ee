"""
Price Data Contracts

Input: raw bars for a symbol + timeframe
Output: PricePoint series consumed by the indicator variants

Bars live in the stock_data table; the indicator engine only ever reads the
close column, ordered by date, with sequential chart indices.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


# =============================================================================
# ENUMS
# =============================================================================


class Timeframe(str, Enum):
    FIVE_MIN = "5m"
    FIFTEEN_MIN = "15m"
    HOURLY = "1h"
    DAILY = "1d"


def normalize_symbol(symbol: str) -> str:
    """Canonical ticker form used for every stored and cached symbol."""
    return symbol.strip().upper()


# =============================================================================
# PRICE SERIES
# =============================================================================


class PricePoint(BaseModel):
    """Single close price at a chart x position."""

    index: int = Field(..., ge=0, description="Sequential chart index")
    close: float


class PriceBar(BaseModel):
    """
    Single candlestick as ingested.
    Sent by: API / seed scripts
    Stored in: stock_data
    """

    timestamp: datetime
    open: float = Field(..., gt=0)
    high: float = Field(..., gt=0)
    low: float = Field(..., gt=0)
    close: float = Field(..., gt=0)
    volume: int = Field(default=0, ge=0)


class PriceIngestRequest(BaseModel):
    """Batch of bars for one symbol + timeframe."""

    bars: list[PriceBar] = Field(..., min_length=1)
    name: Optional[str] = Field(default=None, description="Display name of the symbol")


class PriceSeriesResponse(BaseModel):
    """Close series as the chart sees it."""

    symbol: str
    timeframe: Timeframe
    points: list[PricePoint]
