"""
Price API Endpoints

Ingest bars and read back the close series the indicators are computed on.
"""

import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from indicator_engine.api.v1.deps import get_registry
from indicator_engine.db.database import add_price_bars, get_db
from indicator_engine.schemas.market import (
    PriceIngestRequest,
    PriceSeriesResponse,
    Timeframe,
    normalize_symbol,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/{symbol}/{timeframe}", status_code=201)
async def ingest_prices(
    symbol: str,
    timeframe: Timeframe,
    body: PriceIngestRequest,
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    """
    Store bars for a symbol/timeframe.

    Cached indicator series for the symbol are dropped afterwards, since
    they were computed over the old close series.
    """
    symbol = normalize_symbol(symbol)
    stored = await add_price_bars(db, symbol, timeframe, body.bars, body.name)
    await db.commit()

    registry = get_registry(request)
    invalidated = await registry.cache.invalidate(symbol)
    return {
        "symbol": symbol,
        "timeframe": timeframe.value,
        "stored": stored,
        "invalidated": invalidated,
    }


@router.get("/{symbol}/{timeframe}", response_model=PriceSeriesResponse)
async def get_prices(symbol: str, timeframe: Timeframe, request: Request):
    """Close series in chart order. Empty when nothing is stored."""
    symbol = normalize_symbol(symbol)
    registry = get_registry(request)
    points = await registry.price_source.get_closes(symbol, timeframe)
    return PriceSeriesResponse(symbol=symbol, timeframe=timeframe, points=points)
