"""
Price Source

CONTRACT:
    Input:  (symbol, timeframe)
    Output: list[PricePoint]

Read-only from the engine's point of view; bars are written through
indicator_engine.db.add_price_bars.
"""

from indicator_engine.services.prices.interface import PriceSourceInterface
from indicator_engine.services.prices.service import SQLPriceSource

__all__ = [
    "PriceSourceInterface",
    "SQLPriceSource",
]
