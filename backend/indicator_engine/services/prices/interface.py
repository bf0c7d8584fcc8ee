"""
Price Source Interface

Defines the contract for reading the close series the indicators run on.
"""

from abc import ABC, abstractmethod

from indicator_engine.schemas.market import PricePoint, Timeframe


class PriceSourceInterface(ABC):
    """
    Price Source Contract.

    INPUT: (symbol, timeframe)

    OUTPUT: list[PricePoint]
        - Ordered by date ascending
        - index is the sequential chart x position (0, 1, 2, ...)
        - Empty list when the symbol/timeframe has no rows (not an error)
    """

    @property
    def name(self) -> str:
        return "PriceSource"

    @abstractmethod
    async def get_closes(self, symbol: str, timeframe: Timeframe) -> list[PricePoint]:
        """Close-only projection of the bars for symbol + timeframe."""
        pass
