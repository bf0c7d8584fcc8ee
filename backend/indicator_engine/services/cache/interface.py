"""
Series Store Interface

Minimal persistence contract behind the indicator cache:
get-by-key, put-batch-atomic, delete-by-prefix.
"""

from abc import ABC, abstractmethod
from typing import Optional

from indicator_engine.schemas.series import CacheKey, Series


class SeriesStore(ABC):
    """Key -> series storage. Entries are written once and never edited."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Store name for logging."""
        pass

    @abstractmethod
    async def get(self, key: CacheKey) -> Optional[Series]:
        """Exact full-key lookup. None on miss."""
        pass

    @abstractmethod
    async def put_batch(self, key: CacheKey, series: Series) -> None:
        """
        Write every point of a series as one atomic unit.
        A partially written series is never observable.
        """
        pass

    @abstractmethod
    async def delete_prefix(self, symbol: str, name: Optional[str] = None) -> int:
        """Drop every entry for a symbol (optionally one indicator name). Returns rows/keys removed."""
        pass
