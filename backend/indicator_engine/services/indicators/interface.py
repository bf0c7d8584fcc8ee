"""
Chart Handle Interface

Defines the contract the indicator engine renders through.
"""

from abc import ABC, abstractmethod
from typing import Sequence

from indicator_engine.schemas.series import Point


class ChartHandle(ABC):
    """
    Chart render collaborator.

    Calls are not reentrant: one chart handle is driven by one manager, one
    call at a time. The engine never assumes a call succeeds.
    """

    @abstractmethod
    def add_series(self, series_id: str, points: Sequence[Point], style: dict) -> None:
        """Render a line under series_id."""
        pass

    @abstractmethod
    def remove_series_by_id(self, series_id: str) -> bool:
        """Remove a rendered line. Returns False if nothing was rendered under the id."""
        pass

    @abstractmethod
    def invalidate(self) -> None:
        """Request a repaint."""
        pass
