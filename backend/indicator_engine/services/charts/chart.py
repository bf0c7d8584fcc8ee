"""
In-process chart handle.

Keeps rendered series in memory so the HTTP layer can hand them to a
browser chart as JSON. The revision counter moves on every invalidate(),
which lets clients skip a refetch when nothing was repainted.
"""

import logging
from typing import Sequence

from indicator_engine.schemas.series import Point
from indicator_engine.services.indicators.interface import ChartHandle

logger = logging.getLogger(__name__)


class SeriesChart(ChartHandle):
    def __init__(self, symbol: str):
        self.symbol = symbol
        self.revision = 0
        self._series: dict[str, tuple[tuple[Point, ...], dict]] = {}

    def add_series(self, series_id: str, points: Sequence[Point], style: dict) -> None:
        if series_id in self._series:
            logger.debug(f"Replacing series {series_id} on {self.symbol}")
        self._series[series_id] = (tuple(points), dict(style))

    def remove_series_by_id(self, series_id: str) -> bool:
        return self._series.pop(series_id, None) is not None

    def invalidate(self) -> None:
        self.revision += 1

    def series_ids(self) -> list[str]:
        return list(self._series)

    def snapshot(self) -> list[dict]:
        """Rendered series in insertion order."""
        return [
            {"id": series_id, "points": list(points), "style": style}
            for series_id, (points, style) in self._series.items()
        ]
