"""
Indicator series and cache identity types.

Series are immutable once built: a settings change produces a new CacheKey
and a new series, never an edit of an existing one.
"""

from dataclasses import dataclass, field
from typing import Optional, Union

from indicator_engine.services.base import ServiceError

Point = tuple[float, float]

BAND_SUFFIXES = ("middle", "upper", "lower")


@dataclass(frozen=True)
class CacheKey:
    """Full parameter tuple that makes two computations interchangeable."""

    symbol: str
    name: str  # IndicatorKind name
    period: int
    timeframe: str  # Timeframe value, e.g. "1d"
    params: tuple[float, ...] = ()  # kind-specific discriminants

    def __str__(self) -> str:
        parts = [self.symbol, self.name, str(self.period), self.timeframe]
        parts.extend(repr(float(p)) for p in self.params)
        return ":".join(parts)


@dataclass(frozen=True)
class LineSeries:
    """Ordered (x, value) points of a single-line indicator."""

    points: tuple[Point, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.points

    def __len__(self) -> int:
        return len(self.points)

    def lines(self, indicator_id: str) -> list[tuple[str, tuple[Point, ...]]]:
        """Chart series ids and points to render for this indicator."""
        return [(indicator_id, self.points)]

    def to_dict(self) -> dict:
        return {"type": "line", "points": [list(p) for p in self.points]}


@dataclass(frozen=True)
class BandSeries:
    """Middle/upper/lower bands sharing one x sequence."""

    x: tuple[float, ...] = ()
    middle: tuple[float, ...] = ()
    upper: tuple[float, ...] = ()
    lower: tuple[float, ...] = ()

    def __post_init__(self):
        if not (len(self.x) == len(self.middle) == len(self.upper) == len(self.lower)):
            raise ValueError("Band sequences must share one x axis")

    @property
    def is_empty(self) -> bool:
        return not self.x

    def __len__(self) -> int:
        return len(self.x)

    def band(self, name: str) -> tuple[Point, ...]:
        return tuple(zip(self.x, getattr(self, name)))

    def lines(self, indicator_id: str) -> list[tuple[str, tuple[Point, ...]]]:
        return [(f"{indicator_id}_{name}", self.band(name)) for name in BAND_SUFFIXES]

    def to_dict(self) -> dict:
        return {
            "type": "bands",
            "x": list(self.x),
            "middle": list(self.middle),
            "upper": list(self.upper),
            "lower": list(self.lower),
        }


Series = Union[LineSeries, BandSeries]


def series_from_dict(data: dict) -> Series:
    """Inverse of LineSeries.to_dict / BandSeries.to_dict."""
    if data.get("type") == "bands":
        return BandSeries(
            x=tuple(data["x"]),
            middle=tuple(data["middle"]),
            upper=tuple(data["upper"]),
            lower=tuple(data["lower"]),
        )
    return LineSeries(points=tuple((p[0], p[1]) for p in data["points"]))


@dataclass
class DrawResult:
    """
    Outcome of drawing one indicator.

    drawn is False both for a valid empty series (error is an
    InsufficientDataError notice, or None on an empty cache entry) and for
    a failure (any other ServiceError). A CachePersistError can accompany
    drawn=True: the series was rendered from memory but not cached.
    """

    indicator_id: str
    drawn: bool = False
    cache_hit: bool = False
    points: int = 0
    error: Optional[ServiceError] = field(default=None)

    @property
    def warning(self) -> Optional[str]:
        return self.error.message if self.error else None
