"""
Indicator variants.

One capability set, three implementations. A variant is stateless: it knows
how to compute its series from closes, how to key that series in the cache,
and how its lines are styled on a chart. Per-instance state lives in
Indicator, which looks its variant up in VARIANTS by kind.
"""

from abc import ABC, abstractmethod
from typing import Sequence

import numpy as np

from indicator_engine.schemas.indicators import IndicatorKind, IndicatorSpec
from indicator_engine.schemas.market import PricePoint
from indicator_engine.services.indicators import calculations
from indicator_engine.schemas.series import (
    BandSeries,
    CacheKey,
    LineSeries,
    Series,
)


def _to_arrays(prices: Sequence[PricePoint]) -> tuple[np.ndarray, np.ndarray]:
    x = np.array([float(p.index) for p in prices], dtype=float)
    closes = np.array([p.close for p in prices], dtype=float)
    return x, closes


class IndicatorVariant(ABC):
    """Computation and rendering layout for one indicator kind."""

    kind: IndicatorKind
    overlay: bool = True

    def cache_key(self, spec: IndicatorSpec) -> CacheKey:
        return CacheKey(
            symbol=spec.symbol,
            name=spec.kind.name,
            period=spec.period,
            timeframe=spec.timeframe.value,
            params=self.discriminants(spec),
        )

    def discriminants(self, spec: IndicatorSpec) -> tuple[float, ...]:
        """Kind-specific numeric parameters that change the computed values."""
        return ()

    def style(self, spec: IndicatorSpec) -> dict:
        return {
            "color": spec.color,
            "width": spec.width,
            "draw_circles": False,
            "draw_values": False,
        }

    @abstractmethod
    def compute(self, prices: Sequence[PricePoint], spec: IndicatorSpec) -> Series:
        """Pure computation over an ordered price series."""
        pass


class _LineVariant(IndicatorVariant):
    @abstractmethod
    def _values(self, closes: np.ndarray, period: int) -> np.ndarray:
        pass

    def compute(self, prices: Sequence[PricePoint], spec: IndicatorSpec) -> LineSeries:
        if len(prices) < spec.period:
            return LineSeries()

        x, closes = _to_arrays(prices)
        values = self._values(closes, spec.period)
        start = spec.period - 1
        return LineSeries(
            points=tuple(
                (float(x[i]), float(values[i])) for i in range(start, len(values))
            )
        )


class SMAVariant(_LineVariant):
    kind = IndicatorKind.SMA

    def _values(self, closes: np.ndarray, period: int) -> np.ndarray:
        return calculations.sma(closes, period)


class EMAVariant(_LineVariant):
    kind = IndicatorKind.EMA

    def _values(self, closes: np.ndarray, period: int) -> np.ndarray:
        return calculations.ema(closes, period)


class BollingerBandsVariant(IndicatorVariant):
    kind = IndicatorKind.BOLLINGER_BANDS

    def discriminants(self, spec: IndicatorSpec) -> tuple[float, ...]:
        return (float(spec.std_dev_multiplier),)

    def compute(self, prices: Sequence[PricePoint], spec: IndicatorSpec) -> BandSeries:
        if len(prices) < spec.period:
            return BandSeries()

        x, closes = _to_arrays(prices)
        middle, upper, lower = calculations.bollinger_bands(
            closes, spec.period, spec.std_dev_multiplier
        )
        window = slice(spec.period - 1, len(closes))
        return BandSeries(
            x=tuple(float(v) for v in x[window]),
            middle=tuple(float(v) for v in middle[window]),
            upper=tuple(float(v) for v in upper[window]),
            lower=tuple(float(v) for v in lower[window]),
        )


# Kind-dispatch table; adding a kind means adding a variant here
VARIANTS: dict[IndicatorKind, IndicatorVariant] = {
    IndicatorKind.SMA: SMAVariant(),
    IndicatorKind.EMA: EMAVariant(),
    IndicatorKind.BOLLINGER_BANDS: BollingerBandsVariant(),
}
