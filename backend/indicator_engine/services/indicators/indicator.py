"""
Indicator instance.

An Indicator is an IndicatorSpec plus a process-local id, a visibility flag
and an overlay flag. Kind-specific behaviour comes from its variant in
VARIANTS; everything here is shared by all kinds.
"""

import logging
from typing import Optional, Sequence

from indicator_engine.schemas.indicators import IndicatorKind, IndicatorSpec
from indicator_engine.schemas.market import PricePoint, Timeframe
from indicator_engine.schemas.series import CacheKey, DrawResult, Series
from indicator_engine.services.base import (
    CachePersistError,
    InsufficientDataError,
    RenderError,
    ServiceError,
)
from indicator_engine.services.cache.indicator_cache import IndicatorCache
from indicator_engine.services.indicators.interface import ChartHandle
from indicator_engine.services.indicators.variants import VARIANTS
from indicator_engine.services.prices.interface import PriceSourceInterface

logger = logging.getLogger(__name__)


class Indicator:
    """One indicator attached to (at most) one chart."""

    def __init__(
        self,
        indicator_id: str,
        spec: IndicatorSpec,
        cache: IndicatorCache,
        price_source: PriceSourceInterface,
    ):
        self._id = indicator_id
        self._spec = spec
        self._variant = VARIANTS[spec.kind]
        self._cache = cache
        self._price_source = price_source
        self._rendered: list[str] = []
        self.visible = True

    def __repr__(self) -> str:
        return (
            f"Indicator(id={self._id!r}, kind={self.kind.name}, "
            f"symbol={self.symbol!r}, params={self.serialize_params()!r})"
        )

    @property
    def id(self) -> str:
        return self._id

    @property
    def spec(self) -> IndicatorSpec:
        return self._spec

    @property
    def kind(self) -> IndicatorKind:
        return self._spec.kind

    @property
    def symbol(self) -> str:
        return self._spec.symbol

    @property
    def timeframe(self) -> Timeframe:
        return self._spec.timeframe

    @property
    def overlay(self) -> bool:
        return self._variant.overlay

    def set_timeframe(self, timeframe: Timeframe) -> None:
        self._spec = self._spec.with_timeframe(timeframe)

    def cache_key(self) -> CacheKey:
        return self._variant.cache_key(self._spec)

    def compute(self, prices: Sequence[PricePoint]) -> Series:
        """Pure computation of this indicator over a price series."""
        return self._variant.compute(prices, self._spec)

    def serialize_params(self) -> str:
        return self._spec.serialize_params()

    async def load_series(self) -> tuple[Series, bool, Optional[ServiceError]]:
        """
        Cache-aware compute.

        Returns (series, cache_hit, notice). On a miss the full price series
        is read, computed and written back as one batch; a failed write is
        returned as a CachePersistError notice alongside the computed series.
        """
        key = self.cache_key()
        cached = await self._cache.lookup(key)
        if cached is not None:
            return cached, True, None

        prices = await self._price_source.get_closes(self.symbol, self.timeframe)
        series = self.compute(prices)
        if series.is_empty:
            notice = InsufficientDataError(
                "Indicator",
                f"{len(prices)} {self.timeframe.value} bars for {self.symbol}, "
                f"{self.kind.name} needs {self._spec.period}",
                {"bars": len(prices), "period": self._spec.period},
            )
            logger.info(notice.message)
            return series, False, notice

        try:
            await self._cache.store(key, series)
        except CachePersistError as e:
            return series, False, e
        return series, False, None

    async def draw_onto(self, chart: ChartHandle) -> DrawResult:
        """
        Render onto the chart, replacing any previous rendering of this id.
        Does not invalidate the chart; the caller batches that.
        """
        self.remove_from(chart)

        try:
            series, cache_hit, notice = await self.load_series()
        except Exception as e:
            logger.error(f"Error computing {self.kind.name} {self._id} for {self.symbol}: {e}")
            self.visible = False
            return DrawResult(
                indicator_id=self._id,
                error=ServiceError("Indicator", f"Could not compute {self.kind.name}: {e}"),
            )

        if series.is_empty:
            return DrawResult(indicator_id=self._id, cache_hit=cache_hit, error=notice)

        style = self._variant.style(self._spec)
        try:
            for series_id, points in series.lines(self._id):
                self._rendered.append(series_id)
                chart.add_series(series_id, points, style)
        except Exception as e:
            logger.error(f"Chart rejected {self.kind.name} {self._id}: {e}")
            self.remove_from(chart)
            self.visible = False
            return DrawResult(
                indicator_id=self._id,
                cache_hit=cache_hit,
                error=RenderError(
                    "Indicator", f"Could not draw {self.kind.name} {self._id}: {e}"
                ),
            )

        self.visible = True
        return DrawResult(
            indicator_id=self._id,
            drawn=True,
            cache_hit=cache_hit,
            points=len(series),
            error=notice,
        )

    def remove_from(self, chart: ChartHandle) -> None:
        """Remove this indicator's series from the chart. No-op if never drawn."""
        if not self._rendered:
            return
        for series_id in self._rendered:
            try:
                chart.remove_series_by_id(series_id)
            except Exception as e:
                logger.warning(f"Chart failed to remove series {series_id}: {e}")
        self._rendered = []

    async def apply_settings(self, params: Sequence[float], chart: ChartHandle) -> DrawResult:
        """Replace the numeric parameters in place and redraw. The id is unchanged."""
        # Validate before touching the chart so bad params leave the old line up
        new_spec = self._spec.with_params(params)
        self.remove_from(chart)
        self._spec = new_spec
        return await self.draw_onto(chart)
