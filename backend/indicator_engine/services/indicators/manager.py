"""
Indicator Manager

Owns the active indicators of one chart. Ids are handed out from a counter
and never reused within the manager's lifetime, so a settings change or a
timeframe switch keeps every id stable.

The manager is the only caller of chart.invalidate(): once per create,
delete or settings change, and once after a whole timeframe redraw. A
failed repaint is logged and never raised.
"""

import logging
from types import MappingProxyType
from typing import Callable, Mapping, Optional, Sequence, Union

from indicator_engine.schemas.indicators import IndicatorKind
from indicator_engine.schemas.market import Timeframe, normalize_symbol
from indicator_engine.schemas.series import DrawResult
from indicator_engine.services.base import (
    InsufficientDataError,
    NotFoundError,
    ServiceError,
)
from indicator_engine.services.indicators.factory import IndicatorFactory
from indicator_engine.services.indicators.indicator import Indicator
from indicator_engine.services.indicators.interface import ChartHandle

logger = logging.getLogger(__name__)

WarningCallback = Callable[[str, ServiceError], None]


class IndicatorManager:
    """Active indicators for one chart and symbol."""

    def __init__(
        self,
        chart: ChartHandle,
        symbol: str,
        factory: IndicatorFactory,
        timeframe: Timeframe = Timeframe.DAILY,
        on_warning: Optional[WarningCallback] = None,
    ):
        self.chart = chart
        self.symbol = normalize_symbol(symbol)
        self.factory = factory
        self._timeframe = timeframe
        self.on_warning = on_warning
        self._indicators: dict[str, Indicator] = {}
        self._counter = 0

    @property
    def timeframe(self) -> Timeframe:
        return self._timeframe

    def _report(self, result: DrawResult) -> None:
        error = result.error
        if error is None:
            return
        if isinstance(error, InsufficientDataError):
            logger.info(f"Indicator {result.indicator_id}: {error.message}")
            return
        logger.warning(f"Indicator {result.indicator_id}: {error.message}")
        if self.on_warning:
            self.on_warning(result.indicator_id, error)

    def _repaint(self) -> None:
        try:
            self.chart.invalidate()
        except Exception as e:
            logger.warning(f"Chart repaint failed for {self.symbol}: {e}")

    # =========================================================================
    # MEMBERSHIP
    # =========================================================================

    async def create(
        self, kind: Union[IndicatorKind, str], params: Sequence[float]
    ) -> tuple[Indicator, DrawResult]:
        """
        Register and draw a new indicator.

        A bad kind or parameter vector raises UnknownIndicatorError before an
        id is taken. Draw failures do not raise: the indicator stays
        registered with visible=False and the failure is in the DrawResult.
        """
        if not isinstance(kind, IndicatorKind):
            kind = IndicatorKind.from_name(kind)
        # A rejected vector raises here, before the counter moves
        indicator = self.factory.create(
            kind, str(self._counter + 1), self.symbol, self._timeframe, params
        )
        self._counter += 1
        self._indicators[indicator.id] = indicator

        result = await indicator.draw_onto(self.chart)
        self._repaint()
        self._report(result)
        logger.info(f"Created {kind.name} {indicator.id} on {self.symbol}")
        return indicator, result

    async def delete(self, indicator_id: str) -> bool:
        indicator = self._indicators.get(indicator_id)
        if indicator is None:
            logger.info(f"Delete ignored: no indicator {indicator_id} on {self.symbol}")
            return False

        indicator.remove_from(self.chart)
        del self._indicators[indicator_id]
        self._repaint()
        logger.info(f"Deleted indicator {indicator_id} from {self.symbol}")
        return True

    async def clear(self) -> None:
        """Remove every indicator from the chart. The id counter keeps running."""
        if not self._indicators:
            return
        for indicator in self._indicators.values():
            indicator.remove_from(self.chart)
        self._indicators.clear()
        self._repaint()

    async def apply_preset(
        self, entries: Mapping[str, Indicator]
    ) -> list[tuple[Indicator, DrawResult]]:
        """Create one indicator per preset entry under the current timeframe."""
        created = []
        for entry in entries.values():
            created.append(await self.create(entry.kind, entry.spec.to_params()))
        return created

    # =========================================================================
    # SETTINGS
    # =========================================================================

    async def change_settings(
        self, indicator_id: str, params: Sequence[float]
    ) -> Optional[DrawResult]:
        indicator = self._indicators.get(indicator_id)
        if indicator is None:
            logger.warning(f"Settings change ignored: no indicator {indicator_id} on {self.symbol}")
            return None

        result = await indicator.apply_settings(params, self.chart)
        self._repaint()
        self._report(result)
        return result

    async def set_timeframe(self, timeframe: Timeframe) -> list[DrawResult]:
        """Redraw every indicator for a new timeframe, then repaint once."""
        self._timeframe = timeframe
        if not self._indicators:
            return []

        results = []
        for indicator in self._indicators.values():
            indicator.set_timeframe(timeframe)
            try:
                result = await indicator.draw_onto(self.chart)
            except Exception as e:
                logger.error(f"Redraw of {indicator.id} for {timeframe.value} failed: {e}")
                indicator.visible = False
                result = DrawResult(
                    indicator_id=indicator.id,
                    error=ServiceError("IndicatorManager", str(e)),
                )
            self._report(result)
            results.append(result)

        self._repaint()
        return results

    # =========================================================================
    # QUERIES
    # =========================================================================

    def get_all(self) -> Mapping[str, Indicator]:
        return MappingProxyType(self._indicators)

    def get(self, indicator_id: str) -> Optional[Indicator]:
        return self._indicators.get(indicator_id)

    def require(self, indicator_id: str) -> Indicator:
        indicator = self._indicators.get(indicator_id)
        if indicator is None:
            raise NotFoundError(
                "IndicatorManager",
                f"No indicator {indicator_id} on {self.symbol}",
                {"indicator_id": indicator_id},
            )
        return indicator
