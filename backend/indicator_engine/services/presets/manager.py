"""
Preset Manager

A fixed number of indicator sets per user + symbol, persisted to
chart_presets. Each slot maps a local id ("0", "1", ...) to an Indicator
built at the daily timeframe; applying a slot to a chart re-creates the
indicators there under the chart's own ids and timeframe.
"""

import logging
from typing import Iterable, Mapping

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from indicator_engine.core.config import settings
from indicator_engine.db.models import ChartPreset
from indicator_engine.schemas.indicators import parse_params
from indicator_engine.schemas.market import Timeframe, normalize_symbol
from indicator_engine.services.base import IndexOutOfRangeError
from indicator_engine.services.indicators.factory import IndicatorFactory
from indicator_engine.services.indicators.indicator import Indicator

logger = logging.getLogger(__name__)


class PresetManager:
    """Preset slots for one user and symbol."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        factory: IndicatorFactory,
        user_id: str,
        symbol: str,
        slots: int = settings.preset_slots,
    ):
        self._session_factory = session_factory
        self.factory = factory
        self.user_id = user_id
        self.symbol = normalize_symbol(symbol)
        self._slots: list[dict[str, Indicator]] = [{} for _ in range(slots)]

    @property
    def slot_count(self) -> int:
        return len(self._slots)

    def _index(self, slot: int) -> int:
        if not 1 <= slot <= len(self._slots):
            raise IndexOutOfRangeError(
                "PresetManager",
                f"Preset slot {slot} outside 1..{len(self._slots)}",
                {"slot": slot},
            )
        return slot - 1

    def _copy(self, local_id: str, indicator: Indicator) -> Indicator:
        return self.factory.create(
            indicator.kind,
            local_id,
            self.symbol,
            Timeframe.DAILY,
            indicator.spec.to_params(),
        )

    async def load(self) -> None:
        """
        Read every slot from the database, replacing in-memory contents.

        A row with an unknown kind or malformed params raises
        UnknownIndicatorError; slots are left untouched in that case.
        """
        loaded: list[dict[str, Indicator]] = [{} for _ in self._slots]
        async with self._session_factory() as session:
            for i in range(len(self._slots)):
                result = await session.execute(
                    select(ChartPreset.type, ChartPreset.params)
                    .where(
                        ChartPreset.user_id == self.user_id,
                        ChartPreset.symbol == self.symbol,
                        ChartPreset.preset_id == i + 1,
                    )
                    .order_by(ChartPreset.id.asc())
                )
                for j, (kind_name, params) in enumerate(result.all()):
                    local_id = str(j)
                    loaded[i][local_id] = self.factory.create(
                        kind_name, local_id, self.symbol, Timeframe.DAILY, parse_params(params)
                    )

        self._slots = loaded
        logger.info(
            f"Loaded presets for {self.user_id}/{self.symbol}: "
            f"{[len(slot) for slot in self._slots]} indicators per slot"
        )

    async def store(self) -> bool:
        """
        Replace every persisted slot for this user + symbol in one transaction.
        Returns False (nothing changed on disk) if any write fails.
        """
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    await session.execute(
                        delete(ChartPreset).where(
                            ChartPreset.user_id == self.user_id,
                            ChartPreset.symbol == self.symbol,
                        )
                    )
                    for i, slot in enumerate(self._slots):
                        for indicator in slot.values():
                            session.add(
                                ChartPreset(
                                    user_id=self.user_id,
                                    preset_id=i + 1,
                                    symbol=self.symbol,
                                    type=indicator.kind.name,
                                    params=indicator.serialize_params(),
                                )
                            )
                    await session.flush()
        except Exception as e:
            logger.error(f"Error storing presets for {self.user_id}/{self.symbol}: {e}")
            return False

        logger.info(f"All presets saved for {self.user_id}/{self.symbol}")
        return True

    def get_slot(self, slot: int) -> Mapping[str, Indicator]:
        """Contents of a 1-indexed slot."""
        return self._slots[self._index(slot)]

    def set_slot(self, slot: int, indicators: Iterable[Indicator]) -> Mapping[str, Indicator]:
        """Replace a slot with copies of the given indicators. Call store() to persist."""
        index = self._index(slot)
        self._slots[index] = {
            str(j): self._copy(str(j), indicator) for j, indicator in enumerate(indicators)
        }
        return self._slots[index]

    def clear_slot(self, slot: int) -> None:
        self._slots[self._index(slot)] = {}
