"""
Preset API Endpoints

Save the chart's indicators into a preset slot, read slots back, and apply
a slot to the chart.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from indicator_engine.api.v1.deps import get_chart_session, http_error
from indicator_engine.api.v1.endpoints.charts import draw_view
from indicator_engine.schemas.indicators import DrawResultView
from indicator_engine.schemas.presets import PresetEntry, PresetSlotView, SavePresetRequest
from indicator_engine.services.base import ServiceError
from indicator_engine.services.charts import ChartSession

logger = logging.getLogger(__name__)

router = APIRouter()


def slot_view(session: ChartSession, slot: int) -> PresetSlotView:
    entries = session.presets.get_slot(slot)
    return PresetSlotView(
        user_id=session.user_id,
        symbol=session.symbol,
        slot=slot,
        entries=[
            PresetEntry(local_id=local_id, kind=i.kind, params=i.serialize_params())
            for local_id, i in entries.items()
        ],
    )


async def _persist(session: ChartSession) -> None:
    if not await session.presets.store():
        raise HTTPException(status_code=500, detail="Failed to save presets")


@router.get("/{symbol}/{slot}", response_model=PresetSlotView)
async def get_preset(slot: int, session: ChartSession = Depends(get_chart_session)):
    async with session.lock:
        try:
            return slot_view(session, slot)
        except ServiceError as e:
            raise http_error(e)


@router.put("/{symbol}/{slot}", response_model=PresetSlotView)
async def save_preset(
    slot: int,
    body: SavePresetRequest,
    session: ChartSession = Depends(get_chart_session),
):
    """Capture the chart's indicators (or a subset) into a slot and persist all slots."""
    async with session.lock:
        try:
            if body.indicator_ids is None:
                indicators = list(session.manager.get_all().values())
            else:
                indicators = [session.manager.require(i) for i in body.indicator_ids]
            session.presets.set_slot(slot, indicators)
        except ServiceError as e:
            raise http_error(e)
        await _persist(session)
        return slot_view(session, slot)


@router.delete("/{symbol}/{slot}", response_model=PresetSlotView)
async def clear_preset(slot: int, session: ChartSession = Depends(get_chart_session)):
    async with session.lock:
        try:
            session.presets.clear_slot(slot)
        except ServiceError as e:
            raise http_error(e)
        await _persist(session)
        return slot_view(session, slot)


@router.post("/{symbol}/{slot}/apply", response_model=list[DrawResultView])
async def apply_preset(
    slot: int,
    replace: bool = Query(default=True, description="Remove current indicators first"),
    session: ChartSession = Depends(get_chart_session),
):
    """Create the slot's indicators on the chart under the chart's timeframe."""
    async with session.lock:
        try:
            entries = session.presets.get_slot(slot)
            if replace:
                await session.manager.clear()
            created = await session.manager.apply_preset(entries)
        except ServiceError as e:
            raise http_error(e)
    return [draw_view(result) for _, result in created]
