"""
Chart API Endpoints

Indicators on a user's chart for one symbol. Every request holds the chart
session lock, so indicator operations on one chart never interleave.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from indicator_engine.api.v1.deps import get_chart_session, http_error
from indicator_engine.schemas.indicators import (
    ChartSeriesView,
    ChartStateView,
    CreateIndicatorRequest,
    DrawResultView,
    IndicatorView,
    TimeframeRequest,
    UpdateSettingsRequest,
    default_params,
)
from indicator_engine.schemas.series import DrawResult
from indicator_engine.services.base import ServiceError
from indicator_engine.services.charts import ChartSession
from indicator_engine.services.indicators import Indicator

logger = logging.getLogger(__name__)

router = APIRouter()


def indicator_view(indicator: Indicator) -> IndicatorView:
    return IndicatorView(
        id=indicator.id,
        kind=indicator.kind,
        symbol=indicator.symbol,
        timeframe=indicator.timeframe,
        params=indicator.serialize_params(),
        visible=indicator.visible,
        overlay=indicator.overlay,
    )


def draw_view(result: DrawResult) -> DrawResultView:
    return DrawResultView(
        indicator_id=result.indicator_id,
        drawn=result.drawn,
        cache_hit=result.cache_hit,
        points=result.points,
        warning=result.warning,
    )


def chart_state(session: ChartSession) -> ChartStateView:
    return ChartStateView(
        symbol=session.symbol,
        timeframe=session.manager.timeframe,
        indicators=[indicator_view(i) for i in session.manager.get_all().values()],
        series=[ChartSeriesView(**s) for s in session.chart.snapshot()],
        revision=session.chart.revision,
        warnings=list(session.warnings),
    )


@router.get("/{symbol}", response_model=ChartStateView)
async def get_chart(session: ChartSession = Depends(get_chart_session)):
    """Active indicators and every rendered series on the chart."""
    async with session.lock:
        return chart_state(session)


@router.post("/{symbol}/indicators", response_model=DrawResultView, status_code=201)
async def create_indicator(
    body: CreateIndicatorRequest,
    session: ChartSession = Depends(get_chart_session),
):
    """
    Add an indicator. A draw failure still registers it (visible=false)
    and is reported in the warning field.
    """
    params = body.params if body.params is not None else default_params(body.kind)
    async with session.lock:
        try:
            _, result = await session.manager.create(body.kind, params)
        except ServiceError as e:
            raise http_error(e)
    return draw_view(result)


@router.patch("/{symbol}/indicators/{indicator_id}", response_model=DrawResultView)
async def update_indicator(
    indicator_id: str,
    body: UpdateSettingsRequest,
    session: ChartSession = Depends(get_chart_session),
):
    """Replace an indicator's parameter vector. Its id does not change."""
    async with session.lock:
        try:
            session.manager.require(indicator_id)
            result = await session.manager.change_settings(indicator_id, body.params)
        except ServiceError as e:
            raise http_error(e)
    return draw_view(result)


@router.delete("/{symbol}/indicators/{indicator_id}")
async def delete_indicator(
    indicator_id: str,
    session: ChartSession = Depends(get_chart_session),
):
    async with session.lock:
        deleted = await session.manager.delete(indicator_id)
    if not deleted:
        raise HTTPException(
            status_code=404, detail=f"No indicator {indicator_id} on {session.symbol}"
        )
    return {"deleted": indicator_id}


@router.put("/{symbol}/timeframe", response_model=list[DrawResultView])
async def set_timeframe(
    body: TimeframeRequest,
    session: ChartSession = Depends(get_chart_session),
):
    """Redraw every indicator on the chart for a new timeframe."""
    async with session.lock:
        results = await session.manager.set_timeframe(body.timeframe)
    return [draw_view(r) for r in results]
