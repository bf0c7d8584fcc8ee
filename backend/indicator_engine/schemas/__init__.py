"""
Indicator Engine Schema Contracts

This module defines all JSON contracts between the engine and its callers.
These are the authoritative interfaces - all modules must conform to these schemas.
"""

from indicator_engine.schemas.market import (
    Timeframe,
    PricePoint,
    PriceBar,
    PriceIngestRequest,
    PriceSeriesResponse,
)
from indicator_engine.schemas.indicators import (
    IndicatorKind,
    IndicatorSpec,
    PARAM_LAYOUTS,
    parse_params,
    default_params,
    CreateIndicatorRequest,
    UpdateSettingsRequest,
    TimeframeRequest,
    IndicatorView,
    DrawResultView,
    ChartSeriesView,
    ChartStateView,
)
from indicator_engine.schemas.presets import (
    PresetEntry,
    PresetSlotView,
    SavePresetRequest,
)
from indicator_engine.schemas.series import (
    Point,
    CacheKey,
    LineSeries,
    BandSeries,
    Series,
    DrawResult,
)

__all__ = [
    # Market
    "Timeframe",
    "PricePoint",
    "PriceBar",
    "PriceIngestRequest",
    "PriceSeriesResponse",
    # Indicators
    "IndicatorKind",
    "IndicatorSpec",
    "PARAM_LAYOUTS",
    "parse_params",
    "default_params",
    "CreateIndicatorRequest",
    "UpdateSettingsRequest",
    "TimeframeRequest",
    "IndicatorView",
    "DrawResultView",
    "ChartSeriesView",
    "ChartStateView",
    # Presets
    "PresetEntry",
    "PresetSlotView",
    "SavePresetRequest",
    # Series
    "Point",
    "CacheKey",
    "LineSeries",
    "BandSeries",
    "Series",
    "DrawResult",
]
