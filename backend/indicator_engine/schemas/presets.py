"""
Preset Contracts

A preset is one of a fixed number of named indicator sets per user + symbol.
Rows in chart_presets carry the kind name and the colon-delimited parameter
string; timeframe is not persisted.
"""

from pydantic import BaseModel, Field

from indicator_engine.schemas.indicators import IndicatorKind


class PresetEntry(BaseModel):
    """One indicator inside a preset slot."""

    local_id: str
    kind: IndicatorKind
    params: str = Field(..., description="Colon-delimited parameter vector")


class PresetSlotView(BaseModel):
    user_id: str
    symbol: str
    slot: int = Field(..., ge=1)
    entries: list[PresetEntry]


class SavePresetRequest(BaseModel):
    """Capture the chart's active indicators into a slot and persist all slots."""

    indicator_ids: list[str] | None = Field(
        default=None, description="Subset of active ids to save (default: all)"
    )
