"""
Indicator Contracts

IndicatorSpec is the canonical parameter tuple of one indicator instance.
Its parameter vector is a wire contract shared with the chart UI and the
preset table:

    SMA / EMA:        [color, period, width]
    BOLLINGER_BANDS:  [color, period, stdDevMultiplier, width]

Serialized form is the same vector joined with ':'. Integer fields are
written as integers, real fields as Python float text, so a stored string
survives parse -> serialize unchanged.
"""

import math
from enum import Enum
from typing import Optional, Sequence
from pydantic import BaseModel, Field, ValidationError, field_validator

from indicator_engine.core.config import settings
from indicator_engine.schemas.market import Timeframe, normalize_symbol
from indicator_engine.services.base import UnknownIndicatorError


# =============================================================================
# ENUMS
# =============================================================================


class IndicatorKind(str, Enum):
    SMA = "SMA"
    EMA = "EMA"
    BOLLINGER_BANDS = "BOLLINGER_BANDS"

    @classmethod
    def from_name(cls, name: str) -> "IndicatorKind":
        """Resolve a persisted kind name, rejecting anything unknown."""
        try:
            return cls[name]
        except KeyError:
            raise UnknownIndicatorError(
                "IndicatorFactory", f"Unknown indicator kind: {name!r}"
            ) from None


# Parameter vector layout per kind (order is the wire contract)
PARAM_LAYOUTS: dict[IndicatorKind, tuple[str, ...]] = {
    IndicatorKind.SMA: ("color", "period", "width"),
    IndicatorKind.EMA: ("color", "period", "width"),
    IndicatorKind.BOLLINGER_BANDS: ("color", "period", "std_dev_multiplier", "width"),
}

INTEGER_FIELDS = frozenset({"color", "period"})

PARAM_SEPARATOR = ":"


def parse_params(serialized: str) -> list[float]:
    """Split a colon-delimited parameter string into a numeric vector."""
    try:
        return [float(field) for field in serialized.split(PARAM_SEPARATOR)]
    except ValueError as e:
        raise UnknownIndicatorError(
            "IndicatorFactory", f"Malformed parameter string: {serialized!r}"
        ) from e


def _format_field(name: str, value: float) -> str:
    if name in INTEGER_FIELDS:
        return str(int(value))
    return repr(float(value))


# =============================================================================
# INDICATOR PARAMETERS
# =============================================================================


class IndicatorSpec(BaseModel):
    """Canonical parameters of one indicator instance."""

    kind: IndicatorKind
    symbol: str = Field(..., min_length=1)
    timeframe: Timeframe = Timeframe.DAILY
    period: int = Field(..., ge=1)
    color: int
    width: float = Field(..., gt=0)
    std_dev_multiplier: Optional[float] = Field(default=None, ge=0)

    @field_validator("symbol", mode="before")
    @classmethod
    def _normalize_symbol(cls, value):
        return normalize_symbol(value) if isinstance(value, str) else value

    @classmethod
    def from_params(
        cls,
        kind: IndicatorKind,
        symbol: str,
        timeframe: Timeframe,
        params: Sequence[float],
    ) -> "IndicatorSpec":
        """Build a spec from the positional parameter vector of its kind."""
        layout = PARAM_LAYOUTS[kind]
        if len(params) != len(layout):
            raise UnknownIndicatorError(
                "IndicatorFactory",
                f"{kind.name} expects {len(layout)} parameters, got {len(params)}",
                {"layout": list(layout), "params": list(params)},
            )

        fields = {}
        for name, value in zip(layout, params):
            value = float(value)
            if not math.isfinite(value):
                raise UnknownIndicatorError(
                    "IndicatorFactory",
                    f"{kind.name} {name} must be finite, got {value}",
                    {"params": list(params)},
                )
            if name in INTEGER_FIELDS:
                if not value.is_integer():
                    raise UnknownIndicatorError(
                        "IndicatorFactory",
                        f"{kind.name} {name} must be a whole number, got {value}",
                        {"params": list(params)},
                    )
                value = int(value)
            fields[name] = value

        try:
            return cls(kind=kind, symbol=symbol, timeframe=timeframe, **fields)
        except ValidationError as e:
            raise UnknownIndicatorError(
                "IndicatorFactory",
                f"Invalid {kind.name} parameters: {list(params)}",
                {"errors": e.errors()},
            ) from e

    def to_params(self) -> list[float]:
        """Positional parameter vector in wire order."""
        return [getattr(self, name) for name in PARAM_LAYOUTS[self.kind]]

    def serialize_params(self) -> str:
        return PARAM_SEPARATOR.join(
            _format_field(name, getattr(self, name))
            for name in PARAM_LAYOUTS[self.kind]
        )

    def with_params(self, params: Sequence[float]) -> "IndicatorSpec":
        """Same kind, symbol and timeframe with a new parameter vector."""
        return IndicatorSpec.from_params(self.kind, self.symbol, self.timeframe, params)

    def with_timeframe(self, timeframe: Timeframe) -> "IndicatorSpec":
        return self.model_copy(update={"timeframe": timeframe})


def default_params(kind: IndicatorKind) -> list[float]:
    """Parameter vector used when a chart adds an indicator without settings."""
    if kind == IndicatorKind.BOLLINGER_BANDS:
        return [
            settings.default_indicator_color,
            settings.default_indicator_period,
            settings.default_std_dev_multiplier,
            settings.default_indicator_width,
        ]
    return [
        settings.default_indicator_color,
        settings.default_indicator_period,
        settings.default_indicator_width,
    ]


# =============================================================================
# API MODELS
# =============================================================================


class CreateIndicatorRequest(BaseModel):
    """Add an indicator to a chart. Omitted params fall back to defaults."""

    kind: IndicatorKind
    params: Optional[list[float]] = Field(
        default=None, description="[color, period, (stdDevMultiplier,) width]"
    )


class UpdateSettingsRequest(BaseModel):
    params: list[float] = Field(..., min_length=1)


class TimeframeRequest(BaseModel):
    timeframe: Timeframe


class IndicatorView(BaseModel):
    """Active indicator as reported to the chart UI."""

    id: str
    kind: IndicatorKind
    symbol: str
    timeframe: Timeframe
    params: str
    visible: bool
    overlay: bool


class DrawResultView(BaseModel):
    indicator_id: str
    drawn: bool
    cache_hit: bool
    points: int
    warning: Optional[str] = None


class ChartSeriesView(BaseModel):
    """One rendered line on the chart."""

    id: str
    points: list[tuple[float, float]]
    style: dict


class ChartStateView(BaseModel):
    symbol: str
    timeframe: Timeframe
    indicators: list[IndicatorView]
    series: list[ChartSeriesView]
    revision: int = 0
    warnings: list[str] = Field(default_factory=list)
