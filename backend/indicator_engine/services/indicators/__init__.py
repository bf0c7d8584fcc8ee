"""
Indicator Engine Service

CONTRACT:
    Input:  (kind, parameter vector) + the chart's symbol and timeframe
    Output: series drawn on a ChartHandle, reported as a DrawResult

RESPONSIBILITIES:
    - Compute SMA, EMA and Bollinger Bands over close prices
    - Reuse cached series for an identical parameter tuple
    - Keep indicator ids stable across settings and timeframe changes

Uses NumPy for calculations.
All math is deterministic and reproducible.
"""

from indicator_engine.services.indicators.interface import ChartHandle
from indicator_engine.services.indicators.variants import VARIANTS, IndicatorVariant
from indicator_engine.services.indicators.indicator import Indicator
from indicator_engine.services.indicators.factory import IndicatorFactory
from indicator_engine.services.indicators.manager import IndicatorManager

__all__ = [
    "ChartHandle",
    "VARIANTS",
    "IndicatorVariant",
    "Indicator",
    "IndicatorFactory",
    "IndicatorManager",
]
