"""
Chart sessions for the HTTP layer.
"""

from indicator_engine.services.charts.chart import SeriesChart
from indicator_engine.services.charts.session import ChartSession, ChartSessionRegistry

__all__ = [
    "SeriesChart",
    "ChartSession",
    "ChartSessionRegistry",
]
