"""
Chart presets: saved indicator sets per user + symbol.
"""

from indicator_engine.services.presets.manager import PresetManager

__all__ = ["PresetManager"]
