"""
Technical Indicator Calculations

Pure NumPy implementations of the chart overlays.
All math is deterministic: the same closes always give the same values.

Every function returns an array the length of its input, NaN where the
indicator is undefined (before index period - 1).
"""

import numpy as np


# =============================================================================
# MOVING AVERAGES
# =============================================================================


def sma(data: np.ndarray, period: int) -> np.ndarray:
    """Simple Moving Average."""
    result = np.full(len(data), np.nan)
    if len(data) < period:
        return result

    for i in range(period - 1, len(data)):
        result[i] = np.mean(data[i - period + 1 : i + 1])
    return result


def ema(data: np.ndarray, period: int) -> np.ndarray:
    """
    Exponential Moving Average.

    Seeded with the first close and run from index 0, but only emitted from
    index period - 1 so the line starts where the SMA of the same period does.
    """
    result = np.full(len(data), np.nan)
    if len(data) < period:
        return result

    multiplier = 2 / (period + 1)
    value = float(data[0])
    if period == 1:
        result[0] = value

    for i in range(1, len(data)):
        value = (data[i] - value) * multiplier + value
        if i >= period - 1:
            result[i] = value

    return result


# =============================================================================
# VOLATILITY INDICATORS
# =============================================================================


def rolling_std(data: np.ndarray, period: int) -> np.ndarray:
    """Population standard deviation over the trailing window."""
    result = np.full(len(data), np.nan)
    if len(data) < period:
        return result

    for i in range(period - 1, len(data)):
        # ddof=0: variance sum divided by period, not period - 1
        result[i] = np.std(data[i - period + 1 : i + 1])
    return result


def bollinger_bands(
    closes: np.ndarray, period: int = 20, std_dev: float = 2.0
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Bollinger Bands.

    Returns: (middle, upper, lower)
    """
    middle = sma(closes, period)
    std = rolling_std(closes, period)

    upper = middle + (std_dev * std)
    lower = middle - (std_dev * std)

    return middle, upper, lower

