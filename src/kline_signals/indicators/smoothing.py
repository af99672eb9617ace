"""
Moving-average smoothing primitives.

Both functions are total: they accept any length (including zero) and return
a series of the same length, aligned with the input.
"""

from typing import Sequence, Union

import numpy as np
import pandas as pd

SeriesLike = Union[pd.Series, np.ndarray, Sequence[float]]


def _as_series(series: SeriesLike) -> pd.Series:
    if isinstance(series, pd.Series):
        return series.astype(float)
    return pd.Series(np.asarray(series, dtype=float))


def ema(series: SeriesLike, period: int) -> pd.Series:
    """
    Exponential moving average seeded with the first raw value.

    out[0] = series[0]; out[i] = series[i] * k + out[i-1] * (1 - k)
    with k = 2 / (period + 1).

    Args:
        series: Numeric values in time order
        period: Smoothing period (values below 1 are treated as 1)

    Returns:
        Series aligned with the input (index preserved for Series input)
    """
    values = _as_series(series)
    if values.empty:
        return values
    span = max(int(period), 1)
    return values.ewm(span=span, adjust=False).mean()


def sma(series: SeriesLike, period: int) -> pd.Series:
    """
    Simple moving average over the trailing `period` values.

    Bars without enough history pass the raw value through.
    """
    values = _as_series(series)
    if values.empty:
        return values
    window = max(int(period), 1)
    averaged = values.rolling(window=window, min_periods=window).mean()
    return averaged.where(averaged.notna(), values)
