"""
MACD - Moving Average Convergence Divergence.

diff = EMA(close, fast) - EMA(close, slow)
signal_line = EMA(diff, signal)
histogram = 2 * (diff - signal_line)
"""

from dataclasses import dataclass
from typing import Sequence

import pandas as pd

from kline_signals.indicators.smoothing import ema
from kline_signals.models.candle import Candle, candles_to_dataframe


@dataclass
class MACDResult:
    """MACD series, each aligned 1:1 with the input candles and indexed by time."""

    diff: pd.Series
    signal_line: pd.Series
    histogram: pd.Series

    def __len__(self) -> int:
        return len(self.diff)

    @property
    def is_empty(self) -> bool:
        return self.diff.empty


def calculate_macd(
    candles: Sequence[Candle],
    fast: int = 12,
    slow: int = 26,
    signal: int = 9,
) -> MACDResult:
    """
    Compute MACD over closing prices.

    Runs for any input length; warm-up bars are less meaningful but valid.

    Args:
        candles: Candles in ascending time order
        fast: Fast EMA period (default 12)
        slow: Slow EMA period (default 26)
        signal: Signal line period (default 9)

    Returns:
        MACDResult with diff, signal_line and histogram series
    """
    close = candles_to_dataframe(candles)["close"].astype(float)

    diff = ema(close, fast) - ema(close, slow)
    signal_line = ema(diff, signal)
    histogram = 2 * (diff - signal_line)

    return MACDResult(
        diff=diff.rename("diff"),
        signal_line=signal_line.rename("signal_line"),
        histogram=histogram.rename("histogram"),
    )
