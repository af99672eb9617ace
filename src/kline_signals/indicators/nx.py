"""
NX crossover - EMA5 crossing EMA10.

Buy crossovers must be confirmed by a volume surge; sell crossovers are not
volume-filtered.
"""

import logging
from typing import Sequence

from kline_signals.indicators.smoothing import ema
from kline_signals.models.candle import Candle, candles_to_dataframe
from kline_signals.models.signals import NXSignal, SignalDirection

logger = logging.getLogger(__name__)

NX_MIN_BARS = 20

BUY_LABEL = "buy"
SELL_LABEL = "sell"


def calculate_nx_signals(
    candles: Sequence[Candle],
    fast: int = 5,
    slow: int = 10,
    volume_period: int = 10,
    volume_multiplier: float = 1.5,
    min_bars: int = NX_MIN_BARS,
) -> list[NXSignal]:
    """
    Detect EMA crossovers.

    Args:
        candles: Candles in ascending time order
        fast: Fast EMA period of close
        slow: Slow EMA period of close
        volume_period: EMA period of volume
        volume_multiplier: Volume surge multiple required on buy crossovers
        min_bars: Minimum history required

    Returns:
        Time-ordered NXSignal list; empty with fewer than `min_bars` candles
    """
    if len(candles) < min_bars:
        logger.debug(f"NX signals need {min_bars} bars, got {len(candles)}")
        return []

    df = candles_to_dataframe(candles)
    fast_ema = ema(df["close"], fast).tolist()
    slow_ema = ema(df["close"], slow).tolist()
    volume_ema = ema(df["volume"], volume_period).tolist()

    signals: list[NXSignal] = []
    for i in range(1, len(candles)):
        crossed_up = fast_ema[i] > slow_ema[i] and fast_ema[i - 1] <= slow_ema[i - 1]
        crossed_down = fast_ema[i] < slow_ema[i] and fast_ema[i - 1] >= slow_ema[i - 1]

        if crossed_up and candles[i].volume > volume_ema[i] * volume_multiplier:
            signals.append(
                NXSignal(time=candles[i].time, direction=SignalDirection.BUY, label=BUY_LABEL)
            )
        if crossed_down:
            signals.append(
                NXSignal(time=candles[i].time, direction=SignalDirection.SELL, label=SELL_LABEL)
            )

    return signals
