"""
Buy/sell pressure oscillator.

Each bar's pressure is where the close sits inside the high-low range,
weighted by relative volume, plus the close-to-close change scaled by the
same volume ratio. The raw value is smoothed with an EMA; surges are flagged
when the smoothed pressure jumps by double digits on heavy volume.
"""

import logging
import math
from typing import Sequence

import numpy as np

from kline_signals.indicators.smoothing import ema
from kline_signals.models.candle import Candle
from kline_signals.models.signals import PressurePoint, PressureSignal

logger = logging.getLogger(__name__)

PRESSURE_MIN_BARS = 10


def _percent_change(current: float, previous: float) -> float:
    if previous == 0:
        return 0.0
    return (current - previous) / previous * 100


def calculate_buy_sell_pressure(
    candles: Sequence[Candle],
    smoothing_period: int = 10,
    average_period: int = 20,
    change_threshold: float = 10.0,
    volume_multiplier: float = 1.2,
    strength_multiplier: float = 1.5,
    min_bars: int = PRESSURE_MIN_BARS,
) -> list[PressurePoint]:
    """
    Compute smoothed buy/sell pressure and its surge signals.

    Args:
        candles: Candles in ascending time order
        smoothing_period: EMA period applied to raw pressure
        average_period: EMA period of |pressure| used as the strength baseline
        change_threshold: Minimum |change rate| in percent for a signal
        volume_multiplier: Bar volume must exceed this multiple of mean volume
        strength_multiplier: |pressure| must exceed this multiple of its average
        min_bars: Minimum history required

    Returns:
        One PressurePoint per candle; empty with fewer than `min_bars` candles
    """
    if len(candles) < min_bars:
        logger.debug(f"Pressure needs {min_bars} bars, got {len(candles)}")
        return []

    volumes = np.array([c.volume for c in candles], dtype=float)
    mean_volume = float(volumes.mean())

    # Smoothing runs inline: zero-range bars feed back the prior smoothed value
    k = 2 / (max(int(smoothing_period), 1) + 1)
    smoothed: list[float] = []
    for i, c in enumerate(candles):
        if c.range == 0:
            raw = smoothed[i - 1] if i > 0 else 0.0
        else:
            buy_ratio = (c.close - c.low) / c.range
            sell_ratio = (c.high - c.close) / c.range
            volume_ratio = c.volume / mean_volume if mean_volume > 0 else 0.0
            change = _percent_change(c.close, candles[i - 1].close) if i > 0 else 0.0
            raw = (buy_ratio - sell_ratio) * math.sqrt(volume_ratio) * 100 + change * volume_ratio

        if i == 0:
            smoothed.append(raw)
        else:
            smoothed.append(raw * k + smoothed[i - 1] * (1 - k))

    strength_baseline = ema(np.abs(smoothed), average_period).tolist()

    points: list[PressurePoint] = []
    for i, c in enumerate(candles):
        pressure = smoothed[i]
        previous = smoothed[i - 1] if i > 0 else 0.0
        change_rate = (pressure - previous) / abs(previous) * 100 if previous != 0 else 0.0

        heavy_volume = c.volume > mean_volume * volume_multiplier
        strong = abs(pressure) > strength_baseline[i] * strength_multiplier

        signal = None
        if heavy_volume and strong:
            if change_rate >= change_threshold and pressure > 0:
                signal = PressureSignal.STRONG_UP
            elif change_rate <= -change_threshold and pressure < 0:
                signal = PressureSignal.STRONG_DOWN

        points.append(
            PressurePoint(
                time=c.time,
                pressure=pressure,
                change_rate=change_rate,
                signal=signal,
            )
        )

    return points
