"""
Yellow-blue ladder - ATR bands around two EMAs.

Blue (inner) = EMA20 +/- 2 * ATR, yellow (outer) = EMA60 +/- 3 * ATR.
"""

import logging
from typing import Sequence

import pandas as pd

from kline_signals.indicators.smoothing import ema
from kline_signals.models.candle import Candle, candles_to_dataframe
from kline_signals.models.signals import LadderLevel

logger = logging.getLogger(__name__)

LADDER_MIN_BARS = 60


def true_range(df: pd.DataFrame) -> pd.Series:
    """
    Per-bar true range.

    Falls back to high - low on the first bar, where no previous close exists.
    """
    prev_close = df["close"].shift(1)
    ranges = pd.concat(
        [
            df["high"] - df["low"],
            (df["high"] - prev_close).abs(),
            (df["low"] - prev_close).abs(),
        ],
        axis=1,
    )
    # max() skips the NaN gaps on bar 0
    return ranges.max(axis=1)


def calculate_ladder(
    candles: Sequence[Candle],
    blue_period: int = 20,
    yellow_period: int = 60,
    atr_period: int = 14,
    blue_multiplier: float = 2.0,
    yellow_multiplier: float = 3.0,
    min_bars: int = LADDER_MIN_BARS,
) -> list[LadderLevel]:
    """
    Compute ladder levels for every candle.

    Args:
        candles: Candles in ascending time order
        blue_period: EMA period of the inner band midpoint
        yellow_period: EMA period of the outer band midpoint
        atr_period: EMA period of the true range
        blue_multiplier: ATR multiple for the inner band
        yellow_multiplier: ATR multiple for the outer band
        min_bars: Minimum history required

    Returns:
        One LadderLevel per candle; empty with fewer than `min_bars` candles
    """
    if len(candles) < min_bars:
        logger.debug(f"Ladder needs {min_bars} bars, got {len(candles)}")
        return []

    df = candles_to_dataframe(candles)
    blue_mid = ema(df["close"], blue_period)
    yellow_mid = ema(df["close"], yellow_period)
    atr = ema(true_range(df), atr_period)

    levels = pd.DataFrame(
        {
            "blue_upper": blue_mid + atr * blue_multiplier,
            "blue_lower": blue_mid - atr * blue_multiplier,
            "yellow_upper": yellow_mid + atr * yellow_multiplier,
            "yellow_lower": yellow_mid - atr * yellow_multiplier,
            "blue_mid": blue_mid,
            "yellow_mid": yellow_mid,
        }
    )

    return [
        LadderLevel(time=int(time), **row)
        for time, row in zip(levels.index, levels.to_dict("records"))
    ]


def is_ladder_strong(
    candles: Sequence[Candle],
    levels: Sequence[LadderLevel] | None = None,
    min_bars: int = LADDER_MIN_BARS,
) -> bool:
    """
    Check for a strong ladder trend on the latest bar.

    Strong means the blue midpoint is rising, the blue upper band sits above
    the yellow upper band, and the latest close holds above the blue lower band.

    Args:
        candles: Candles in ascending time order
        levels: Precomputed ladder levels (computed from `candles` if omitted)
        min_bars: Minimum history required

    Returns:
        True if all three conditions hold
    """
    if len(candles) < min_bars:
        return False

    if levels is None:
        levels = calculate_ladder(candles, min_bars=min_bars)
    if len(levels) < 3:
        return False

    latest, previous = levels[-1], levels[-2]
    rising = latest.blue_mid > previous.blue_mid
    blue_above_yellow = latest.blue_upper > latest.yellow_upper
    holding = candles[-1].close > latest.blue_lower

    return rising and blue_above_yellow and holding
