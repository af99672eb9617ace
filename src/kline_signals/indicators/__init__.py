"""
Technical indicator engine.

Pure functions from a candle sequence to derived series or event lists.
"""

from kline_signals.indicators.cd_signal import (
    CDBarState,
    CascadeFlags,
    Phase,
    calculate_cd_signals,
    iter_cd_states,
)
from kline_signals.indicators.ladder import calculate_ladder, is_ladder_strong, true_range
from kline_signals.indicators.lookback import (
    distance_since_true,
    look_back,
    trailing_max,
    trailing_min,
    true_count,
)
from kline_signals.indicators.macd import MACDResult, calculate_macd
from kline_signals.indicators.nx import calculate_nx_signals
from kline_signals.indicators.pressure import calculate_buy_sell_pressure
from kline_signals.indicators.smoothing import ema, sma

__all__ = [
    # Smoothing
    "ema",
    "sma",
    # Lookback primitives
    "distance_since_true",
    "look_back",
    "trailing_max",
    "trailing_min",
    "true_count",
    # MACD
    "MACDResult",
    "calculate_macd",
    # CD cascade
    "CDBarState",
    "CascadeFlags",
    "Phase",
    "calculate_cd_signals",
    "iter_cd_states",
    # Pressure
    "calculate_buy_sell_pressure",
    # Ladder
    "calculate_ladder",
    "is_ladder_strong",
    "true_range",
    # NX
    "calculate_nx_signals",
]
