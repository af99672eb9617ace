"""kline-signals - CD divergence, pressure, ladder and NX signals from candles."""

from .aggregation import (
    aggregate_for_interval,
    aggregate_to_months,
    aggregate_to_sessions,
    to_display_time,
)
from .config import Config, IndicatorConfig, ScreenerConfig, get_config
from .indicators import (
    calculate_buy_sell_pressure,
    calculate_cd_signals,
    calculate_ladder,
    calculate_macd,
    calculate_nx_signals,
    ema,
    is_ladder_strong,
    sma,
)
from .models import (
    CDSignal,
    Candle,
    Interval,
    LadderLevel,
    NXSignal,
    PressurePoint,
    PressureSignal,
    SignalDirection,
    SignalStrength,
)

__version__ = "0.1.0"

__all__ = [
    "aggregate_for_interval",
    "aggregate_to_months",
    "aggregate_to_sessions",
    "to_display_time",
    "Config",
    "IndicatorConfig",
    "ScreenerConfig",
    "get_config",
    "calculate_buy_sell_pressure",
    "calculate_cd_signals",
    "calculate_ladder",
    "calculate_macd",
    "calculate_nx_signals",
    "ema",
    "is_ladder_strong",
    "sma",
    "CDSignal",
    "Candle",
    "Interval",
    "LadderLevel",
    "NXSignal",
    "PressurePoint",
    "PressureSignal",
    "SignalDirection",
    "SignalStrength",
]
