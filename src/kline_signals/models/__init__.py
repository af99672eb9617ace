"""Data models for candles and derived signals."""

from kline_signals.models.candle import Candle, Interval, candles_to_dataframe
from kline_signals.models.signals import (
    CDSignal,
    LadderLevel,
    NXSignal,
    PressurePoint,
    PressureSignal,
    SignalDirection,
    SignalStrength,
)

__all__ = [
    # Candle models
    "Candle",
    "Interval",
    "candles_to_dataframe",
    # Signal models
    "CDSignal",
    "LadderLevel",
    "NXSignal",
    "PressurePoint",
    "PressureSignal",
    "SignalDirection",
    "SignalStrength",
]
