"""Analysis helpers built on the indicator engine."""

from .engine import IndicatorBundle, compute_indicators
from .screener import ScreenCondition, ScreenHit, ScreenResult, screen_candles, screen_universe

__all__ = [
    "IndicatorBundle",
    "compute_indicators",
    "ScreenCondition",
    "ScreenHit",
    "ScreenResult",
    "screen_candles",
    "screen_universe",
]
