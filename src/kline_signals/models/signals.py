"""
Derived signal and indicator records.

Everything here is built fresh by an indicator call and never mutated.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class SignalDirection(str, Enum):
    """Which side an event points to."""

    BUY = "buy"
    SELL = "sell"


class SignalStrength(str, Enum):
    """Confidence tier of a CD event."""

    STRONG = "strong"
    MEDIUM = "medium"
    WEAK = "weak"


class PressureSignal(str, Enum):
    """Buy/sell pressure surge markers."""

    STRONG_UP = "strong_up"
    STRONG_DOWN = "strong_down"


class CDSignal(BaseModel):
    """A CD divergence event with the MACD snapshot at emission."""

    model_config = ConfigDict(frozen=True)

    time: int
    direction: SignalDirection
    strength: SignalStrength
    label: str
    diff: float
    signal_line: float
    histogram: float


class NXSignal(BaseModel):
    """An EMA5/EMA10 crossover event."""

    model_config = ConfigDict(frozen=True)

    time: int
    direction: SignalDirection
    label: str


class PressurePoint(BaseModel):
    """Smoothed buy/sell pressure for one bar."""

    model_config = ConfigDict(frozen=True)

    time: int
    pressure: float
    change_rate: float  # percent
    signal: Optional[PressureSignal] = None


class LadderLevel(BaseModel):
    """Inner (blue) and outer (yellow) ATR bands for one bar."""

    model_config = ConfigDict(frozen=True)

    time: int
    blue_upper: float
    blue_lower: float
    yellow_upper: float
    yellow_lower: float
    blue_mid: float
    yellow_mid: float
