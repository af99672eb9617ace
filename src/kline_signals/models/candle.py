"""
Candle value records.

A candle's `time` is the epoch-millisecond start of its period.
"""

from enum import Enum
from typing import Sequence

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field, model_validator


class Interval(str, Enum):
    """Bar intervals understood by aggregation and display-time helpers."""

    ONE_MINUTE = "1m"
    THREE_MINUTES = "3m"
    FIVE_MINUTES = "5m"
    FIFTEEN_MINUTES = "15m"
    THIRTY_MINUTES = "30m"
    ONE_HOUR = "1h"
    TWO_HOURS = "2h"
    THREE_HOURS = "3h"
    FOUR_HOURS = "4h"
    DAILY = "1d"
    WEEKLY = "1w"
    MONTHLY = "1mo"

    @property
    def is_intraday(self) -> bool:
        return self not in {Interval.DAILY, Interval.WEEKLY, Interval.MONTHLY}


class Candle(BaseModel):
    """Single OHLCV bar."""

    model_config = ConfigDict(frozen=True)

    time: int = Field(description="Period start, epoch milliseconds")
    open: float
    high: float
    low: float
    close: float
    volume: float = Field(default=0.0, ge=0)

    @model_validator(mode="after")
    def check_range(self) -> "Candle":
        """High must cover the body and low must sit beneath it."""
        if self.high < max(self.open, self.close):
            raise ValueError(f"high {self.high} below body at {self.time}")
        if self.low > min(self.open, self.close):
            raise ValueError(f"low {self.low} above body at {self.time}")
        return self

    @property
    def range(self) -> float:
        return self.high - self.low


def candles_to_dataframe(candles: Sequence[Candle]) -> pd.DataFrame:
    """
    Convert candles to a DataFrame for vectorised calculations.

    Args:
        candles: Candles in ascending time order

    Returns:
        DataFrame with columns: open, high, low, close, volume
        Index is `time` (epoch ms), in input order
    """
    if not candles:
        return pd.DataFrame(columns=["open", "high", "low", "close", "volume"], dtype=float)

    df = pd.DataFrame(
        [
            {
                "time": c.time,
                "open": c.open,
                "high": c.high,
                "low": c.low,
                "close": c.close,
                "volume": c.volume,
            }
            for c in candles
        ]
    )
    df.set_index("time", inplace=True)
    return df
