"""
Candle aggregation into coarser bars.

Two bucketing clocks are used on purpose:
- session blocks approximate US exchange time from the UTC hour with a
  month-based daylight-saving offset (4h in Mar-Nov, else 5h)
- calendar months use the local wall clock of the running process
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Sequence

from kline_signals.models.candle import Candle, Interval, candles_to_dataframe

logger = logging.getLogger(__name__)

SESSION_SPLIT_HOUR = 14

INTERVAL_MS = {
    Interval.ONE_MINUTE: 60_000,
    Interval.THREE_MINUTES: 180_000,
    Interval.FIVE_MINUTES: 300_000,
    Interval.FIFTEEN_MINUTES: 900_000,
    Interval.THIRTY_MINUTES: 1_800_000,
    Interval.ONE_HOUR: 3_600_000,
    Interval.TWO_HOURS: 7_200_000,
    Interval.THREE_HOURS: 10_800_000,
    Interval.FOUR_HOURS: 14_400_000,
}


def _parse_interval(interval: str | Interval) -> Interval | None:
    try:
        return Interval(interval)
    except ValueError:
        return None


def session_key(time_ms: int) -> str:
    """Bucket key `YYYY-MM-DD-AM` / `-PM` for a bar start time."""
    dt = datetime.fromtimestamp(time_ms / 1000, tz=timezone.utc)
    dst_offset = 4 if 2 <= dt.month - 1 <= 10 else 5
    local_hour = (dt.hour - dst_offset) % 24
    half = "AM" if local_hour < SESSION_SPLIT_HOUR else "PM"
    return f"{dt:%Y-%m-%d}-{half}"


def month_key(time_ms: int) -> str:
    """Bucket key `YYYY-MM` in local wall-clock time."""
    dt = datetime.fromtimestamp(time_ms / 1000)
    return f"{dt:%Y-%m}"


def _aggregate(candles: Sequence[Candle], key: Callable[[int], str]) -> list[Candle]:
    if not candles:
        return []

    df = candles_to_dataframe(candles).reset_index()
    df["bucket"] = [key(int(t)) for t in df["time"]]

    grouped = df.groupby("bucket", sort=False).agg(
        time=("time", "first"),
        open=("open", "first"),
        high=("high", "max"),
        low=("low", "min"),
        close=("close", "last"),
        volume=("volume", "sum"),
    )
    grouped = grouped.sort_values("time")

    return [Candle(**row) for row in grouped.to_dict("records")]


def aggregate_to_sessions(candles: Sequence[Candle]) -> list[Candle]:
    """
    Combine sub-daily bars (typically hourly) into AM/PM session blocks.

    Each block takes the first open and time, the highest high, the lowest
    low, the last close and the summed volume.
    """
    result = _aggregate(candles, session_key)
    logger.debug(f"Aggregated {len(candles)} bars into {len(result)} session blocks")
    return result


def aggregate_to_months(candles: Sequence[Candle]) -> list[Candle]:
    """Combine daily bars into calendar-month bars."""
    result = _aggregate(candles, month_key)
    logger.debug(f"Aggregated {len(candles)} bars into {len(result)} months")
    return result


def aggregate_for_interval(candles: Sequence[Candle], interval: str | Interval) -> list[Candle]:
    """
    Apply the bucketing a display interval needs.

    `4h` builds session blocks from hourly bars and `1mo` builds calendar
    months from daily bars. Every other interval, known or not, passes the
    candles through unchanged.
    """
    parsed = _parse_interval(interval)
    if parsed is Interval.FOUR_HOURS:
        return aggregate_to_sessions(candles)
    if parsed is Interval.MONTHLY:
        return aggregate_to_months(candles)
    if parsed is None:
        logger.warning(f"Unknown interval {interval!r}, candles left as-is")
    return list(candles)


def to_display_time(time_ms: int, interval: str | Interval) -> int:
    """
    Shift a bar's start time to its end time for charting.

    A 30m bar starting 09:30 displays as 10:00. Daily, weekly, monthly and
    unknown intervals are returned unchanged.
    """
    parsed = _parse_interval(interval)
    if parsed is None:
        return time_ms
    return time_ms + INTERVAL_MS.get(parsed, 0)
