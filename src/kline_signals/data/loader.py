"""
Load candles from local CSV or JSON files.

Times may be epoch milliseconds or ISO datetimes (naive values are UTC).
"""

import json
import logging
from pathlib import Path
from typing import Any

import pandas as pd
from pydantic import ValidationError

from kline_signals.models.candle import Candle

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ["time", "open", "high", "low", "close", "volume"]


class CandleLoadError(ValueError):
    """Raised when a candle file cannot be turned into a candle sequence."""


def _read_frame(path: Path) -> pd.DataFrame:
    suffix = path.suffix.lower()
    if suffix == ".csv":
        return pd.read_csv(path)
    if suffix == ".json":
        payload: Any = json.loads(path.read_text())
        if isinstance(payload, dict):
            payload = payload.get("candles", [])
        if not isinstance(payload, list):
            raise CandleLoadError(f"{path}: expected a list of candles")
        if not payload:
            return pd.DataFrame(columns=REQUIRED_COLUMNS)
        return pd.DataFrame(payload)
    raise CandleLoadError(f"{path}: unsupported file type {suffix!r}")


def _to_epoch_ms(times: pd.Series) -> pd.Series:
    if pd.api.types.is_numeric_dtype(times):
        return times.astype("int64")
    parsed = pd.to_datetime(times, utc=True)
    return (parsed - pd.Timestamp(0, tz="UTC")) // pd.Timedelta(milliseconds=1)


def frame_to_candles(df: pd.DataFrame, source: str = "<frame>") -> list[Candle]:
    """
    Validate a DataFrame of OHLCV rows into ascending, de-duplicated candles.

    Args:
        df: DataFrame with time/open/high/low/close/volume columns (any case)
        source: Name used in error messages

    Returns:
        Candles sorted ascending by time

    Raises:
        CandleLoadError: Missing columns or a row that fails validation
    """
    df = df.rename(columns={c: str(c).strip().lower() for c in df.columns})
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise CandleLoadError(f"{source}: missing columns {missing}")

    if df.empty:
        return []

    df = df[REQUIRED_COLUMNS].dropna(subset=["time", "open", "high", "low", "close"])
    df = df.assign(time=_to_epoch_ms(df["time"]), volume=df["volume"].fillna(0))
    df = df.sort_values("time", kind="stable")

    duplicated = df["time"].duplicated(keep="first")
    if duplicated.any():
        logger.warning(f"{source}: dropped {int(duplicated.sum())} duplicate timestamps")
        df = df[~duplicated]

    candles = []
    for row_number, row in enumerate(df.to_dict("records"), start=1):
        try:
            candles.append(Candle(**row))
        except ValidationError as e:
            raise CandleLoadError(f"{source}: invalid candle in row {row_number}: {e}") from e

    return candles


def load_candles(path: str | Path) -> list[Candle]:
    """
    Load a candle file.

    Args:
        path: `.csv` file with a header row, or `.json` file holding a list
            of candle objects (optionally under a "candles" key)

    Returns:
        Candles sorted ascending by time

    Raises:
        CandleLoadError: File missing, unsupported, or malformed
    """
    path = Path(path)
    if not path.exists():
        raise CandleLoadError(f"{path}: file not found")

    try:
        df = _read_frame(path)
    except (json.JSONDecodeError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise CandleLoadError(f"{path}: could not parse file: {e}") from e

    candles = frame_to_candles(df, source=str(path))
    logger.info(f"Loaded {len(candles)} candles from {path}")
    return candles
