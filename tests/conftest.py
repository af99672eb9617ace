"""Pytest configuration and fixtures."""

from datetime import datetime, timezone

import numpy as np
import pytest

from kline_signals.models import Candle

BASE_TIME = int(datetime(2024, 1, 2, tzinfo=timezone.utc).timestamp() * 1000)
MINUTE_MS = 60_000


def generate_candles(count: int, base_price: float = 100.0, volatility: float = 2.0, seed: int = 42) -> list[Candle]:
    """Random-walk candles, one per minute."""
    rng = np.random.RandomState(seed)
    candles = []
    price = base_price

    for i in range(count):
        change = (rng.rand() - 0.5) * volatility
        open_ = price
        close = max(price + change, 1.0)
        candles.append(
            Candle(
                time=BASE_TIME + i * MINUTE_MS,
                open=open_,
                high=max(open_, close) + rng.rand() * volatility * 0.5,
                low=max(min(open_, close) - rng.rand() * volatility * 0.5, 0.5),
                close=close,
                volume=float(rng.randint(100_000, 600_000)),
            )
        )
        price = close

    return candles


def candles_from_closes(closes, volumes=None, spread: float = 0.5) -> list[Candle]:
    """Candles opening at the previous close with a fixed wick around the body."""
    candles = []
    prev = closes[0]
    for i, close in enumerate(closes):
        open_ = prev
        candles.append(
            Candle(
                time=BASE_TIME + i * MINUTE_MS,
                open=open_,
                high=max(open_, close) + spread,
                low=min(open_, close) - spread,
                close=close,
                volume=100_000.0 if volumes is None else float(volumes[i]),
            )
        )
        prev = close
    return candles


def flat_series(count: int, price: float = 100.0, volume: float = 10_000.0) -> list[Candle]:
    """Zero-range candles at a constant price."""
    return [
        Candle(
            time=BASE_TIME + i * MINUTE_MS,
            open=price,
            high=price,
            low=price,
            close=price,
            volume=volume,
        )
        for i in range(count)
    ]


@pytest.fixture
def make_candles():
    """Factory for random-walk candles."""
    return generate_candles


@pytest.fixture
def make_candles_from_closes():
    """Factory for candles built from a close path."""
    return candles_from_closes


@pytest.fixture
def random_candles() -> list[Candle]:
    """200 random-walk candles."""
    return generate_candles(200, volatility=5.0)


@pytest.fixture
def flat_candles() -> list[Candle]:
    """100 zero-range candles at 100."""
    return flat_series(100)


@pytest.fixture
def uptrend_candles() -> list[Candle]:
    """Steady uptrend, +1 per bar for 100 bars."""
    return candles_from_closes([100.0 + i for i in range(100)], spread=0.2)


@pytest.fixture
def downtrend_candles() -> list[Candle]:
    """Steady downtrend, -1 per bar for 100 bars."""
    return candles_from_closes([300.0 - i for i in range(100)], spread=0.2)


@pytest.fixture
def pressure_spike_candles() -> list[Candle]:
    """30 balanced bars at 100k volume followed by 5 bars closing near the high on 1M volume."""
    candles = [
        Candle(time=BASE_TIME + i * MINUTE_MS, open=100, high=101, low=99, close=100, volume=100_000)
        for i in range(30)
    ]
    candles += [
        Candle(time=BASE_TIME + i * MINUTE_MS, open=100, high=110, low=100, close=109.5, volume=1_000_000)
        for i in range(30, 35)
    ]
    return candles


@pytest.fixture
def pressure_drop_candles() -> list[Candle]:
    """30 balanced bars followed by 5 bars closing near the low on 1M volume."""
    candles = [
        Candle(time=BASE_TIME + i * MINUTE_MS, open=100, high=101, low=99, close=100, volume=100_000)
        for i in range(30)
    ]
    candles += [
        Candle(time=BASE_TIME + i * MINUTE_MS, open=100, high=100, low=90, close=90.5, volume=1_000_000)
        for i in range(30, 35)
    ]
    return candles
