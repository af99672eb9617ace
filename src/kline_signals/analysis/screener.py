"""
Screener conditions over computed indicator events.

A condition matches when its event occurred within a trailing window of the
latest bars. Conditions are evaluated in the order given; the first match
wins for a symbol.
"""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Mapping, Sequence

from pydantic import BaseModel

from ..config import IndicatorConfig, ScreenerConfig, get_indicator_config, get_screener_config
from ..models import Candle, PressureSignal, SignalDirection, SignalStrength
from .engine import IndicatorBundle, compute_indicators

logger = logging.getLogger(__name__)


class ScreenCondition(str, Enum):
    """
    Screening conditions.

    CD events are currently all emitted as strong, so `cd_strong_buy` matches
    the same events as `cd_buy`. It only filters once medium or weak CD
    events are produced.
    """

    BSP_STRONG_UP = "bsp_strong_up"
    CD_BUY = "cd_buy"
    CD_STRONG_BUY = "cd_strong_buy"
    CD_SELL = "cd_sell"
    NX_BUY = "nx_buy"
    LADDER_STRONG = "ladder_strong"


class ScreenHit(BaseModel):
    """A symbol that satisfied a condition."""

    symbol: str
    condition: ScreenCondition
    detail: str
    time: int | None = None


@dataclass
class ScreenResult:
    """Outcome of screening a universe of symbols."""

    hits: list[ScreenHit] = field(default_factory=list)
    screened: int = 0
    skipped: list[str] = field(default_factory=list)
    errors: list[dict] = field(default_factory=list)
    duration_seconds: float = 0.0

    @property
    def hit_symbols(self) -> list[str]:
        return [h.symbol for h in self.hits]


def _match(
    symbol: str,
    condition: ScreenCondition,
    bundle: IndicatorBundle,
    cfg: ScreenerConfig,
) -> ScreenHit | None:
    if condition is ScreenCondition.BSP_STRONG_UP:
        window = bundle.recent_times(cfg.pressure_window_bars)
        for point in bundle.pressure:
            if point.time in window and point.signal is PressureSignal.STRONG_UP:
                return ScreenHit(
                    symbol=symbol,
                    condition=condition,
                    detail=f"change rate {point.change_rate:+.1f}%",
                    time=point.time,
                )
        return None

    if condition in (
        ScreenCondition.CD_BUY,
        ScreenCondition.CD_STRONG_BUY,
        ScreenCondition.CD_SELL,
    ):
        window = bundle.recent_times(cfg.cd_window_bars)
        wanted = SignalDirection.SELL if condition is ScreenCondition.CD_SELL else SignalDirection.BUY
        for sig in reversed(bundle.cd_signals):
            if sig.time not in window or sig.direction is not wanted:
                continue
            if condition is ScreenCondition.CD_STRONG_BUY and sig.strength is not SignalStrength.STRONG:
                continue
            return ScreenHit(symbol=symbol, condition=condition, detail=sig.label, time=sig.time)
        return None

    if condition is ScreenCondition.NX_BUY:
        window = bundle.recent_times(cfg.nx_window_bars)
        for sig in reversed(bundle.nx_signals):
            if sig.time in window and sig.direction is SignalDirection.BUY:
                return ScreenHit(symbol=symbol, condition=condition, detail=sig.label, time=sig.time)
        return None

    if condition is ScreenCondition.LADDER_STRONG:
        if bundle.ladder_strong:
            latest = bundle.ladder[-1]
            return ScreenHit(
                symbol=symbol,
                condition=condition,
                detail=f"blue upper {latest.blue_upper:.2f} > yellow upper {latest.yellow_upper:.2f}",
                time=latest.time,
            )
        return None

    return None


def screen_candles(
    symbol: str,
    candles: Sequence[Candle],
    conditions: Iterable[ScreenCondition | str],
    screener_config: ScreenerConfig | None = None,
    indicator_config: IndicatorConfig | None = None,
) -> ScreenHit | None:
    """
    Screen one symbol.

    Args:
        symbol: Ticker symbol
        candles: Candles in ascending time order
        conditions: Conditions to test, in priority order
        screener_config: Window settings
        indicator_config: Indicator parameters

    Returns:
        The first matching ScreenHit, or None
    """
    cfg = screener_config or get_screener_config()
    ind_cfg = indicator_config or get_indicator_config()

    if len(candles) < ind_cfg.cd_min_bars:
        logger.debug(f"Skipping {symbol}: {len(candles)} bars")
        return None

    bundle = compute_indicators(candles, ind_cfg)
    for condition in conditions:
        hit = _match(symbol, ScreenCondition(condition), bundle, cfg)
        if hit is not None:
            logger.info(f"{symbol} matched {hit.condition.value}: {hit.detail}")
            return hit

    return None


def screen_universe(
    universe: Mapping[str, Sequence[Candle]],
    conditions: Iterable[ScreenCondition | str],
    screener_config: ScreenerConfig | None = None,
    indicator_config: IndicatorConfig | None = None,
) -> ScreenResult:
    """
    Screen every symbol of a {symbol: candles} mapping.

    A failure on one symbol is recorded in `errors` and the scan continues.
    """
    ind_cfg = indicator_config or get_indicator_config()
    conditions = [ScreenCondition(c) for c in conditions]
    result = ScreenResult()
    start = time.monotonic()

    logger.info(f"Screening {len(universe)} symbols for {[c.value for c in conditions]}")

    for symbol, candles in universe.items():
        if len(candles) < ind_cfg.cd_min_bars:
            result.skipped.append(symbol)
            continue

        result.screened += 1
        try:
            hit = screen_candles(symbol, candles, conditions, screener_config, ind_cfg)
        except Exception as e:
            logger.error(f"Failed to screen {symbol}: {e}")
            result.errors.append({"symbol": symbol, "error": str(e)})
            continue

        if hit is not None:
            result.hits.append(hit)

    result.duration_seconds = time.monotonic() - start
    logger.info(
        f"Screened {result.screened} symbols: {len(result.hits)} hits, "
        f"{len(result.skipped)} skipped, {len(result.errors)} errors"
    )
    return result
