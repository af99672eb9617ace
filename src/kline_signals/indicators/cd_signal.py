"""
CD signal detection - MACD divergence cascade.

A negative phase starts on a "death flip" (histogram goes from >= 0 to < 0),
a positive phase on a "golden flip" (histogram goes from <= 0 to > 0).

Buy side: the lowest close and lowest diff since the last death flip form the
current generation of phase extrema. On every golden flip the generation from
the bar before the flip is pushed into history, so three generations are
always available: current, previous negative phase, and the one before it.
A bottom divergence is a new price low whose diff low holds above the
previous phase's diff low (pattern A), or a new low against two phases back
with the diff low between the two previous ones (pattern B). The strong buy
fires on the first bar where |diff| eases by at least 1% right after an
active divergence.

The sell side mirrors this with highs, golden-flip phases and death-flip
history rolls.

The detector is a single forward pass over a small rolling state. Its output
is identical to evaluating the formula with the per-bar primitives in
`kline_signals.indicators.lookback`.
"""

import logging
import operator
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterator, Sequence

from kline_signals.indicators.macd import calculate_macd
from kline_signals.models.candle import Candle
from kline_signals.models.signals import CDSignal, SignalDirection, SignalStrength

logger = logging.getLogger(__name__)

CD_MIN_BARS = 30
EASING_MULTIPLIER = 1.01
BUY_GUARD_BARS = 24
SELL_GUARD_BARS = 23

BUY_LABEL = "bottom-fish"
SELL_LABEL = "sell"


class Phase(str, Enum):
    """Histogram phase the detector is currently in."""

    IDLE = "idle"  # no flip seen yet
    NEGATIVE = "negative"
    POSITIVE = "positive"


@dataclass(frozen=True)
class CascadeFlags:
    """One side's predicates and phase extrema for a single bar."""

    price_extrema: tuple[float, float, float] = (0.0, 0.0, 0.0)
    diff_extrema: tuple[float, float, float] = (0.0, 0.0, 0.0)
    pattern_a: bool = False
    pattern_b: bool = False
    active: bool = False
    active_edge: bool = False
    eroded: bool = False
    easing: bool = False
    renewed: bool = False
    easing_edge: bool = False
    breakout: bool = False
    breakout_edge: bool = False
    secondary: bool = False


@dataclass(frozen=True)
class CDBarState:
    """Trace of the cascade at one bar."""

    index: int
    time: int
    phase: Phase
    bars_since_death_flip: int
    bars_since_golden_flip: int
    diff: float
    signal_line: float
    histogram: float
    buy: CascadeFlags
    sell: CascadeFlags


class _CascadeSide:
    """
    Rolling state for one side of the cascade.

    `beyond(a, b)` means "a is further in this side's direction than b"
    (a < b for the buy side, a > b for the sell side).
    """

    def __init__(
        self,
        beyond: Callable[[float, float], bool],
        extreme: Callable[[float, float], float],
        guard: int,
        easing: float,
    ):
        self._beyond = beyond
        self._extreme = extreme
        self._easing = easing
        self._recent_easing: deque[bool] = deque(maxlen=guard)
        self._price = 0.0
        self._diff = 0.0
        self._price_history = (0.0, 0.0)
        self._diff_history = (0.0, 0.0)
        self._easing_at_roll = False
        self._prev = CascadeFlags()

    def step(
        self,
        close: float,
        diff: float,
        dea: float,
        prev_hist: float,
        prev_diff: float,
        first: bool,
        phase_start: bool,
        history_roll: bool,
    ) -> CascadeFlags:
        prev = self._prev
        prev_price, prev_diff_extreme = self._price, self._diff

        if first or phase_start:
            self._price, self._diff = close, diff
        else:
            self._price = self._extreme(self._price, close)
            self._diff = self._extreme(self._diff, diff)

        if history_roll:
            self._price_history = (0.0 if first else prev_price, self._price_history[0])
            self._diff_history = (0.0 if first else prev_diff_extreme, self._diff_history[0])
            self._easing_at_roll = prev.easing

        beyond = self._beyond
        p1, (p2, p3) = self._price, self._price_history
        d1, (d2, d3) = self._diff, self._diff_history

        momentum = beyond(prev_hist, 0.0) and beyond(diff, 0.0)
        pattern_a = beyond(p1, p2) and beyond(d2, d1) and momentum
        pattern_b = beyond(p1, p3) and beyond(d1, d2) and beyond(d3, d1) and momentum
        active = (pattern_a or pattern_b) and beyond(diff, 0.0)
        active_edge = active and not prev.active

        eroded = (prev.pattern_a and not beyond(d2, d1) and beyond(diff, dea)) or (
            prev.pattern_b and not beyond(d3, d1) and beyond(diff, dea)
        )
        easing = prev.active and abs(prev_diff) >= abs(diff) * self._easing
        renewed = prev.easing and active and abs(prev_diff) * self._easing <= abs(diff)
        easing_edge = easing and not prev.easing

        self._recent_easing.append(easing)
        breakout = (
            (beyond(close, p2) or beyond(close, p1))
            and self._easing_at_roll
            and not prev.active_edge
            and any(self._recent_easing)
        )
        breakout_edge = breakout and not prev.breakout
        secondary = (eroded or breakout_edge) and not active

        flags = CascadeFlags(
            price_extrema=(p1, p2, p3),
            diff_extrema=(d1, d2, d3),
            pattern_a=pattern_a,
            pattern_b=pattern_b,
            active=active,
            active_edge=active_edge,
            eroded=eroded,
            easing=easing,
            renewed=renewed,
            easing_edge=easing_edge,
            breakout=breakout,
            breakout_edge=breakout_edge,
            secondary=secondary,
        )
        self._prev = flags
        return flags


def iter_cd_states(
    candles: Sequence[Candle],
    fast: int = 12,
    slow: int = 26,
    signal: int = 9,
    min_bars: int = CD_MIN_BARS,
    easing: float = EASING_MULTIPLIER,
    buy_guard: int = BUY_GUARD_BARS,
    sell_guard: int = SELL_GUARD_BARS,
) -> Iterator[CDBarState]:
    """
    Walk the cascade bar by bar.

    Yields nothing when fewer than `min_bars` candles are given.

    Args:
        candles: Candles in ascending time order
        fast, slow, signal: MACD periods
        min_bars: Minimum history required
        easing: |diff| easing multiplier confirming a divergence
        buy_guard: Trailing window for the buy-side breakout guard
        sell_guard: Trailing window for the sell-side breakout guard

    Yields:
        CDBarState for every bar
    """
    if len(candles) < min_bars:
        logger.debug(f"CD signals need {min_bars} bars, got {len(candles)}")
        return

    macd = calculate_macd(candles, fast, slow, signal)
    diffs = macd.diff.tolist()
    deas = macd.signal_line.tolist()
    hists = macd.histogram.tolist()

    buy_side = _CascadeSide(operator.lt, min, buy_guard, easing)
    sell_side = _CascadeSide(operator.gt, max, sell_guard, easing)

    phase = Phase.IDLE
    since_death = since_golden = 0
    prev_hist = prev_diff = 0.0

    for i, candle in enumerate(candles):
        diff, dea, hist = diffs[i], deas[i], hists[i]
        death_flip = prev_hist >= 0 and hist < 0
        golden_flip = prev_hist <= 0 and hist > 0

        since_death = 0 if death_flip else since_death + 1
        since_golden = 0 if golden_flip else since_golden + 1
        if death_flip:
            phase = Phase.NEGATIVE
        elif golden_flip:
            phase = Phase.POSITIVE

        first = i == 0
        buy = buy_side.step(
            candle.close, diff, dea, prev_hist, prev_diff,
            first=first, phase_start=death_flip, history_roll=golden_flip,
        )
        sell = sell_side.step(
            candle.close, diff, dea, prev_hist, prev_diff,
            first=first, phase_start=golden_flip, history_roll=death_flip,
        )

        yield CDBarState(
            index=i,
            time=candle.time,
            phase=phase,
            bars_since_death_flip=since_death,
            bars_since_golden_flip=since_golden,
            diff=diff,
            signal_line=dea,
            histogram=hist,
            buy=buy,
            sell=sell,
        )

        prev_hist, prev_diff = hist, diff


def calculate_cd_signals(
    candles: Sequence[Candle],
    fast: int = 12,
    slow: int = 26,
    signal: int = 9,
    min_bars: int = CD_MIN_BARS,
    easing: float = EASING_MULTIPLIER,
    buy_guard: int = BUY_GUARD_BARS,
    sell_guard: int = SELL_GUARD_BARS,
) -> list[CDSignal]:
    """
    Detect strong CD buy (bottom-fish) and sell events.

    Only the first bar of a newly confirmed momentum easing after an active
    divergence is emitted, per side.

    Returns:
        Time-ordered CDSignal list; empty with fewer than `min_bars` candles
    """
    signals: list[CDSignal] = []

    for state in iter_cd_states(
        candles, fast, slow, signal, min_bars, easing, buy_guard, sell_guard
    ):
        if state.buy.easing_edge:
            signals.append(_emit(state, SignalDirection.BUY, BUY_LABEL))
        if state.sell.easing_edge:
            signals.append(_emit(state, SignalDirection.SELL, SELL_LABEL))

    return signals


def _emit(state: CDBarState, direction: SignalDirection, label: str) -> CDSignal:
    return CDSignal(
        time=state.time,
        direction=direction,
        strength=SignalStrength.STRONG,
        label=label,
        diff=state.diff,
        signal_line=state.signal_line,
        histogram=state.histogram,
    )
