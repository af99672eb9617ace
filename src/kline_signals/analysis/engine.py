"""Run every indicator over one candle sequence with configured parameters."""

import logging
from dataclasses import dataclass, field
from typing import Sequence

from ..config import IndicatorConfig, get_indicator_config
from ..indicators import (
    MACDResult,
    calculate_buy_sell_pressure,
    calculate_cd_signals,
    calculate_ladder,
    calculate_macd,
    calculate_nx_signals,
    is_ladder_strong,
)
from ..models import CDSignal, Candle, LadderLevel, NXSignal, PressurePoint

logger = logging.getLogger(__name__)


@dataclass
class IndicatorBundle:
    """All indicator outputs for one candle sequence."""

    candles: list[Candle]
    macd: MACDResult
    cd_signals: list[CDSignal] = field(default_factory=list)
    pressure: list[PressurePoint] = field(default_factory=list)
    ladder: list[LadderLevel] = field(default_factory=list)
    nx_signals: list[NXSignal] = field(default_factory=list)
    ladder_strong: bool = False

    def recent_times(self, bars: int) -> set[int]:
        """Times of the latest `bars` candles."""
        if bars <= 0:
            return set()
        return {c.time for c in self.candles[-bars:]}


def compute_indicators(
    candles: Sequence[Candle],
    config: IndicatorConfig | None = None,
) -> IndicatorBundle:
    """
    Compute MACD, CD signals, pressure, ladder and NX signals.

    Each indicator applies its own minimum-history rule and comes back empty
    when the sequence is too short.
    """
    cfg = config or get_indicator_config()
    candles = list(candles)

    ladder = calculate_ladder(
        candles,
        blue_period=cfg.ladder_blue_period,
        yellow_period=cfg.ladder_yellow_period,
        atr_period=cfg.ladder_atr_period,
        blue_multiplier=cfg.ladder_blue_multiplier,
        yellow_multiplier=cfg.ladder_yellow_multiplier,
        min_bars=cfg.ladder_min_bars,
    )

    bundle = IndicatorBundle(
        candles=candles,
        macd=calculate_macd(candles, cfg.macd_fast, cfg.macd_slow, cfg.macd_signal),
        cd_signals=calculate_cd_signals(
            candles,
            fast=cfg.macd_fast,
            slow=cfg.macd_slow,
            signal=cfg.macd_signal,
            min_bars=cfg.cd_min_bars,
            easing=cfg.cd_easing_multiplier,
            buy_guard=cfg.cd_buy_guard_bars,
            sell_guard=cfg.cd_sell_guard_bars,
        ),
        pressure=calculate_buy_sell_pressure(
            candles,
            smoothing_period=cfg.pressure_smoothing_period,
            average_period=cfg.pressure_average_period,
            change_threshold=cfg.pressure_change_threshold,
            volume_multiplier=cfg.pressure_volume_multiplier,
            strength_multiplier=cfg.pressure_strength_multiplier,
            min_bars=cfg.pressure_min_bars,
        ),
        ladder=ladder,
        nx_signals=calculate_nx_signals(
            candles,
            fast=cfg.nx_fast,
            slow=cfg.nx_slow,
            volume_period=cfg.nx_volume_period,
            volume_multiplier=cfg.nx_volume_multiplier,
            min_bars=cfg.nx_min_bars,
        ),
        ladder_strong=is_ladder_strong(candles, ladder, min_bars=cfg.ladder_min_bars),
    )

    logger.debug(
        f"Indicators over {len(candles)} bars: "
        f"cd={len(bundle.cd_signals)}, nx={len(bundle.nx_signals)}, "
        f"ladder={'strong' if bundle.ladder_strong else 'weak'}"
    )
    return bundle
