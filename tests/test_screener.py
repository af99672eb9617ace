"""Tests for the indicator engine and screener."""

import pytest

from kline_signals.analysis import (
    IndicatorBundle,
    ScreenCondition,
    compute_indicators,
    screen_candles,
    screen_universe,
)
from kline_signals.analysis.screener import _match
from kline_signals.config import IndicatorConfig, ScreenerConfig
from kline_signals.indicators import calculate_macd
from kline_signals.models import CDSignal, SignalDirection, SignalStrength


@pytest.fixture
def screener_config() -> ScreenerConfig:
    return ScreenerConfig()


def cd_bundle(
    candles,
    offset: int,
    direction: SignalDirection,
    strength: SignalStrength = SignalStrength.STRONG,
) -> IndicatorBundle:
    """Bundle holding a single CD event `offset` bars from the end."""
    sig = CDSignal(
        time=candles[-offset].time,
        direction=direction,
        strength=strength,
        label="bottom-fish" if direction is SignalDirection.BUY else "sell",
        diff=0.0,
        signal_line=0.0,
        histogram=0.0,
    )
    return IndicatorBundle(candles=candles, macd=calculate_macd(candles), cd_signals=[sig])


class TestComputeIndicators:
    """Tests for compute_indicators."""

    def test_full_bundle(self, random_candles):
        """Every indicator runs on a long enough sequence."""
        bundle = compute_indicators(random_candles)

        assert len(bundle.macd) == len(random_candles)
        assert len(bundle.pressure) == len(random_candles)
        assert len(bundle.ladder) == len(random_candles)

    def test_short_sequence(self, make_candles):
        """Indicators with unmet minimums come back empty."""
        bundle = compute_indicators(make_candles(15))

        assert len(bundle.macd) == 15
        assert bundle.cd_signals == []
        assert bundle.ladder == []
        assert bundle.nx_signals == []
        assert len(bundle.pressure) == 15
        assert bundle.ladder_strong is False

    def test_config_is_applied(self, random_candles):
        """Indicator parameters come from the given config."""
        bundle = compute_indicators(random_candles, IndicatorConfig(ladder_min_bars=500))
        assert bundle.ladder == []

    def test_recent_times(self, random_candles):
        """recent_times returns the latest bar times."""
        bundle = compute_indicators(random_candles)
        assert bundle.recent_times(2) == {random_candles[-1].time, random_candles[-2].time}
        assert bundle.recent_times(0) == set()


class TestConditions:
    """Tests for individual screening conditions."""

    def test_cd_buy_in_window(self, random_candles, screener_config):
        """A recent bottom-fish event matches cd_buy and cd_strong_buy."""
        bundle = cd_bundle(random_candles, 2, SignalDirection.BUY)

        hit = _match("AAA", ScreenCondition.CD_BUY, bundle, screener_config)
        assert hit is not None
        assert hit.detail == "bottom-fish"
        assert hit.time == random_candles[-2].time
        assert _match("AAA", ScreenCondition.CD_STRONG_BUY, bundle, screener_config) is not None
        assert _match("AAA", ScreenCondition.CD_SELL, bundle, screener_config) is None

    def test_cd_event_outside_window(self, random_candles, screener_config):
        """Events older than the window do not match."""
        bundle = cd_bundle(random_candles, 20, SignalDirection.BUY)
        assert _match("AAA", ScreenCondition.CD_BUY, bundle, screener_config) is None

    def test_cd_strong_buy_needs_strong_event(self, random_candles, screener_config):
        """A medium-strength buy matches cd_buy but not cd_strong_buy."""
        bundle = cd_bundle(random_candles, 2, SignalDirection.BUY, SignalStrength.MEDIUM)

        assert _match("AAA", ScreenCondition.CD_BUY, bundle, screener_config) is not None
        assert _match("AAA", ScreenCondition.CD_STRONG_BUY, bundle, screener_config) is None

    def test_cd_sell(self, random_candles, screener_config):
        """A recent sell event matches cd_sell."""
        bundle = cd_bundle(random_candles, 1, SignalDirection.SELL)
        assert _match("AAA", ScreenCondition.CD_SELL, bundle, screener_config) is not None
        assert _match("AAA", ScreenCondition.CD_BUY, bundle, screener_config) is None


class TestScreenCandles:
    """Tests for screen_candles."""

    def test_pressure_surge(self, pressure_spike_candles):
        """A recent strong_up bar matches bsp_strong_up."""
        hit = screen_candles("SPIK", pressure_spike_candles, ["bsp_strong_up"])

        assert hit is not None
        assert hit.condition is ScreenCondition.BSP_STRONG_UP
        assert hit.time in {c.time for c in pressure_spike_candles[-5:]}

    def test_ladder_strong(self, uptrend_candles):
        """A steady uptrend matches ladder_strong."""
        hit = screen_candles("UP", uptrend_candles, [ScreenCondition.LADDER_STRONG])

        assert hit is not None
        assert hit.detail.startswith("blue upper")

    def test_first_match_wins(self, uptrend_candles):
        """Conditions are tried in the given order."""
        hit = screen_candles("UP", uptrend_candles, ["bsp_strong_up", "ladder_strong"])
        assert hit.condition is ScreenCondition.LADDER_STRONG

    def test_no_match(self, downtrend_candles):
        """No hit when nothing matches."""
        assert screen_candles("DOWN", downtrend_candles, ["ladder_strong"]) is None

    def test_short_history_skipped(self, uptrend_candles):
        """Fewer than 30 bars are never screened."""
        assert screen_candles("UP", uptrend_candles[:29], ["ladder_strong"]) is None

    def test_unknown_condition(self, uptrend_candles):
        """Unknown condition names are rejected."""
        with pytest.raises(ValueError):
            screen_candles("UP", uptrend_candles, ["moon"])


class TestScreenUniverse:
    """Tests for screen_universe."""

    def test_hits_and_skips(self, uptrend_candles, downtrend_candles):
        """Hits, screened count and skipped symbols are reported."""
        universe = {
            "UP": uptrend_candles,
            "DOWN": downtrend_candles,
            "TINY": uptrend_candles[:10],
        }
        result = screen_universe(universe, ["ladder_strong"])

        assert result.hit_symbols == ["UP"]
        assert result.screened == 2
        assert result.skipped == ["TINY"]
        assert result.errors == []

    def test_error_isolated(self, uptrend_candles, monkeypatch):
        """A failure on one symbol does not stop the scan."""
        import kline_signals.analysis.screener as screener

        real = screener.compute_indicators

        def flaky(candles, config=None):
            if len(candles) == 99:
                raise RuntimeError("boom")
            return real(candles, config)

        monkeypatch.setattr(screener, "compute_indicators", flaky)
        result = screen_universe(
            {"BAD": uptrend_candles[:99], "UP": uptrend_candles}, ["ladder_strong"]
        )

        assert result.hit_symbols == ["UP"]
        assert result.errors == [{"symbol": "BAD", "error": "boom"}]
