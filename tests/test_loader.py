"""Tests for loading candle files."""

import json

import pandas as pd
import pytest

from kline_signals.data import CandleLoadError, frame_to_candles, load_candles

CSV_ROWS = """time,open,high,low,close,volume
1705329000000,100,110,95,105,1000
1705332600000,105,120,100,115,2000
1705336200000,115,118,88,112,3000
"""


class TestLoadCandles:
    """Tests for load_candles."""

    def test_csv_epoch_ms(self, tmp_path):
        """Epoch-millisecond times are kept as-is."""
        path = tmp_path / "aapl.csv"
        path.write_text(CSV_ROWS)

        candles = load_candles(path)

        assert len(candles) == 3
        assert candles[0].time == 1705329000000
        assert candles[2].low == 88

    def test_csv_iso_times(self, tmp_path):
        """ISO datetimes are converted to epoch milliseconds (UTC)."""
        path = tmp_path / "msft.csv"
        path.write_text(
            "Time,Open,High,Low,Close,Volume\n"
            "2024-01-15T14:30:00Z,100,110,95,105,1000\n"
            "2024-01-15T15:30:00Z,105,120,100,115,2000\n"
        )

        candles = load_candles(path)

        assert [c.time for c in candles] == [1705329000000, 1705332600000]

    def test_json_list(self, tmp_path):
        """A JSON list of candle objects loads."""
        path = tmp_path / "tsla.json"
        path.write_text(
            json.dumps([{"time": 1, "open": 1, "high": 2, "low": 0.5, "close": 1.5, "volume": 10}])
        )
        assert load_candles(path)[0].close == 1.5

    def test_json_candles_key(self, tmp_path):
        """A JSON object with a "candles" list loads."""
        path = tmp_path / "nvda.json"
        path.write_text(
            json.dumps({"candles": [{"time": 1, "open": 1, "high": 2, "low": 0.5, "close": 1.5, "volume": 10}]})
        )
        assert len(load_candles(path)) == 1

    def test_empty_json_list(self, tmp_path):
        """An empty JSON list gives no candles, like a header-only CSV."""
        json_path = tmp_path / "empty.json"
        json_path.write_text("[]")
        csv_path = tmp_path / "empty.csv"
        csv_path.write_text("time,open,high,low,close,volume\n")

        assert load_candles(json_path) == []
        assert load_candles(csv_path) == []

    def test_missing_file(self, tmp_path):
        """A missing file raises CandleLoadError."""
        with pytest.raises(CandleLoadError, match="not found"):
            load_candles(tmp_path / "nope.csv")

    def test_unsupported_suffix(self, tmp_path):
        """Only CSV and JSON are read."""
        path = tmp_path / "data.txt"
        path.write_text(CSV_ROWS)
        with pytest.raises(CandleLoadError, match="unsupported"):
            load_candles(path)

    def test_malformed_json(self, tmp_path):
        """Unparseable JSON raises CandleLoadError."""
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        with pytest.raises(CandleLoadError):
            load_candles(path)


class TestFrameToCandles:
    """Tests for frame_to_candles."""

    def test_sorts_and_deduplicates(self):
        """Rows are sorted by time and the first duplicate is kept."""
        df = pd.DataFrame(
            {
                "time": [3, 1, 2, 1],
                "open": [3, 1, 2, 9],
                "high": [4, 2, 3, 10],
                "low": [2, 0.5, 1, 8],
                "close": [3.5, 1.5, 2.5, 9.5],
                "volume": [1, 1, 1, 1],
            }
        )
        candles = frame_to_candles(df)

        assert [c.time for c in candles] == [1, 2, 3]
        assert candles[0].open == 1

    def test_missing_columns(self):
        """Missing OHLCV columns are reported."""
        df = pd.DataFrame({"time": [1], "close": [1.0]})
        with pytest.raises(CandleLoadError, match="missing columns"):
            frame_to_candles(df)

    def test_invalid_row(self):
        """A row whose high is below its body is rejected."""
        df = pd.DataFrame(
            {"time": [1], "open": [10], "high": [9], "low": [8], "close": [10], "volume": [1]}
        )
        with pytest.raises(CandleLoadError, match="row 1"):
            frame_to_candles(df)

    def test_missing_volume_is_zero(self):
        """Blank volume becomes zero."""
        df = pd.DataFrame(
            {"time": [1], "open": [1.0], "high": [2.0], "low": [0.5], "close": [1.5], "volume": [float("nan")]}
        )
        assert frame_to_candles(df)[0].volume == 0

    def test_empty_frame(self):
        """An empty frame with the right columns gives no candles."""
        df = pd.DataFrame(columns=["time", "open", "high", "low", "close", "volume"])
        assert frame_to_candles(df) == []
