"""Local candle file loading."""

from .loader import CandleLoadError, frame_to_candles, load_candles

__all__ = ["CandleLoadError", "frame_to_candles", "load_candles"]
