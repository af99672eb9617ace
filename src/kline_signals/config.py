"""Configuration management for kline-signals."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="KLINE_",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging
    log_level: str = Field(default="WARNING")
    log_format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


class IndicatorConfig(BaseSettings):
    """Indicator parameters. Defaults are the contractual values."""

    model_config = SettingsConfigDict(env_prefix="INDICATOR_", extra="ignore")

    # MACD
    macd_fast: int = 12
    macd_slow: int = 26
    macd_signal: int = 9

    # CD cascade
    cd_min_bars: int = 30
    cd_easing_multiplier: float = 1.01
    cd_buy_guard_bars: int = 24
    cd_sell_guard_bars: int = 23

    # Buy/sell pressure
    pressure_min_bars: int = 10
    pressure_smoothing_period: int = 10
    pressure_average_period: int = 20
    pressure_change_threshold: float = 10.0  # percent
    pressure_volume_multiplier: float = 1.2
    pressure_strength_multiplier: float = 1.5

    # Ladder
    ladder_min_bars: int = 60
    ladder_blue_period: int = 20
    ladder_yellow_period: int = 60
    ladder_atr_period: int = 14
    ladder_blue_multiplier: float = 2.0
    ladder_yellow_multiplier: float = 3.0

    # NX crossover
    nx_min_bars: int = 20
    nx_fast: int = 5
    nx_slow: int = 10
    nx_volume_period: int = 10
    nx_volume_multiplier: float = 1.5


class ScreenerConfig(BaseSettings):
    """Screener window and default conditions."""

    model_config = SettingsConfigDict(env_prefix="SCREENER_", extra="ignore")

    pressure_window_bars: int = Field(
        default=5,
        description="A strong_up pressure bar must be within this many latest bars",
    )
    cd_window_bars: int = Field(
        default=10,
        description="CD events count when within this many latest bars",
    )
    nx_window_bars: int = Field(default=10)
    default_interval: str = Field(default="1d")
    default_conditions: list[str] = Field(default_factory=lambda: ["bsp_strong_up"])


@lru_cache
def get_config() -> Config:
    """Get cached configuration instance."""
    return Config()


@lru_cache
def get_indicator_config() -> IndicatorConfig:
    """Get cached indicator configuration."""
    return IndicatorConfig()


@lru_cache
def get_screener_config() -> ScreenerConfig:
    """Get cached screener configuration."""
    return ScreenerConfig()
