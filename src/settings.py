"""Centralized settings for the position sizing engine.

Uses pydantic-settings to load from environment variables (prefixed
TRADESIZER_) or a .env file, with defaults matching the component
configs in src.position_calculator.config and src.alert_parser.config.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings

from src.alert_parser.config import AlertParserConfig
from src.logging_config.config import LogFormat, LoggingConfig, LogLevel
from src.position_calculator.config import DispatchConfig, SizingConfig


class Settings(BaseSettings):
    """Engine settings loaded from environment variables."""

    # --- Sizing ---
    default_risk_pct: float = 1.0
    default_max_account_pct: float = 100.0

    # --- Recalculation coalescing ---
    debounce_ms: float = 250.0

    # --- Alert parser ---
    alert_max_risk_pct: float = 100.0
    alert_plausible_risk_pct: float = 10.0
    alert_enforce_plausible_risk: bool = True

    # --- Journal persistence ---
    journal_database_url: str = "sqlite:///tradesizer.db"

    # --- Logging ---
    log_level: LogLevel = LogLevel.INFO
    log_format: LogFormat = LogFormat.CONSOLE

    model_config = {
        "env_prefix": "TRADESIZER_",
        "env_file": ".env",
        "extra": "ignore",
    }

    def sizing_config(self) -> SizingConfig:
        return SizingConfig(
            default_risk_pct=self.default_risk_pct,
            default_max_account_pct=self.default_max_account_pct,
        )

    def dispatch_config(self) -> DispatchConfig:
        return DispatchConfig(debounce_ms=self.debounce_ms)

    def alert_parser_config(self) -> AlertParserConfig:
        return AlertParserConfig(
            max_risk_pct=self.alert_max_risk_pct,
            plausible_risk_pct=self.alert_plausible_risk_pct,
            enforce_plausible_risk=self.alert_enforce_plausible_risk,
        )

    def logging_config(self) -> LoggingConfig:
        return LoggingConfig(level=self.log_level, format=self.log_format)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings singleton."""
    return Settings()
