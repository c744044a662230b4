"""Structured Logging & Calculation Tracing.

Provides structured JSON logging, calculation/snapshot ID binding,
and performance timing for the position sizing engine.
"""

from src.logging_config.config import LogFormat, LoggingConfig, LogLevel
from src.logging_config.context import CalculationContext, generate_calc_id
from src.logging_config.performance import PerformanceTimer, log_performance
from src.logging_config.setup import configure_logging, get_logger

__all__ = [
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "CalculationContext",
    "PerformanceTimer",
    "configure_logging",
    "generate_calc_id",
    "get_logger",
    "log_performance",
]
