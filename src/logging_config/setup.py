"""Logging Setup.

One-call logging configuration for the CLI and any embedding
application. JSON output for machine consumption, colored console
output for interactive use.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Optional

from src.logging_config.config import DEFAULT_LOGGING_CONFIG, LogFormat, LoggingConfig, LogLevel
from src.logging_config.context import get_context_dict

LEVEL_ENV_VAR = "TRADESIZER_LOG_LEVEL"
FORMAT_ENV_VAR = "TRADESIZER_LOG_FORMAT"

# Record attributes copied into JSON output when a caller passes them via extra=
_EXTRA_FIELDS = ("duration_ms", "extra_data", "ticker", "shares", "error_kind")


class StructuredFormatter(logging.Formatter):
    """JSON structured log formatter.

    One JSON object per line: timestamp, level, logger, message, service,
    plus any bound calculation context.
    """

    def __init__(self, service_name: str = "tradesizer", include_caller: bool = True):
        super().__init__()
        self.service_name = service_name
        self.include_caller = include_caller

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": self.service_name,
        }

        if self.include_caller:
            log_entry["module"] = record.module
            log_entry["function"] = record.funcName
            log_entry["line"] = record.lineno

        ctx = get_context_dict()
        if ctx:
            log_entry.update(ctx)

        if record.exc_info and record.exc_info[0] is not None:
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info),
            }

        for key in _EXTRA_FIELDS:
            if hasattr(record, key):
                log_entry[key] = getattr(record, key)

        return json.dumps(log_entry, default=str)


class ConsoleFormatter(logging.Formatter):
    """Colored, human-readable console formatter."""

    COLORS = {
        "DEBUG": "\033[36m",     # Cyan
        "INFO": "\033[32m",      # Green
        "WARNING": "\033[33m",   # Yellow
        "ERROR": "\033[31m",     # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.RESET)
        timestamp = datetime.now(timezone.utc).strftime("%H:%M:%S.%f")[:-3]

        ctx = get_context_dict()
        ctx_str = ""
        if ctx:
            parts = [f"{k}={v}" for k, v in ctx.items()]
            ctx_str = f" [{', '.join(parts)}]"

        line = (
            f"{color}{timestamp} {record.levelname:8s}{self.RESET} "
            f"{record.name}: {record.getMessage()}{ctx_str}"
        )

        if record.exc_info and record.exc_info[0] is not None:
            line += "\n" + self.formatException(record.exc_info)

        return line


def _apply_env_overrides(config: LoggingConfig) -> LoggingConfig:
    env_level = os.environ.get(LEVEL_ENV_VAR, "").upper()
    if env_level in LogLevel.__members__:
        config = LoggingConfig(
            level=LogLevel(env_level),
            format=config.format,
            include_caller=config.include_caller,
            slow_threshold_ms=config.slow_threshold_ms,
            service_name=config.service_name,
        )

    env_format = os.environ.get(FORMAT_ENV_VAR, "").lower()
    if env_format in [f.value for f in LogFormat]:
        config = LoggingConfig(
            level=config.level,
            format=LogFormat(env_format),
            include_caller=config.include_caller,
            slow_threshold_ms=config.slow_threshold_ms,
            service_name=config.service_name,
        )

    return config


def configure_logging(config: Optional[LoggingConfig] = None) -> LoggingConfig:
    """Configure the root logger.

    Call once at startup. TRADESIZER_LOG_LEVEL and TRADESIZER_LOG_FORMAT
    override the level and format of the given config.

    Args:
        config: Logging configuration. Uses defaults if not provided.

    Returns:
        The effective configuration after environment overrides.
    """
    config = _apply_env_overrides(config or DEFAULT_LOGGING_CONFIG)

    if config.format == LogFormat.JSON:
        formatter = StructuredFormatter(
            service_name=config.service_name,
            include_caller=config.include_caller,
        )
    else:
        formatter = ConsoleFormatter()

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, config.level.value))

    # SQLAlchemy engine echo is too chatty below WARNING
    logging.getLogger("sqlalchemy").setLevel(logging.WARNING)

    return config


def get_logger(name: str) -> logging.Logger:
    """Standard-library logger; output goes through the configured formatter."""
    return logging.getLogger(name)
