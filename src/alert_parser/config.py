"""Alert Parser Configuration.

Enums and configuration for extracting entry/stop/risk values from
free-text trade alerts.
"""

from dataclasses import dataclass
from enum import Enum


class ParseErrorKind(str, Enum):
    """Why an alert could not be turned into a trade setup."""
    NOT_FOUND = "not_found"    # Entry or stop could not be located at all
    INVALID = "invalid"        # A value was found but broke a business rule


class AlertField(str, Enum):
    """Alert fields a parse failure can point at."""
    TEXT = "text"
    ENTRY = "entry"
    STOP = "stop"
    RISK_PCT = "risk_pct"


@dataclass
class AlertParserConfig:
    """Bounds applied to values extracted from an alert."""
    max_risk_pct: float = 100.0           # Hard upper bound on risk %
    plausible_risk_pct: float = 10.0      # Above this, assume a misread decimal
    enforce_plausible_risk: bool = True   # Reject risk % above plausible_risk_pct


DEFAULT_ALERT_PARSER_CONFIG = AlertParserConfig()
