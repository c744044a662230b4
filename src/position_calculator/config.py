"""Position Calculator Configuration.

Enums and configuration dataclasses for risk-based position sizing,
derived trade metrics, and recomputation coalescing.
"""

from dataclasses import dataclass, field
from enum import Enum


class SizingStatus(str, Enum):
    """Outcome of a sizing request."""
    EMPTY = "empty"        # No meaningful input yet (idle state)
    INVALID = "invalid"    # One or more field-tagged validation errors
    OK = "ok"


class InputField(str, Enum):
    """Calculator input fields that validation errors can point at."""
    ACCOUNT_SIZE = "account_size"
    RISK_PCT = "risk_pct"
    MAX_ACCOUNT_PCT = "max_account_pct"
    ENTRY_PRICE = "entry_price"
    STOP_PRICE = "stop_price"
    TARGET_PRICE = "target_price"


# Preset risk levels offered by the calculator (percent of account)
DEFAULT_RISK_LEVELS: tuple[float, ...] = (0.1, 0.25, 0.5, 0.75, 1.0)


@dataclass
class SizingConfig:
    """Configuration for position sizing and derived metrics."""
    default_risk_pct: float = 1.0          # Default 1% risk per trade
    default_max_account_pct: float = 100.0  # 100% means no position cap
    cap_epsilon: float = 1e-9               # Tolerance on the position cap
    five_r_multiple: float = 5.0            # Profit checkpoint in R units
    trim_pct: float = 25.0                  # Share of position sold at 5R
    risk_levels: tuple[float, ...] = field(default_factory=lambda: DEFAULT_RISK_LEVELS)


@dataclass
class DispatchConfig:
    """Configuration for coalescing rapid recomputation requests."""
    debounce_ms: float = 250.0


DEFAULT_SIZING_CONFIG = SizingConfig()
DEFAULT_DISPATCH_CONFIG = DispatchConfig()
