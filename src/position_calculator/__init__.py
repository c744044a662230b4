"""Position Calculator Module.

Risk-based position sizing for long equity trades, with an optional
max-position cap, derived trade metrics, and debounced recomputation.

Example:
    from src.position_calculator import CalculationInput, PositionSizingEngine

    engine = PositionSizingEngine()
    outcome = engine.calculate(CalculationInput.from_text(
        account_size="10k",
        risk_pct="1",
        entry_price="100",
        stop_price="95",
    ))
    print(f"Buy {outcome.result.shares} shares, risking ${outcome.result.total_risk:.0f}")
"""

from src.position_calculator.config import (
    SizingStatus,
    InputField,
    SizingConfig,
    DispatchConfig,
    DEFAULT_RISK_LEVELS,
    DEFAULT_SIZING_CONFIG,
    DEFAULT_DISPATCH_CONFIG,
)

from src.position_calculator.models import (
    CalculationInput,
    FieldError,
    TrimPlan,
    DerivedMetrics,
    SizingResult,
    SizingOutcome,
    RiskScenario,
)

from src.position_calculator.normalize import normalize_number, normalize_ticker, as_amount
from src.position_calculator.metrics import derive_metrics, build_trim_plan, safe_divide, safe_percent
from src.position_calculator.sizing import PositionSizingEngine, has_meaningful_input
from src.position_calculator.dispatch import RecalcDispatcher

__all__ = [
    # Config
    "SizingStatus",
    "InputField",
    "SizingConfig",
    "DispatchConfig",
    "DEFAULT_RISK_LEVELS",
    "DEFAULT_SIZING_CONFIG",
    "DEFAULT_DISPATCH_CONFIG",
    # Models
    "CalculationInput",
    "FieldError",
    "TrimPlan",
    "DerivedMetrics",
    "SizingResult",
    "SizingOutcome",
    "RiskScenario",
    # Functions
    "normalize_number",
    "normalize_ticker",
    "as_amount",
    "derive_metrics",
    "build_trim_plan",
    "safe_divide",
    "safe_percent",
    "has_meaningful_input",
    # Components
    "PositionSizingEngine",
    "RecalcDispatcher",
]
