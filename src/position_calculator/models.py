"""Position Calculator Data Models.

Immutable dataclasses for calculator inputs, sizing results, derived
trade metrics, validation errors, and risk scenarios. Results are built
once per calculation and replaced wholesale, never patched field by field.
"""

from dataclasses import dataclass, field
from typing import Optional

from src.position_calculator.config import (
    DEFAULT_SIZING_CONFIG,
    InputField,
    SizingConfig,
    SizingStatus,
)
from src.position_calculator.normalize import as_amount, normalize_number


@dataclass(frozen=True)
class CalculationInput:
    """One snapshot of the calculator form, already normalized to numbers.

    A ``target_price`` of 0 means "not set". A ``max_account_pct`` of 100
    (or more) means no cap on position size.
    """
    account_size: float = 0.0
    risk_pct: float = DEFAULT_SIZING_CONFIG.default_risk_pct
    max_account_pct: float = DEFAULT_SIZING_CONFIG.default_max_account_pct
    entry_price: float = 0.0
    stop_price: float = 0.0
    target_price: float = 0.0

    @classmethod
    def from_text(
        cls,
        account_size: Optional[str] = None,
        risk_pct: Optional[str] = None,
        max_account_pct: Optional[str] = None,
        entry_price: Optional[str] = None,
        stop_price: Optional[str] = None,
        target_price: Optional[str] = None,
        config: Optional[SizingConfig] = None,
    ) -> "CalculationInput":
        """Build inputs from raw field text ("25k", "1,234.56", "").

        Unset risk and cap fields fall back to the defaults of ``config``;
        every other unparseable field counts as zero.
        """
        config = config or DEFAULT_SIZING_CONFIG
        risk = normalize_number(risk_pct)
        cap = normalize_number(max_account_pct)
        return cls(
            account_size=as_amount(normalize_number(account_size)),
            risk_pct=risk if risk is not None else config.default_risk_pct,
            max_account_pct=cap if cap is not None else config.default_max_account_pct,
            entry_price=as_amount(normalize_number(entry_price)),
            stop_price=as_amount(normalize_number(stop_price)),
            target_price=as_amount(normalize_number(target_price)),
        )

    @property
    def risk_per_share(self) -> float:
        """Price distance from entry down to the stop."""
        return self.entry_price - self.stop_price

    @property
    def dollar_risk(self) -> float:
        """Risk budget in dollars for this trade."""
        return self.account_size * self.risk_pct / 100.0

    @property
    def has_target(self) -> bool:
        return self.target_price > 0

    @property
    def has_position_cap(self) -> bool:
        return self.max_account_pct < 100.0

    @property
    def has_data(self) -> bool:
        """True once any price or account field holds a non-zero value."""
        return (
            self.account_size > 0
            or self.entry_price > 0
            or self.stop_price > 0
            or self.target_price > 0
        )


@dataclass(frozen=True)
class FieldError:
    """A user-correctable validation error tied to one input field."""
    field: InputField
    message: str


@dataclass(frozen=True)
class TrimPlan:
    """Informational scale-out plan: sell a fixed share of the position at 5R."""
    trim_pct: float
    trim_price: float
    shares_to_trim: int
    remaining_shares: int
    profit_per_share: float
    trim_profit: float
    remaining_profit_potential: float


@dataclass(frozen=True)
class DerivedMetrics:
    """Metrics derived from entry, stop, shares, account and target.

    Every field is None ("not applicable") when its preconditions are not
    met; NaN and infinity never appear here.
    """
    risk_per_share: Optional[float] = None
    position_size: Optional[float] = None
    total_risk: Optional[float] = None
    percent_of_account: Optional[float] = None
    stop_distance_pct: Optional[float] = None
    five_r_target: Optional[float] = None
    r_multiple: Optional[float] = None
    profit_per_share: Optional[float] = None
    total_profit: Optional[float] = None
    roi_pct: Optional[float] = None
    risk_reward_ratio: Optional[float] = None
    trim_plan: Optional[TrimPlan] = None

    @property
    def has_profit_metrics(self) -> bool:
        """True when a target price produced profit figures."""
        return self.total_profit is not None


@dataclass(frozen=True)
class SizingResult:
    """Output of risk-based position sizing.

    ``shares`` and ``position_size`` are the final figures: when the max
    account cap bites they equal ``limited_shares`` / ``limited_position_size``,
    otherwise the unconstrained ``raw_*`` values.
    """
    shares: int = 0
    risk_per_share: float = 0.0
    dollar_risk: float = 0.0
    position_size: float = 0.0
    percent_of_account: Optional[float] = None
    is_limited_by_max_account: bool = False
    limited_shares: Optional[int] = None
    limited_position_size: Optional[float] = None
    raw_shares: int = 0
    raw_position_size: float = 0.0
    max_position_value: Optional[float] = None
    metrics: DerivedMetrics = field(default_factory=DerivedMetrics)

    @property
    def total_risk(self) -> float:
        """Dollars actually at risk with the final share count."""
        return self.shares * self.risk_per_share

    @property
    def r_multiple(self) -> Optional[float]:
        return self.metrics.r_multiple

    @property
    def five_r_target(self) -> Optional[float]:
        return self.metrics.five_r_target


@dataclass(frozen=True)
class SizingOutcome:
    """Result-or-errors value returned by the sizing engine."""
    status: SizingStatus
    inputs: CalculationInput
    result: Optional[SizingResult] = None
    errors: tuple[FieldError, ...] = ()

    @property
    def is_ok(self) -> bool:
        return self.status == SizingStatus.OK

    @property
    def is_empty(self) -> bool:
        return self.status == SizingStatus.EMPTY

    def errors_for(self, input_field: InputField) -> list[str]:
        """Messages attached to a single input field."""
        return [e.message for e in self.errors if e.field == input_field]


@dataclass(frozen=True)
class RiskScenario:
    """Sizing of the same trade at one preset risk level."""
    risk_pct: float
    shares: int
    position_size: float
    dollar_risk: float
    percent_of_account: Optional[float] = None
    is_limited_by_max_account: bool = False
