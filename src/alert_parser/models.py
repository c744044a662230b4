"""Alert Parser Data Models."""

from dataclasses import dataclass
from typing import Optional

from src.alert_parser.config import AlertField, ParseErrorKind
from src.position_calculator.config import DEFAULT_SIZING_CONFIG
from src.position_calculator.models import CalculationInput


@dataclass(frozen=True)
class AlertParseResult:
    """Trade setup extracted from an alert. Always a long setup: stop < entry."""
    entry: float
    stop: float
    risk_pct: Optional[float] = None
    ticker: Optional[str] = None
    pattern_name: str = ""

    def to_calculation_input(
        self,
        account_size: float,
        max_account_pct: float = DEFAULT_SIZING_CONFIG.default_max_account_pct,
        default_risk_pct: float = DEFAULT_SIZING_CONFIG.default_risk_pct,
        target_price: float = 0.0,
    ) -> CalculationInput:
        """Feed the parsed setup into the regular sizing input path."""
        return CalculationInput(
            account_size=account_size,
            risk_pct=self.risk_pct if self.risk_pct is not None else default_risk_pct,
            max_account_pct=max_account_pct,
            entry_price=self.entry,
            stop_price=self.stop,
            target_price=target_price,
        )


@dataclass(frozen=True)
class AlertParseFailure:
    """Structured parse failure with a user-facing message."""
    kind: ParseErrorKind
    field: AlertField
    message: str
    raw_text: str = ""


@dataclass(frozen=True)
class AlertParseOutcome:
    """Either a parsed setup or a failure, never both."""
    result: Optional[AlertParseResult] = None
    failure: Optional[AlertParseFailure] = None

    @property
    def is_ok(self) -> bool:
        return self.result is not None

    @property
    def is_not_found(self) -> bool:
        return self.failure is not None and self.failure.kind == ParseErrorKind.NOT_FOUND

    @property
    def is_invalid(self) -> bool:
        return self.failure is not None and self.failure.kind == ParseErrorKind.INVALID
