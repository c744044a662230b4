"""Position Sizing Engine.

Calculates long-only position sizes from a fixed-percent risk budget,
with an optional cap on position size as a percent of the account.
Share counts are always floored so a trade never risks more than the
stated budget.
"""

import dataclasses
import logging
import math
from typing import Optional, Sequence

from src.logging_config.performance import log_performance
from src.position_calculator.config import (
    DEFAULT_SIZING_CONFIG,
    InputField,
    SizingConfig,
    SizingStatus,
)
from src.position_calculator.metrics import derive_metrics, safe_percent
from src.position_calculator.models import (
    CalculationInput,
    FieldError,
    RiskScenario,
    SizingOutcome,
    SizingResult,
)

logger = logging.getLogger(__name__)


def _not_positive(value: float) -> bool:
    # Written this way so NaN counts as not positive
    return not value > 0


class PositionSizingEngine:
    """Calculates position sizes for individual long trades.

    Example:
        engine = PositionSizingEngine()
        outcome = engine.calculate(CalculationInput(
            account_size=10_000, risk_pct=1.0,
            entry_price=100.0, stop_price=95.0, target_price=115.0,
        ))
        if outcome.is_ok:
            print(f"Buy {outcome.result.shares} shares")
    """

    def __init__(self, config: Optional[SizingConfig] = None) -> None:
        self.config = config or DEFAULT_SIZING_CONFIG

    def validate(self, inputs: CalculationInput) -> list[FieldError]:
        """Field-tagged validation errors for a calculator snapshot.

        Returns an empty list for the idle state (no meaningful input),
        which is not an error.
        """
        if not inputs.has_data:
            return []

        errors: list[FieldError] = []

        if _not_positive(inputs.account_size):
            errors.append(FieldError(InputField.ACCOUNT_SIZE, "Account size must be a positive number"))

        if _not_positive(inputs.entry_price):
            errors.append(FieldError(InputField.ENTRY_PRICE, "Entry price must be a positive number"))

        if _not_positive(inputs.stop_price):
            errors.append(FieldError(InputField.STOP_PRICE, "Stop loss must be a positive number"))

        if _not_positive(inputs.risk_pct) or inputs.risk_pct > 100:
            errors.append(FieldError(InputField.RISK_PCT, "Risk percentage must be between 0 and 100"))

        if _not_positive(inputs.max_account_pct):
            errors.append(FieldError(InputField.MAX_ACCOUNT_PCT, "Max account percentage must be a positive number"))

        if inputs.entry_price > 0 and inputs.stop_price > 0 and inputs.stop_price >= inputs.entry_price:
            errors.append(FieldError(InputField.STOP_PRICE, "Stop loss must be below entry price"))

        if inputs.entry_price > 0 and inputs.target_price > 0 and inputs.target_price <= inputs.entry_price:
            errors.append(FieldError(InputField.TARGET_PRICE, "Target price should be above entry price"))

        return errors

    @log_performance(threshold_ms=50.0)
    def calculate(self, inputs: CalculationInput) -> SizingOutcome:
        """Size a position.

        Args:
            inputs: Normalized calculator inputs.

        Returns:
            SizingOutcome with status EMPTY (idle), INVALID (with errors),
            or OK (with a complete SizingResult).
        """
        if not inputs.has_data:
            return SizingOutcome(status=SizingStatus.EMPTY, inputs=inputs)

        errors = self.validate(inputs)
        if errors:
            logger.debug(
                "Sizing rejected: %s",
                ", ".join(f"{e.field.value}: {e.message}" for e in errors),
            )
            return SizingOutcome(status=SizingStatus.INVALID, inputs=inputs, errors=tuple(errors))

        result = self._size(inputs)
        logger.debug(
            "Sized %d shares at %.4f (risk/share=%.4f, limited=%s)",
            result.shares,
            inputs.entry_price,
            result.risk_per_share,
            result.is_limited_by_max_account,
        )
        return SizingOutcome(status=SizingStatus.OK, inputs=inputs, result=result)

    def _size(self, inputs: CalculationInput) -> SizingResult:
        """Run the sizing algorithm on inputs that passed validation."""
        risk_per_share = inputs.risk_per_share
        dollar_risk = inputs.dollar_risk

        raw_shares = max(0, math.floor(dollar_risk / risk_per_share))
        raw_position_size = raw_shares * inputs.entry_price

        shares = raw_shares
        position_size = raw_position_size
        is_limited = False
        max_position_value = None

        # Apply max position constraint
        if inputs.has_position_cap:
            max_position_value = inputs.account_size * inputs.max_account_pct / 100.0
            if raw_position_size > max_position_value + self.config.cap_epsilon:
                shares = max(0, math.floor(max_position_value / inputs.entry_price))
                position_size = shares * inputs.entry_price
                is_limited = True

        metrics = derive_metrics(
            entry_price=inputs.entry_price,
            stop_price=inputs.stop_price,
            shares=shares,
            account_size=inputs.account_size,
            target_price=inputs.target_price if inputs.has_target else None,
            config=self.config,
        )

        return SizingResult(
            shares=shares,
            risk_per_share=risk_per_share,
            dollar_risk=dollar_risk,
            position_size=position_size,
            percent_of_account=safe_percent(position_size, inputs.account_size),
            is_limited_by_max_account=is_limited,
            limited_shares=shares,
            limited_position_size=position_size,
            raw_shares=raw_shares,
            raw_position_size=raw_position_size,
            max_position_value=max_position_value,
            metrics=metrics,
        )

    def risk_scenarios(
        self,
        inputs: CalculationInput,
        risk_levels: Optional[Sequence[float]] = None,
    ) -> list[RiskScenario]:
        """Size the same trade at each preset risk level.

        Args:
            inputs: Calculator inputs; their own risk_pct is ignored.
            risk_levels: Risk percentages to evaluate. Defaults to
                config.risk_levels.

        Returns:
            One RiskScenario per level, or an empty list when the inputs
            cannot be sized.
        """
        levels = risk_levels if risk_levels is not None else self.config.risk_levels
        scenarios: list[RiskScenario] = []

        for level in levels:
            outcome = self.calculate(dataclasses.replace(inputs, risk_pct=level))
            if not outcome.is_ok:
                return []
            result = outcome.result
            scenarios.append(RiskScenario(
                risk_pct=level,
                shares=result.shares,
                position_size=result.position_size,
                dollar_risk=result.dollar_risk,
                percent_of_account=result.percent_of_account,
                is_limited_by_max_account=result.is_limited_by_max_account,
            ))

        return scenarios

    def add_profit_to_account(self, outcome: SizingOutcome) -> float:
        """Account size after booking the target profit of a sized trade.

        Returns the unchanged account size when there is no target profit.
        """
        if not outcome.is_ok or outcome.result.metrics.total_profit is None:
            return outcome.inputs.account_size
        return outcome.inputs.account_size + outcome.result.metrics.total_profit


def has_meaningful_input(
    inputs: CalculationInput,
    config: Optional[SizingConfig] = None,
) -> bool:
    """True when the form holds anything worth warning about before discarding."""
    config = config or DEFAULT_SIZING_CONFIG
    return (
        inputs.has_data
        or inputs.risk_pct != config.default_risk_pct
        or inputs.has_position_cap
    )
