"""Derived Trade Metrics.

Pure formulas shared by live sizing and by snapshot recalculation:
stop distance, 5R target, R-multiple, profit, ROI, risk:reward and the
fixed 25% trim plan. Both callers go through ``derive_metrics`` so a
stored record and a live calculation can never disagree.
"""

import logging
import math
from typing import Optional

from src.position_calculator.config import SizingConfig, DEFAULT_SIZING_CONFIG
from src.position_calculator.models import DerivedMetrics, TrimPlan

logger = logging.getLogger(__name__)


def _is_positive(value: Optional[float]) -> bool:
    return value is not None and math.isfinite(value) and value > 0


def safe_divide(numerator: Optional[float], denominator: Optional[float]) -> Optional[float]:
    """Divide, or return None when either side is missing, zero or non-finite."""
    if numerator is None or denominator is None:
        return None
    if not math.isfinite(numerator) or not math.isfinite(denominator):
        return None
    if denominator == 0:
        return None
    result = numerator / denominator
    return result if math.isfinite(result) else None


def safe_percent(numerator: Optional[float], denominator: Optional[float]) -> Optional[float]:
    """``numerator / denominator * 100`` with the same guards as ``safe_divide``."""
    ratio = safe_divide(numerator, denominator)
    return ratio * 100.0 if ratio is not None else None


def build_trim_plan(
    entry_price: float,
    five_r_target: float,
    shares: int,
    trim_pct: float = DEFAULT_SIZING_CONFIG.trim_pct,
) -> TrimPlan:
    """Scale-out plan selling ``trim_pct`` of the shares at the 5R price.

    Shares to trim are floored; the remainder is held.
    """
    shares_to_trim = math.floor(shares * trim_pct / 100.0)
    remaining = shares - shares_to_trim
    profit_per_share = five_r_target - entry_price
    return TrimPlan(
        trim_pct=trim_pct,
        trim_price=five_r_target,
        shares_to_trim=shares_to_trim,
        remaining_shares=remaining,
        profit_per_share=profit_per_share,
        trim_profit=shares_to_trim * profit_per_share,
        remaining_profit_potential=remaining * profit_per_share,
    )


def derive_metrics(
    entry_price: Optional[float],
    stop_price: Optional[float],
    shares: Optional[int],
    account_size: Optional[float] = None,
    target_price: Optional[float] = None,
    config: Optional[SizingConfig] = None,
) -> DerivedMetrics:
    """Compute the full derived-metrics record.

    Args:
        entry_price: Entry price.
        stop_price: Stop-loss price (must be below entry for risk metrics).
        shares: Share count.
        account_size: Account equity, used for percent of account.
        target_price: Profit target; None or 0 means not set.
        config: Sizing config for the 5R multiple and trim percentage.

    Returns:
        DerivedMetrics with None for every field whose inputs are missing.
    """
    config = config or DEFAULT_SIZING_CONFIG

    has_entry = _is_positive(entry_price)
    has_shares = shares is not None and shares > 0
    has_target = _is_positive(target_price)

    risk_per_share = None
    if has_entry and _is_positive(stop_price) and entry_price > stop_price:
        risk_per_share = entry_price - stop_price

    position_size = entry_price * shares if has_entry and has_shares else None

    total_risk = None
    if risk_per_share is not None and has_shares:
        total_risk = shares * risk_per_share

    percent_of_account = safe_percent(position_size, account_size)

    stop_distance_pct = None
    five_r_target = None
    if risk_per_share is not None:
        stop_distance_pct = safe_percent(risk_per_share, entry_price)
        five_r_target = entry_price + config.five_r_multiple * risk_per_share

    r_multiple = None
    if has_target and risk_per_share is not None and target_price > entry_price:
        r_multiple = safe_divide(target_price - entry_price, risk_per_share)

    profit_per_share = target_price - entry_price if has_target and has_entry else None
    total_profit = profit_per_share * shares if profit_per_share is not None and has_shares else None
    roi_pct = safe_percent(total_profit, position_size)
    risk_reward_ratio = safe_divide(total_profit, total_risk)

    trim_plan = None
    if five_r_target is not None and has_shares:
        trim_plan = build_trim_plan(entry_price, five_r_target, shares, config.trim_pct)

    return DerivedMetrics(
        risk_per_share=risk_per_share,
        position_size=position_size,
        total_risk=total_risk,
        percent_of_account=percent_of_account,
        stop_distance_pct=stop_distance_pct,
        five_r_target=five_r_target,
        r_multiple=r_multiple,
        profit_per_share=profit_per_share,
        total_profit=total_profit,
        roi_pct=roi_pct,
        risk_reward_ratio=risk_reward_ratio,
        trim_plan=trim_plan,
    )
