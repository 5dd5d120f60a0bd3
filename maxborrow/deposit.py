"""Deposit constraint: how much can savings support in each LVR band."""
from __future__ import annotations

import logging
import math
from typing import Callable, Optional, Tuple

from .bands import LvrBand, get_lvr_band_from_lvr, is_lvr_within_band
from .calculators import safe_number
from .config import DEFAULT_POLICY, AssessmentPolicy
from .errors import InvalidInputError
from .models import ConstraintResult, CostBreakdown
from .stamp_duty import purchase_costs, resolve_state

log = logging.getLogger(__name__)


def solve_property_value(
    lower: float,
    upper: float,
    residual: Callable[[float], float],
    tolerance: float,
    max_iterations: int = 20,
) -> Tuple[float, int, bool]:
    """Bisect for the property value where ``residual`` is within tolerance.

    ``residual(pv)`` is positive when the value should rise and negative when
    it should fall. The search starts at the midpoint of the bounds and stops
    after ``max_iterations`` evaluations, returning the last estimate, the
    number of iterations used and whether it converged.
    """

    value = (lower + upper) / 2
    for iteration in range(1, max_iterations + 1):
        diff = residual(value)
        if abs(diff) < tolerance:
            return value, iteration, True
        if diff > 0:
            lower = value
            value = (upper + value) / 2
        else:
            upper = value
            value = (lower + value) / 2
    return value, max_iterations, False


def cost_breakdown(pv, savings, duty, upfront, loan_amount) -> CostBreakdown:
    total = duty + upfront.total
    deposit_used = max(pv - loan_amount, 0.0)
    return CostBreakdown(
        stamp_duty=duty,
        legal_fees=upfront.legal_fees,
        other_costs=upfront.other_costs,
        total_costs=total,
        deposit_used=deposit_used,
        available_savings=savings - total,
        remaining_savings=max(savings - total - deposit_used, 0.0),
    )


def empty_result(band: LvrBand, savings: float = 0.0) -> ConstraintResult:
    """A zero loan against a zero property value."""
    return ConstraintResult(
        band=band,
        loan_amount=0.0,
        property_value=0.0,
        calculated_lvr=0.0,
        calculated_band=get_lvr_band_from_lvr(0.0),
        lvr_band_match=False,
        iterations=0,
        converged=True,
        costs=CostBreakdown(available_savings=savings, remaining_savings=savings),
    )


def calculate_max_borrowing_by_deposit(
    savings,
    state: str,
    band,
    is_first_home_buyer: bool = False,
    is_investment: bool = False,
    policy: Optional[AssessmentPolicy] = None,
    logger: Optional[logging.Logger] = None,
) -> ConstraintResult:
    """Largest loan savings can support at the top of ``band``.

    Searches property value until the loan left after paying the deposit,
    duty and costs from savings sits just under the band's upper LVR. A
    search that runs out of iterations returns its last estimate with the LVR
    it achieved, and ``lvr_band_match`` tells the caller whether that LVR is
    inside the band.
    """

    policy = policy or DEFAULT_POLICY
    logger = logger or log
    band = LvrBand(band)
    savings = safe_number(savings)
    if savings < 0:
        raise InvalidInputError("Savings cannot be negative")
    if savings == 0:
        return empty_result(band)

    target = band.max_lvr
    state = resolve_state(state, logger)

    def costs_at(pv):
        return purchase_costs(pv, state, is_first_home_buyer, is_investment)

    def lvr_at(pv):
        duty, upfront = costs_at(pv)
        available = savings - duty - upfront.total
        return safe_number((pv - available) / pv) if pv > 0 else 0.0

    upper = savings / (1 - target)
    lower = savings / (1 - (target - 0.10))
    # Savings net of costs at the upper bound understate what is available at
    # the answer, so this floor always brackets it when costs run above 10%
    duty, upfront = costs_at(upper)
    lower = min(lower, max(savings - duty - upfront.total, 0.0) / (1 - target))
    duty, upfront = costs_at(lower)
    if savings - duty - upfront.total <= 0:
        logger.debug("Deposit %s: savings %.0f do not cover purchase costs", band.value, savings)
        return empty_result(band, savings)

    # Aim half a tolerance under the band edge so a converged LVR never crosses it
    half = policy.lvr_tolerance / 2
    pv, iterations, converged = solve_property_value(
        lower,
        upper,
        lambda pv: (target - half) - lvr_at(pv),
        half,
        policy.max_iterations,
    )

    duty, upfront = costs_at(pv)
    available = savings - duty - upfront.total
    loan_amount = float(max(0, math.floor(pv - available))) if pv > 0 else 0.0
    lvr = safe_number(loan_amount / pv) if pv > 0 else 0.0

    logger.debug(
        "Deposit %s: property %.0f loan %.0f lvr %.4f after %d iterations%s",
        band.value,
        pv,
        loan_amount,
        lvr,
        iterations,
        "" if converged else " (not converged)",
    )

    return ConstraintResult(
        band=band,
        loan_amount=loan_amount,
        property_value=pv,
        calculated_lvr=lvr,
        calculated_band=get_lvr_band_from_lvr(lvr),
        lvr_band_match=is_lvr_within_band(lvr, band),
        iterations=iterations,
        converged=converged,
        costs=cost_breakdown(pv, savings, duty, upfront, loan_amount),
    )
