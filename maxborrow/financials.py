"""Serviceability constraint: the largest loan income can repay in each band."""
from __future__ import annotations

import logging
import math
from typing import Optional, Tuple

from .bands import LvrBand, get_lvr_band_from_lvr, is_lvr_within_band
from .calculators import principal_from_payment, safe_number
from .config import DEFAULT_POLICY, AssessmentPolicy
from .deposit import cost_breakdown, solve_property_value
from .models import ConstraintResult, FinancialsInput, LoanPreferences, LoanProductDetails
from .serviceability import evaluate_serviceability
from .stamp_duty import purchase_costs, resolve_state

log = logging.getLogger(__name__)


def property_value_for_loan(
    loan_amount,
    savings,
    state: str,
    is_first_home_buyer: bool = False,
    is_investment: bool = False,
    policy: Optional[AssessmentPolicy] = None,
    logger: Optional[logging.Logger] = None,
) -> Tuple[float, int, bool]:
    """Property value a loan plus savings can buy once duty and costs are paid.

    Returns ``(property_value, iterations, converged)``. The value lies
    between loan plus savings less the costs at that price, and loan plus
    savings.
    """

    policy = policy or DEFAULT_POLICY
    loan_amount = max(safe_number(loan_amount), 0.0)
    savings = max(safe_number(savings), 0.0)
    ceiling = loan_amount + savings
    if ceiling <= 0:
        return 0.0, 0, True
    state = resolve_state(state, logger)

    def shortfall(pv):
        duty, upfront = purchase_costs(pv, state, is_first_home_buyer, is_investment)
        available = savings - duty - upfront.total
        return available - (pv - loan_amount)

    duty, upfront = purchase_costs(ceiling, state, is_first_home_buyer, is_investment)
    floor_value = max(ceiling - duty - upfront.total, 0.0)

    return solve_property_value(
        floor_value,
        ceiling,
        shortfall,
        policy.deposit_tolerance,
        policy.max_iterations,
    )


def _loan_from_surplus(annual_surplus, interest_rate, preferences: LoanPreferences, policy: AssessmentPolicy) -> float:
    monthly = safe_number(annual_surplus) / 12
    if monthly <= 0:
        return 0.0
    rate = safe_number(interest_rate) + policy.assessment_buffer_pct
    return float(max(0, math.floor(principal_from_payment(monthly, rate, preferences.pi_term))))


def _search_investment_loan(surplus_at, seed: float, policy: AssessmentPolicy, logger) -> Tuple[float, int, bool, float]:
    # Surplus falls as the loan grows; deductible interest only softens the slope
    lower, upper = 0.0, max(seed * 2, 1.0)
    for _ in range(policy.max_iterations):
        if surplus_at(upper) <= 0:
            break
        lower, upper = upper, upper * 2
    loan = (lower + upper) / 2 if lower else seed
    surplus = surplus_at(loan)
    for iteration in range(1, policy.max_iterations + 1):
        if abs(surplus) < policy.surplus_tolerance:
            return loan, iteration, True, surplus
        if surplus > 0:
            lower = loan
            loan = (lower + upper) / 2
        else:
            upper = loan
            loan = (lower + loan) / 2
        logger.debug("Investment search %d: loan %.0f surplus %.2f", iteration, loan, surplus)
        surplus = surplus_at(loan)
    return loan, policy.max_iterations, abs(surplus) < policy.surplus_tolerance, surplus


def calculate_max_borrowing_by_financials(
    financials: FinancialsInput,
    product: LoanProductDetails,
    band,
    savings,
    state: str,
    postcode: str = "",
    preferences: Optional[LoanPreferences] = None,
    is_investment: bool = False,
    is_first_home_buyer: bool = False,
    policy: Optional[AssessmentPolicy] = None,
    logger: Optional[logging.Logger] = None,
) -> ConstraintResult:
    """Largest loan that keeps the household surplus at zero for ``band``.

    Owner-occupied loans invert the annuity formula on the surplus left with
    no new loan. Investment loans search instead, since the interest deduction
    lowers tax as the loan grows. The implied property value comes from the
    shared property value search.
    """

    policy = policy or DEFAULT_POLICY
    preferences = preferences or LoanPreferences()
    logger = logger or log
    band = LvrBand(band)
    savings = max(safe_number(savings), 0.0)
    rate = product.interest_rate

    def surplus_at(loan):
        return evaluate_serviceability(
            financials,
            loan,
            rate,
            preferences,
            is_investment,
            postcode,
            policy=policy,
            logger=logger,
        ).annual_surplus

    base_surplus = surplus_at(0.0)
    seed = _loan_from_surplus(base_surplus, rate, preferences, policy)

    if seed <= 0:
        logger.debug("Financials %s: no surplus before the new loan (%.2f)", band.value, base_surplus)
        loan_amount, iterations, converged, surplus = 0.0, 0, True, base_surplus
    elif is_investment:
        loan, iterations, converged, surplus = _search_investment_loan(surplus_at, seed, policy, logger)
        loan_amount = float(max(0, math.floor(loan)))
    else:
        loan_amount, iterations, converged = seed, 1, True
        surplus = surplus_at(loan_amount)

    pv, pv_iterations, pv_converged = property_value_for_loan(
        loan_amount,
        savings,
        state,
        is_first_home_buyer,
        is_investment,
        policy=policy,
        logger=logger,
    )
    duty, upfront = purchase_costs(pv, resolve_state(state, logger), is_first_home_buyer, is_investment)
    lvr = safe_number(loan_amount / pv) if pv > 0 else 0.0

    logger.debug(
        "Financials %s: loan %.0f property %.0f lvr %.4f rate %.2f%% surplus %.2f",
        band.value,
        loan_amount,
        pv,
        lvr,
        rate,
        surplus,
    )

    return ConstraintResult(
        band=band,
        loan_amount=loan_amount,
        property_value=pv,
        calculated_lvr=lvr,
        calculated_band=get_lvr_band_from_lvr(lvr),
        lvr_band_match=is_lvr_within_band(lvr, band),
        iterations=iterations,
        property_iterations=pv_iterations,
        converged=converged and pv_converged,
        costs=cost_breakdown(pv, savings, duty, upfront, loan_amount),
        interest_rate=rate,
        product_name=product.name,
        surplus=surplus,
    )
