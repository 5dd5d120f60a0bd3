"""Combine the deposit and serviceability limits into one borrowing figure."""
from __future__ import annotations

import functools
import logging
from typing import List, Optional

from .bands import ALL_BANDS, BANDS_DESCENDING, LvrBand
from .calculators import safe_number
from .config import DEFAULT_POLICY, AssessmentPolicy
from .deposit import calculate_max_borrowing_by_deposit
from .errors import InvalidInputError
from .financials import calculate_max_borrowing_by_financials
from .models import BorrowingRequest, ConstraintResult, MaxBorrowResult
from .products import LoanScenario, ProductSelector, determine_loan_scenario, product_for_band
from .scenarios import ScenarioGenerator

log = logging.getLogger(__name__)

FALLBACK_FINANCIAL_BAND = LvrBand.BAND_70_80


def select_financial_result(results: List[ConstraintResult]) -> ConstraintResult:
    """Highest band whose achieved LVR lands inside it, else the 70-80 result."""
    by_band = {r.band: r for r in results}
    for band in BANDS_DESCENDING:
        result = by_band.get(band)
        if result is not None and result.lvr_band_match:
            return result
    return by_band[FALLBACK_FINANCIAL_BAND]


def select_deposit_result(results: List[ConstraintResult], scenario: LoanScenario) -> ConstraintResult:
    """Tailored loans may lend to 85%; every other scenario stops at 80%."""
    band = LvrBand.BAND_80_85 if scenario is LoanScenario.TAILORED else LvrBand.BAND_70_80
    return next(r for r in results if r.band is band)


def determine_reason(final: float, financial: float, deposit: float, global_max: float) -> str:
    """Which limit produced ``final``; ties go to the global cap, then financials."""
    if final == global_max:
        return "GLOBAL_MAX"
    if financial <= 0:
        return "UNSERVICEABLE"
    if final == financial:
        return "FINANCIALS"
    return "DEPOSIT"


def calculate_max_borrowing(
    request: BorrowingRequest,
    *,
    product_selector: Optional[ProductSelector] = None,
    scenario_generator: Optional[ScenarioGenerator] = None,
    include_scenarios: bool = True,
    policy: Optional[AssessmentPolicy] = None,
    logger: Optional[logging.Logger] = None,
) -> MaxBorrowResult:
    """Maximum loan for ``request`` and the limit that binds it.

    Both solvers run for every LVR band. The serviceability figure comes from
    the highest band whose implied LVR falls inside it (the 70-80 band when
    none does), the deposit figure from the band the loan scenario allows,
    and the result is capped at the portfolio maximum. Improvement scenarios
    are attached unless ``include_scenarios`` is False; a failure while
    building them leaves the list empty rather than failing the assessment.
    """

    policy = policy or DEFAULT_POLICY
    logger = logger or log
    select_product = product_selector or product_for_band

    savings = safe_number(request.savings)
    if savings < 0:
        raise InvalidInputError("Savings cannot be negative")
    if savings != request.savings:
        request = request.model_copy(update={"savings": savings})

    scenario = determine_loan_scenario(request.product, request.has_own_home_component)
    logger.debug("Loan scenario %s for product %r", scenario.value, request.product.name)

    financial_results = []
    deposit_results = []
    for band in ALL_BANDS:
        product = select_product(band, request.preferences, request.is_investment, scenario)
        financial_results.append(
            calculate_max_borrowing_by_financials(
                request.financials,
                product,
                band,
                savings,
                request.property_state,
                request.property_postcode,
                request.preferences,
                is_investment=request.is_investment,
                is_first_home_buyer=request.is_first_home_buyer,
                policy=policy,
                logger=logger,
            )
        )
        deposit_results.append(
            calculate_max_borrowing_by_deposit(
                savings,
                request.property_state,
                band,
                is_first_home_buyer=request.is_first_home_buyer,
                is_investment=request.is_investment,
                policy=policy,
                logger=logger,
            )
        )

    financial = select_financial_result(financial_results)
    deposit = select_deposit_result(deposit_results, scenario)
    if not financial.lvr_band_match:
        logger.debug("No financial band matched, using %s", financial.band.value)

    global_max = policy.global_max_borrowing
    final = min(financial.loan_amount, deposit.loan_amount, global_max)
    reason = determine_reason(final, financial.loan_amount, deposit.loan_amount, global_max)

    logger.info(
        "Max borrowing %.0f (%s): financials %.0f in %s, deposit %.0f in %s",
        final,
        reason,
        financial.loan_amount,
        financial.band.value,
        deposit.loan_amount,
        deposit.band.value,
    )

    result = MaxBorrowResult(
        max_borrowing=final,
        reason=reason,
        financial_band=financial.band,
        deposit_band=deposit.band,
        max_by_financials=financial.loan_amount,
        max_by_deposit=deposit.loan_amount,
        global_max=global_max,
        loan_scenario=scenario.value,
        financial_results=financial_results,
        deposit_results=deposit_results,
    )
    if not include_scenarios:
        return result

    generator = scenario_generator or ScenarioGenerator(policy=policy)
    rerun = functools.partial(
        calculate_max_borrowing,
        product_selector=product_selector,
        include_scenarios=False,
        policy=policy,
        logger=logger,
    )
    try:
        scenarios = generator.generate(request, result, rerun)
    except Exception:
        logger.exception("Scenario generation failed, returning the baseline without scenarios")
        scenarios = []
    return result.model_copy(update={"scenarios": scenarios})
