"""Household serviceability for a candidate loan."""
from __future__ import annotations

import logging
from typing import List, Optional

from .calculators import (
    average_interest_first_years,
    monthly_payment,
    safe_number,
)
from .config import DEFAULT_POLICY, AssessmentPolicy
from .hem import get_higher_of_declared_or_hem
from .models import FinancialsInput, LoanPreferences, ServiceabilityResult
from .tax import calculate_total_tax

log = logging.getLogger(__name__)


def shaded_income_by_applicant(financials: FinancialsInput, policy: AssessmentPolicy) -> List[float]:
    """Annual income each applicant contributes after category shading."""
    shading = policy.income_shading
    return [
        sum(stream.annual * shading.get(category, 1.0) for category, stream in applicant.streams())
        for applicant in financials.applicants
    ]


def calculate_deductible_interest(
    loan_amount,
    interest_rate,
    preferences: LoanPreferences,
    years: int = 5,
) -> float:
    """Annual interest an investor can claim against taxable income.

    Interest-only loans deduct a full year of interest. Principal and
    interest loans use the average interest over the first ``years`` of the
    amortization schedule.
    """

    loan = safe_number(loan_amount)
    if loan <= 0:
        return 0.0
    rate = safe_number(interest_rate)
    if preferences.is_interest_only:
        return loan * rate / 100
    return average_interest_first_years(loan, rate, preferences.pi_term, years)


def monthly_liabilities(financials: FinancialsInput, policy: AssessmentPolicy) -> float:
    """Existing commitments with assessment buffers applied."""
    debts = financials.liabilities
    return (
        safe_number(debts.home_loan_repayments) * policy.home_loan_buffer
        + safe_number(debts.other_loan_repayments) * policy.other_loan_buffer
        + safe_number(debts.credit_card_limit) * policy.credit_card_monthly_rate
    )


def evaluate_serviceability(
    financials: FinancialsInput,
    loan_amount,
    interest_rate,
    preferences: Optional[LoanPreferences] = None,
    is_investment: bool = False,
    postcode: str = "",
    policy: Optional[AssessmentPolicy] = None,
    logger: Optional[logging.Logger] = None,
) -> ServiceabilityResult:
    """Surplus or deficit a household has left after servicing ``loan_amount``.

    ``interest_rate`` is the product rate in percent; the repayment is
    assessed at that rate plus the policy buffer over the principal and
    interest term. Investment loans reduce each applicant's taxable income by
    their share of the deductible interest. Inputs are assumed sanitized.
    """

    policy = policy or DEFAULT_POLICY
    preferences = preferences or LoanPreferences()
    logger = logger or log
    loan_amount = max(safe_number(loan_amount), 0.0)
    rate = safe_number(interest_rate)

    per_applicant = shaded_income_by_applicant(financials, policy)
    shaded_income = sum(per_applicant)

    deductible = 0.0
    if is_investment and loan_amount > 0:
        deductible = calculate_deductible_interest(
            loan_amount, rate, preferences, policy.interest_deduction_years
        )

    total_tax = 0.0
    taxable_total = 0.0
    for income in per_applicant:
        if shaded_income > 0:
            share = deductible * income / shaded_income
        else:
            share = deductible / len(per_applicant)
        taxable = max(income - share, 0.0)
        taxable_total += taxable
        total_tax += calculate_total_tax(taxable).total_tax

    net_income = shaded_income - total_tax

    declared = financials.liabilities.expenses.annual
    expenses = get_higher_of_declared_or_hem(
        declared,
        postcode,
        financials.total_gross_income(),
        financials.marital_status,
        financials.dependents,
        logger=logger,
    )

    liabilities = monthly_liabilities(financials, policy)
    assessment_rate = rate + policy.assessment_buffer_pct
    repayment = 0.0
    if loan_amount > 0:
        repayment = safe_number(monthly_payment(loan_amount, assessment_rate, preferences.pi_term))

    monthly_expenses = expenses.amount / 12
    monthly_surplus = safe_number(net_income / 12 - (monthly_expenses + liabilities + repayment))

    logger.debug(
        "Serviceability: loan %.0f at %.2f%% repayment %.2f surplus %.2f/month",
        loan_amount,
        assessment_rate,
        repayment,
        monthly_surplus,
    )

    return ServiceabilityResult(
        shaded_income=shaded_income,
        deductible_interest=deductible,
        taxable_income=taxable_total,
        total_tax=total_tax,
        net_income=net_income,
        declared_expenses=declared,
        benchmark_expenses=expenses.hem_amount,
        uses_benchmark=expenses.is_hem,
        monthly_expenses=monthly_expenses,
        monthly_liabilities=liabilities,
        monthly_repayment=repayment,
        assessment_rate=assessment_rate,
        monthly_surplus=monthly_surplus,
        annual_surplus=monthly_surplus * 12,
    )
