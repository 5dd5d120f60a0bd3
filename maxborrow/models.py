from __future__ import annotations

from typing import List, Literal, Optional

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field, model_validator

from .bands import LvrBand
from .calculators import to_annual

Frequency = Literal["weekly", "fortnightly", "monthly", "yearly"]
Reason = Literal["FINANCIALS", "DEPOSIT", "GLOBAL_MAX", "UNSERVICEABLE"]
Category = Literal["SAVINGS", "EXPENSES", "CREDIT", "INCOME"]


class FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class IncomeStream(FrozenModel):
    amount: float = 0.0
    frequency: Frequency = "yearly"

    @property
    def annual(self) -> float:
        return to_annual(self.amount, self.frequency)


class ApplicantIncome(FrozenModel):
    base: IncomeStream = IncomeStream()
    supplementary: IncomeStream = IncomeStream()
    other: IncomeStream = IncomeStream()
    rental: IncomeStream = IncomeStream()

    def streams(self):
        """(category, stream) pairs in a fixed order."""
        return [
            ("base", self.base),
            ("supplementary", self.supplementary),
            ("other", self.other),
            ("rental", self.rental),
        ]

    def gross_annual(self) -> float:
        return sum(s.annual for _, s in self.streams())


class Liabilities(FrozenModel):
    expenses: IncomeStream = IncomeStream(frequency="monthly")
    home_loan_repayments: float = Field(0.0, ge=0, description="Monthly repayments on other home loans.")
    other_loan_repayments: float = Field(0.0, ge=0, description="Monthly repayments on personal and car loans.")
    credit_card_limit: float = Field(0.0, ge=0)


class FinancialsInput(FrozenModel):
    applicant_type: Literal["single", "joint"] = "single"
    applicants: List[ApplicantIncome] = Field(default_factory=lambda: [ApplicantIncome()], min_length=1)
    dependents: int = Field(0, ge=0)
    liabilities: Liabilities = Liabilities()

    @property
    def marital_status(self) -> str:
        return "married" if self.applicant_type == "joint" else "single"

    def total_gross_income(self) -> float:
        """Unshaded annual income across all applicants."""
        return sum(a.gross_annual() for a in self.applicants)


class LoanPreferences(FrozenModel):
    """Product choices that drive the rate and amortization window.

    Defaults describe a 30 year variable principal and interest loan with a
    redraw facility.
    """

    interest_rate_type: Literal["VARIABLE", "FIXED"] = "VARIABLE"
    fixed_term: int = Field(0, ge=0, le=5)
    repayment_type: Literal["PRINCIPAL_AND_INTEREST", "INTEREST_ONLY"] = "PRINCIPAL_AND_INTEREST"
    interest_only_term: int = Field(0, ge=0, le=5)
    loan_term: int = Field(30, ge=10, le=30)
    loan_feature_type: Literal["redraw", "offset"] = "redraw"

    @model_validator(mode="after")
    def _check_terms(self):
        if self.interest_rate_type == "FIXED" and self.fixed_term < 1:
            raise ValueError("fixed_term must be at least 1 year for a fixed rate")
        if self.repayment_type == "INTEREST_ONLY":
            if self.interest_only_term < 1:
                raise ValueError("interest_only_term must be at least 1 year for interest only")
            if self.interest_only_term >= self.loan_term:
                raise ValueError("interest_only_term must be shorter than loan_term")
        return self

    @property
    def is_interest_only(self) -> bool:
        return self.repayment_type == "INTEREST_ONLY" and self.interest_only_term > 0

    @property
    def effective_io_term(self) -> int:
        return self.interest_only_term if self.is_interest_only else 0

    @property
    def pi_term(self) -> int:
        """Years over which principal is repaid."""
        return self.loan_term - self.effective_io_term


class LoanProductDetails(FrozenModel):
    name: str
    interest_rate: float = Field(..., ge=0, description="Nominal annual rate in percent.")
    loan_term: int = 30
    upfront_fee: Optional[float] = None


class TaxResult(FrozenModel):
    income_tax: float
    offset: float
    levy: float
    total_tax: float


class HemResult(FrozenModel):
    weekly_value: float
    annual_value: float
    location_id: int
    income_range_id: int
    marital_status: str
    dependents: int
    source: Literal["exact", "nearest_income", "metro", "metro_nearest_income", "default"]


class ExpenseComparison(FrozenModel):
    amount: float
    is_hem: bool
    hem_amount: float


class DutyBreakdown(FrozenModel):
    base_stamp_duty: float
    concession_amount: float
    foreign_surcharge: float


class StampDutyResult(FrozenModel):
    state: str
    stamp_duty: float
    breakdown: DutyBreakdown
    threshold_min: float
    threshold_rate: float
    threshold_base: float


class UpfrontCosts(FrozenModel):
    legal_fees: float
    other_costs: float

    @property
    def total(self) -> float:
        return self.legal_fees + self.other_costs


class DepositResult(FrozenModel):
    property_price: float
    loan_amount: float
    deposit_amount: float
    stamp_duty: float
    upfront_costs: float
    total_required: float


class ServiceabilityResult(FrozenModel):
    shaded_income: float
    deductible_interest: float
    taxable_income: float
    total_tax: float
    net_income: float
    declared_expenses: float
    benchmark_expenses: float
    uses_benchmark: bool
    monthly_expenses: float
    monthly_liabilities: float
    monthly_repayment: float
    assessment_rate: float
    monthly_surplus: float
    annual_surplus: float


class CostBreakdown(FrozenModel):
    stamp_duty: float = 0.0
    legal_fees: float = 0.0
    other_costs: float = 0.0
    total_costs: float = 0.0
    deposit_used: float = 0.0
    available_savings: float = 0.0
    remaining_savings: float = 0.0


class ConstraintResult(FrozenModel):
    band: LvrBand
    loan_amount: float
    property_value: float
    calculated_lvr: float
    calculated_band: LvrBand
    lvr_band_match: bool
    iterations: int
    property_iterations: int = 0
    converged: bool
    costs: CostBreakdown = CostBreakdown()
    # Financial solver only
    interest_rate: Optional[float] = None
    product_name: Optional[str] = None
    surplus: Optional[float] = None


class ImprovementScenario(FrozenModel):
    id: str
    title: str
    description: str
    category: Category
    input_delta: float
    new_max_borrowing: float
    impact: float


class MaxBorrowResult(FrozenModel):
    max_borrowing: float
    reason: Reason
    financial_band: LvrBand
    deposit_band: LvrBand
    max_by_financials: float
    max_by_deposit: float
    global_max: float
    loan_scenario: str
    financial_results: List[ConstraintResult]
    deposit_results: List[ConstraintResult]
    scenarios: List[ImprovementScenario] = Field(default_factory=list)

    def results_frame(self) -> pd.DataFrame:
        """Both per-band tables in one frame, one row per solver and band."""
        rows = []
        for solver, results in (("financials", self.financial_results), ("deposit", self.deposit_results)):
            for r in results:
                rows.append(
                    {
                        "solver": solver,
                        "band": r.band.value,
                        "loan_amount": r.loan_amount,
                        "property_value": r.property_value,
                        "calculated_lvr": r.calculated_lvr,
                        "calculated_band": r.calculated_band.value,
                        "lvr_band_match": r.lvr_band_match,
                        "iterations": r.iterations,
                        "converged": r.converged,
                        "stamp_duty": r.costs.stamp_duty,
                        "total_costs": r.costs.total_costs,
                        "interest_rate": r.interest_rate,
                    }
                )
        return pd.DataFrame(rows)


class BorrowingRequest(FrozenModel):
    """Everything one borrowing assessment needs."""

    financials: FinancialsInput
    product: LoanProductDetails
    preferences: LoanPreferences = LoanPreferences()
    savings: float = 0.0
    property_state: str = "NSW"
    property_postcode: str = ""
    is_first_home_buyer: bool = False
    is_investment: bool = False
    has_own_home_component: bool = False
    required_loan_amount: float = Field(0.0, ge=0, description="Loan the borrower is looking for, 0 when unknown.")
