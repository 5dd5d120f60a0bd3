from __future__ import annotations

from typing import Dict, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .presets import INCOME_SHADING


class AssessmentPolicy(BaseModel):
    """
    Credit policy settings applied during a borrowing assessment.
    """

    model_config = ConfigDict(frozen=True)

    # Serviceability
    assessment_buffer_pct: float = Field(
        default=3.0,
        ge=0,
        le=10,
        description="Percentage points added to the product rate when assessing repayments.",
    )

    home_loan_buffer: float = Field(
        default=1.3,
        ge=1,
        description="Multiplier on existing home loan repayments.",
    )

    other_loan_buffer: float = Field(
        default=1.0,
        ge=1,
        description="Multiplier on other existing loan repayments.",
    )

    credit_card_monthly_rate: float = Field(
        default=0.038,
        ge=0,
        le=1,
        description="Monthly commitment assumed per dollar of revolving credit limit.",
    )

    income_shading: Dict[str, float] = Field(
        default_factory=lambda: dict(INCOME_SHADING),
        description="Share of each income category counted towards serviceability.",
    )

    interest_deduction_years: int = Field(
        default=5,
        ge=1,
        le=30,
        description="Years of a P&I schedule averaged for deductible interest.",
    )

    # Portfolio limit
    global_max_borrowing: float = Field(
        default=3_000_000,
        gt=0,
        description="Largest loan written against a single property (AUD).",
    )

    # Numeric search
    max_iterations: int = Field(
        default=20,
        ge=1,
        description="Iteration cap for every binary search.",
    )

    lvr_tolerance: float = Field(
        default=0.0001,
        gt=0,
        description="Distance from the band's upper LVR accepted by the deposit search.",
    )

    surplus_tolerance: float = Field(
        default=100.0,
        gt=0,
        description="Annual surplus accepted as zero by the investment loan search (AUD).",
    )

    deposit_tolerance: float = Field(
        default=10.0,
        gt=0,
        description="Deposit shortfall accepted by the property value search (AUD).",
    )

    # Scenarios
    scenario_savings_increments: Tuple[float, ...] = Field(
        default=(20_000, 50_000, 100_000),
        description="Extra savings tried when the deposit binds.",
    )

    @property
    def assessment_buffer(self) -> float:
        """Buffer as a decimal rate."""
        return self.assessment_buffer_pct / 100


DEFAULT_POLICY = AssessmentPolicy()
