"""What-if scenarios that show how one change moves the borrowing limit."""
from __future__ import annotations

import logging
from typing import Callable, List, Optional

from .bands import LvrBand
from .calculators import from_annual
from .config import DEFAULT_POLICY, AssessmentPolicy
from .hem import get_higher_of_declared_or_hem
from .models import BorrowingRequest, ImprovementScenario, MaxBorrowResult

log = logging.getLogger(__name__)

Runner = Callable[[BorrowingRequest], MaxBorrowResult]


def _money(amount: float) -> str:
    return f"${amount:,.0f}"


class ScenarioGenerator:
    """Re-run an assessment with a single input changed.

    Only changes that can move the binding limit are tried: extra savings
    when the deposit binds, and lower expenses or a closed credit card when
    serviceability binds. Each scenario starts from the baseline request, so
    scenarios never build on one another.
    """

    def __init__(
        self,
        policy: Optional[AssessmentPolicy] = None,
        lvr_savings_scenarios: bool = False,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.policy = policy or DEFAULT_POLICY
        self.lvr_savings_scenarios = lvr_savings_scenarios
        self.logger = logger or log

    def generate(self, request: BorrowingRequest, baseline: MaxBorrowResult, run: Runner) -> List[ImprovementScenario]:
        if baseline.reason == "GLOBAL_MAX":
            return []
        required = request.required_loan_amount
        if required > 0 and baseline.max_borrowing >= required:
            self.logger.debug("Baseline %.0f already covers the %.0f requested", baseline.max_borrowing, required)
            return []

        scenarios: List[ImprovementScenario] = []
        if baseline.reason == "DEPOSIT":
            scenarios.extend(self.savings_scenarios(request, baseline, run))
        else:
            scenarios.extend(self.expense_scenarios(request, baseline, run))
            scenarios.extend(self.credit_scenarios(request, baseline, run))
            if self.lvr_savings_scenarios and baseline.financial_band is not LvrBand.BAND_0_50:
                scenarios.extend(self.savings_scenarios(request, baseline, run))
        return scenarios

    def _scenario(self, run, changed, baseline, **fields) -> ImprovementScenario:
        new_max = run(changed).max_borrowing
        return ImprovementScenario(
            new_max_borrowing=new_max,
            impact=new_max - baseline.max_borrowing,
            **fields,
        )

    def savings_scenarios(self, request, baseline, run) -> List[ImprovementScenario]:
        out = []
        for extra in self.policy.scenario_savings_increments:
            changed = request.model_copy(update={"savings": request.savings + extra})
            out.append(
                self._scenario(
                    run,
                    changed,
                    baseline,
                    id=f"savings-{int(extra)}",
                    title=f"Save an extra {_money(extra)}",
                    description=f"Adding {_money(extra)} to your savings increases the deposit you can put down.",
                    category="SAVINGS",
                    input_delta=float(extra),
                )
            )
        return out

    def expense_scenarios(self, request, baseline, run) -> List[ImprovementScenario]:
        financials = request.financials
        expenses = financials.liabilities.expenses
        declared = expenses.annual
        comparison = get_higher_of_declared_or_hem(
            declared,
            request.property_postcode,
            financials.total_gross_income(),
            financials.marital_status,
            financials.dependents,
            logger=self.logger,
        )
        if declared <= comparison.hem_amount:
            return []

        reduced = expenses.model_copy(update={"amount": from_annual(comparison.hem_amount, expenses.frequency)})
        changed = request.model_copy(
            update={
                "financials": financials.model_copy(
                    update={"liabilities": financials.liabilities.model_copy(update={"expenses": reduced})}
                )
            }
        )
        reduction = declared - comparison.hem_amount
        return [
            self._scenario(
                run,
                changed,
                baseline,
                id="expenses-benchmark",
                title="Reduce your living expenses",
                description=(
                    f"Cutting expenses by {_money(reduction)} a year brings them down to the "
                    f"{_money(comparison.hem_amount)} benchmark for your household."
                ),
                category="EXPENSES",
                input_delta=reduction,
            )
        ]

    def credit_scenarios(self, request, baseline, run) -> List[ImprovementScenario]:
        financials = request.financials
        limit = financials.liabilities.credit_card_limit
        if limit <= 0:
            return []
        changed = request.model_copy(
            update={
                "financials": financials.model_copy(
                    update={"liabilities": financials.liabilities.model_copy(update={"credit_card_limit": 0.0})}
                )
            }
        )
        return [
            self._scenario(
                run,
                changed,
                baseline,
                id="credit-close",
                title="Close your credit cards",
                description=f"Closing {_money(limit)} of credit card limits removes them from your commitments.",
                category="CREDIT",
                input_delta=limit,
            )
        ]
