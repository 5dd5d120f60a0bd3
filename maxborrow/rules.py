from __future__ import annotations
from typing import Literal, List, Dict, Any
from pydantic import BaseModel, Field

from .models import MaxBorrowResult


class RuleResult(BaseModel):
    code: str
    severity: Literal["info", "warn", "critical"]
    message: str
    context: Dict[str, Any] = Field(default_factory=dict)


def evaluate_rules(result: MaxBorrowResult, required_loan_amount: float = 0.0) -> List[RuleResult]:
    res: List[RuleResult] = []

    if result.reason == "GLOBAL_MAX":
        res.append(
            RuleResult(
                code="GLOBAL_MAX_REACHED",
                severity="info",
                message="Borrowing is capped at the maximum loan for a single property.",
                context={"global_max": result.global_max},
            )
        )

    if result.reason == "UNSERVICEABLE":
        res.append(
            RuleResult(
                code="UNSERVICEABLE",
                severity="critical",
                message="Income does not cover expenses and existing commitments before any new loan.",
            )
        )

    financial = next(r for r in result.financial_results if r.band == result.financial_band)
    if not financial.lvr_band_match and result.max_by_financials > 0:
        res.append(
            RuleResult(
                code="FINANCIAL_BAND_FALLBACK",
                severity="warn",
                message="No LVR band matched the serviceability result; the 70-80% band was used.",
                context={"calculated_lvr": round(financial.calculated_lvr, 4)},
            )
        )

    deposit = next(r for r in result.deposit_results if r.band == result.deposit_band)
    if not deposit.lvr_band_match and result.max_by_deposit > 0:
        res.append(
            RuleResult(
                code="DEPOSIT_BAND_MISMATCH",
                severity="warn",
                message="Deposit calculation did not land inside its LVR band.",
                context={"band": deposit.band.value, "calculated_lvr": round(deposit.calculated_lvr, 4)},
            )
        )

    unconverged = [
        f"{name}:{r.band.value}"
        for name, results in (("financials", result.financial_results), ("deposit", result.deposit_results))
        for r in results
        if not r.converged
    ]
    if unconverged:
        res.append(
            RuleResult(
                code="SEARCH_NOT_CONVERGED",
                severity="info",
                message="Some band calculations stopped at the iteration limit; their last estimate is shown.",
                context={"bands": unconverged},
            )
        )

    if required_loan_amount > 0 and result.max_borrowing < required_loan_amount:
        res.append(
            RuleResult(
                code="REQUIRED_LOAN_SHORTFALL",
                severity="warn",
                message="Maximum borrowing is below the loan amount required.",
                context={"shortfall": required_loan_amount - result.max_borrowing},
            )
        )

    return res


def explain(result: MaxBorrowResult) -> str:
    """One sentence naming the limit that set the maximum."""
    amount = f"${result.max_borrowing:,.0f}"
    if result.reason == "GLOBAL_MAX":
        return f"You can borrow up to {amount}, the most we lend against a single property."
    if result.reason == "UNSERVICEABLE":
        return "Your income does not yet cover your expenses and existing commitments, so no new loan can be serviced."
    if result.reason == "FINANCIALS":
        return (
            f"You can borrow up to {amount}, limited by what your income can repay "
            f"({result.financial_band.value}% LVR band)."
        )
    return (
        f"You can borrow up to {amount}, limited by the deposit your savings can cover "
        f"({result.deposit_band.value}% LVR band)."
    )
