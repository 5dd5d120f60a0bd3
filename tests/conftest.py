import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from maxborrow.models import (
    ApplicantIncome,
    BorrowingRequest,
    FinancialsInput,
    IncomeStream,
    Liabilities,
    LoanProductDetails,
)


def make_financials(
    salary=100000,
    expenses_monthly=2000,
    credit_card_limit=0.0,
    home_loan=0.0,
    other_loans=0.0,
    dependents=0,
    second_salary=None,
):
    applicants = [ApplicantIncome(base=IncomeStream(amount=salary, frequency="yearly"))]
    if second_salary is not None:
        applicants.append(ApplicantIncome(base=IncomeStream(amount=second_salary, frequency="yearly")))
    return FinancialsInput(
        applicant_type="joint" if second_salary is not None else "single",
        applicants=applicants,
        dependents=dependents,
        liabilities=Liabilities(
            expenses=IncomeStream(amount=expenses_monthly, frequency="monthly"),
            home_loan_repayments=home_loan,
            other_loan_repayments=other_loans,
            credit_card_limit=credit_card_limit,
        ),
    )


STRAIGHT_UP = LoanProductDetails(name="Straight Up Variable P&I", interest_rate=6.19)
TAILORED = LoanProductDetails(name="Tailored Variable P&I", interest_rate=6.74, upfront_fee=0.015)


def make_request(financials=None, **overrides):
    fields = {
        "financials": financials or make_financials(),
        "product": STRAIGHT_UP,
        "savings": 200000,
        "property_state": "NSW",
        "property_postcode": "2000",
    }
    fields.update(overrides)
    return BorrowingRequest(**fields)


@pytest.fixture
def financials():
    return make_financials()


@pytest.fixture
def deposit_bound_request():
    # High income, so savings are the binding limit
    return make_request(make_financials(salary=400000, expenses_monthly=3000), savings=200000)


@pytest.fixture
def serviceability_bound_request():
    return make_request(
        make_financials(salary=60000, expenses_monthly=3000, credit_card_limit=5000),
        savings=300000,
    )
