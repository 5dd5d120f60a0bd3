"""Maximum borrowing engine.

Exposes the assessment entry points and the package version."""

import logging
from importlib import metadata

from .bands import LvrBand, get_lvr_band_from_lvr, is_lvr_within_band
from .config import DEFAULT_POLICY, AssessmentPolicy
from .deposit import calculate_max_borrowing_by_deposit
from .errors import InvalidInputError, MaxBorrowError
from .financials import calculate_max_borrowing_by_financials
from .hem import get_hem_value, get_higher_of_declared_or_hem
from .models import (
    ApplicantIncome,
    BorrowingRequest,
    FinancialsInput,
    IncomeStream,
    Liabilities,
    LoanPreferences,
    LoanProductDetails,
    MaxBorrowResult,
)
from .orchestrator import calculate_max_borrowing
from .products import get_product_for_lvr
from .rules import RuleResult, evaluate_rules, explain
from .scenarios import ScenarioGenerator
from .serviceability import evaluate_serviceability
from .stamp_duty import (
    calculate_deposit_details,
    calculate_loan_amount_required,
    calculate_stamp_duty,
)
from .tax import calculate_total_tax
from .trace import CalculationTrace, capture_trace

try:
    __version__ = metadata.version("maxborrow")
except metadata.PackageNotFoundError:  # pragma: no cover - during local dev
    __version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "__version__",
    "ApplicantIncome",
    "AssessmentPolicy",
    "BorrowingRequest",
    "CalculationTrace",
    "DEFAULT_POLICY",
    "FinancialsInput",
    "IncomeStream",
    "InvalidInputError",
    "Liabilities",
    "LoanPreferences",
    "LoanProductDetails",
    "LvrBand",
    "MaxBorrowError",
    "MaxBorrowResult",
    "RuleResult",
    "ScenarioGenerator",
    "calculate_deposit_details",
    "calculate_loan_amount_required",
    "calculate_max_borrowing",
    "calculate_max_borrowing_by_deposit",
    "calculate_max_borrowing_by_financials",
    "calculate_stamp_duty",
    "calculate_total_tax",
    "capture_trace",
    "evaluate_rules",
    "evaluate_serviceability",
    "explain",
    "get_hem_value",
    "get_higher_of_declared_or_hem",
    "get_lvr_band_from_lvr",
    "get_product_for_lvr",
    "is_lvr_within_band",
]
