"""Rate card lookups for the product offered in each LVR tier."""
from __future__ import annotations

import logging
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Callable, Optional

import pandas as pd

from .bands import LvrBand, get_lvr_band_from_lvr
from .calculators import safe_number
from .models import LoanPreferences, LoanProductDetails

log = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parent / "data"

DEFAULT_RATE = 6.24
HIGH_LVR_LOADING = 0.5
HIGH_LVR_UPFRONT_FEE = 0.015


class LoanScenario(str, Enum):
    STRAIGHT_UP_POWER_UP_FIXED = "STRAIGHT_UP_POWER_UP_FIXED"
    TAILORED = "TAILORED"
    OWN_HOME_COMBINED = "OWN_HOME_COMBINED"


ProductSelector = Callable[[LvrBand, LoanPreferences, bool, LoanScenario], LoanProductDetails]


@lru_cache()
def load_rate_card() -> pd.DataFrame:
    return pd.read_csv(DATA_DIR / "rate_card.csv", dtype={"lvr_tier": str})


def _product_type(tier: str, is_fixed_rate: bool, loan_feature_type: str) -> str:
    if is_fixed_rate:
        return "Fixed"
    if tier == LvrBand.BAND_80_85.value:
        return "Tailored"
    if loan_feature_type == "offset":
        return "Power Up"
    return "Straight Up"


def get_product_for_lvr(
    lvr,
    is_investment: bool = False,
    is_interest_only: bool = False,
    is_fixed_rate: bool = False,
    fixed_term: int = 0,
    loan_feature_type: str = "redraw",
    loan_term: int = 30,
    rate_card: Optional[pd.DataFrame] = None,
    logger: Optional[logging.Logger] = None,
) -> LoanProductDetails:
    """Pick the rate card product for an LVR and set of preferences.

    When nothing on the card matches, the tier's Straight Up variable P&I
    product is used, and failing that a default rate with a loading above
    80% LVR.
    """

    logger = logger or log
    card = load_rate_card() if rate_card is None else rate_card
    lvr = min(max(safe_number(lvr, default=0.8), 0.0), 0.85)
    tier = get_lvr_band_from_lvr(lvr).value
    purpose = "Investor" if is_investment else "Owner Occupied"
    repayment = "Interest Only" if is_interest_only else "Principal & Interest"
    product_type = _product_type(tier, is_fixed_rate, loan_feature_type)

    matches = card[
        (card["product_type"] == product_type)
        & (card["loan_purpose"] == purpose)
        & (card["repayment_type"] == repayment)
        & (card["interest_rate_type"] == ("Fixed" if is_fixed_rate else "Variable"))
        & (card["lvr_tier"] == tier)
    ]
    if is_fixed_rate:
        matches = matches[matches["fixed_term"] == int(fixed_term)]

    if matches.empty:
        logger.debug("No %s product for tier %s, trying Straight Up", product_type, tier)
        matches = card[
            (card["product_type"] == "Straight Up")
            & (card["loan_purpose"] == purpose)
            & (card["repayment_type"] == "Principal & Interest")
            & (card["interest_rate_type"] == "Variable")
            & (card["lvr_tier"] == tier)
        ]

    if matches.empty:
        high_lvr = lvr > 0.8
        logger.warning("No rate card product for tier %s, using default rate", tier)
        return LoanProductDetails(
            name="Tailored Variable" if high_lvr else "Straight Up Variable",
            interest_rate=DEFAULT_RATE + (HIGH_LVR_LOADING if high_lvr else 0.0),
            loan_term=loan_term,
            upfront_fee=HIGH_LVR_UPFRONT_FEE if high_lvr else None,
        )

    row = matches.iloc[0]
    fee = safe_number(row["upfront_fee"])
    return LoanProductDetails(
        name=str(row["product_name"]),
        interest_rate=float(row["interest_rate"]),
        loan_term=loan_term,
        upfront_fee=fee or None,
    )


def product_for_band(
    band,
    preferences: LoanPreferences,
    is_investment: bool = False,
    scenario: LoanScenario = LoanScenario.STRAIGHT_UP_POWER_UP_FIXED,
) -> LoanProductDetails:
    """Product assessed for ``band``.

    Outside a Tailored request the 80-85 tier is assessed as a variable
    Tailored loan with offset. A Tailored request assessed in a lower tier
    keeps the borrower's rate type but takes the Straight Up redraw feature.
    Otherwise the borrower's preferences apply.
    """

    band = LvrBand(band)
    tailored = LoanScenario(scenario) is LoanScenario.TAILORED
    is_fixed = preferences.interest_rate_type == "FIXED"
    fixed_term = preferences.fixed_term
    feature = preferences.loan_feature_type
    if band is LvrBand.BAND_80_85 and not tailored:
        is_fixed, fixed_term, feature = False, 0, "offset"
    elif band is not LvrBand.BAND_80_85 and tailored:
        feature = "redraw"

    return get_product_for_lvr(
        band.max_lvr,
        is_investment=is_investment,
        is_interest_only=preferences.is_interest_only,
        is_fixed_rate=is_fixed,
        fixed_term=fixed_term,
        loan_feature_type=feature,
        loan_term=preferences.loan_term,
    )


def determine_loan_scenario(product: Optional[LoanProductDetails], has_own_home_component: bool = False) -> LoanScenario:
    if product is not None and "tailored" in product.name.lower():
        return LoanScenario.TAILORED
    if has_own_home_component:
        return LoanScenario.OWN_HOME_COMBINED
    return LoanScenario.STRAIGHT_UP_POWER_UP_FIXED
