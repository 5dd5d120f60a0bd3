"""State transfer duty and purchase cost helpers."""
from __future__ import annotations

import logging
from typing import Optional

from .calculators import safe_number
from .errors import InvalidInputError
from .models import DepositResult, DutyBreakdown, StampDutyResult, UpfrontCosts
from .presets import (
    DEFAULT_STATE,
    LEGAL_FEES,
    MIN_OTHER_COSTS,
    OTHER_COSTS_PCT,
    STAMP_DUTY_TABLES,
)

log = logging.getLogger(__name__)


def resolve_state(state: str, logger: Optional[logging.Logger] = None) -> str:
    """Upper-case state code with a duty table, falling back to the default state."""
    code = str(state or "").strip().upper()
    if code not in STAMP_DUTY_TABLES:
        (logger or log).warning("Stamp duty: unknown state %r, using %s rates", state, DEFAULT_STATE)
        code = DEFAULT_STATE
    return code


def _threshold_for(price: float, thresholds) -> tuple:
    # Last row starting at or below the price; rows may leave gaps between max and next min
    selected = thresholds[0]
    for row in thresholds:
        if row[0] <= price:
            selected = row
    return selected


def first_home_buyer_concession(price: float, base_duty: float, fhb_rule) -> float:
    """Duty relief for an owner-occupier buying their first home.

    Prices at or below the exemption threshold pay nothing. Where the state
    offers a sliding scale, relief falls linearly from the full duty at the
    exemption threshold to nothing at the concession threshold.
    """

    if not fhb_rule:
        return 0.0
    exemption = fhb_rule["exemption"]
    concession = fhb_rule.get("concession")
    if price <= exemption:
        return base_duty
    if concession and price < concession:
        share = (concession - price) / (concession - exemption)
        return min(max(base_duty * share, 0.0), base_duty)
    return 0.0


def calculate_stamp_duty(
    price,
    state: str = DEFAULT_STATE,
    is_first_home_buyer: bool = False,
    is_investment: bool = False,
    is_foreign_buyer: bool = False,
    logger: Optional[logging.Logger] = None,
) -> StampDutyResult:
    logger = logger or log
    price = safe_number(price)
    if price < 0:
        raise InvalidInputError("Property price cannot be negative")

    code = resolve_state(state, logger)
    table = STAMP_DUTY_TABLES[code]
    low, _, rate, base = _threshold_for(price, table["thresholds"])
    base_duty = base + rate * (price - low)

    concession = 0.0
    if is_first_home_buyer and not is_investment:
        concession = first_home_buyer_concession(price, base_duty, table["fhb"])

    surcharge = price * table["foreign_surcharge"] if is_foreign_buyer else 0.0

    return StampDutyResult(
        state=code,
        stamp_duty=max(base_duty - concession, 0.0) + surcharge,
        breakdown=DutyBreakdown(
            base_stamp_duty=base_duty,
            concession_amount=concession,
            foreign_surcharge=surcharge,
        ),
        threshold_min=low,
        threshold_rate=rate,
        threshold_base=base,
    )


def calculate_upfront_costs(price) -> UpfrontCosts:
    """Legal fees plus other settlement costs for a purchase at ``price``."""
    other = max(safe_number(price) * OTHER_COSTS_PCT, MIN_OTHER_COSTS)
    return UpfrontCosts(legal_fees=LEGAL_FEES, other_costs=other)


def purchase_costs(
    price,
    state: str,
    is_first_home_buyer: bool = False,
    is_investment: bool = False,
    logger: Optional[logging.Logger] = None,
) -> tuple:
    """(duty, upfront costs) for a resident purchase at ``price``."""
    duty = calculate_stamp_duty(
        price,
        state,
        is_first_home_buyer=is_first_home_buyer,
        is_investment=is_investment,
        logger=logger,
    )
    return duty.stamp_duty, calculate_upfront_costs(price)


def calculate_deposit_details(
    price,
    loan_amount,
    state: str = DEFAULT_STATE,
    is_first_home_buyer: bool = False,
    is_investment: bool = False,
    is_foreign_buyer: bool = False,
) -> DepositResult:
    """Cash a buyer needs at settlement when borrowing ``loan_amount``."""
    price = safe_number(price)
    loan_amount = safe_number(loan_amount)
    if price < 0:
        raise InvalidInputError("Property price cannot be negative")
    if loan_amount < 0:
        raise InvalidInputError("Loan amount cannot be negative")
    if loan_amount > price:
        raise InvalidInputError("Loan amount cannot exceed the property price")

    duty = calculate_stamp_duty(price, state, is_first_home_buyer, is_investment, is_foreign_buyer)
    costs = calculate_upfront_costs(price)
    deposit = price - loan_amount
    return DepositResult(
        property_price=price,
        loan_amount=loan_amount,
        deposit_amount=deposit,
        stamp_duty=duty.stamp_duty,
        upfront_costs=costs.total,
        total_required=deposit + duty.stamp_duty + costs.total,
    )


def calculate_loan_amount_required(
    price,
    savings,
    state: str = DEFAULT_STATE,
    is_first_home_buyer: bool = False,
    is_investment: bool = False,
    is_foreign_buyer: bool = False,
) -> float:
    """Loan needed to buy at ``price`` after savings cover duty and costs."""
    price = safe_number(price)
    savings = safe_number(savings)
    if price < 0:
        raise InvalidInputError("Property price cannot be negative")
    if savings < 0:
        raise InvalidInputError("Savings cannot be negative")

    duty = calculate_stamp_duty(price, state, is_first_home_buyer, is_investment, is_foreign_buyer)
    costs = calculate_upfront_costs(price)
    return max(0.0, price + duty.stamp_duty + costs.total - savings)
