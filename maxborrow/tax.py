"""Resident income tax, low income offset and Medicare levy."""
from __future__ import annotations

from typing import Sequence, Tuple

from .calculators import round_half_up, safe_number
from .models import TaxResult
from .presets import INCOME_TAX_BRACKETS, LEVY_BRACKETS, TAX_OFFSET_BRACKETS

Bracket = Tuple[float, float, float, float]


def _bracket_for(income: float, table: Sequence[Bracket]) -> Bracket:
    # (low, high]; income at or below the first low bound uses the first row
    for bracket in table:
        low, high = bracket[0], bracket[1]
        if low < income <= high:
            return bracket
    return table[0]


def _apply(income: float, table: Sequence[Bracket]) -> float:
    low, _, base, rate = _bracket_for(income, table)
    return base + rate * (income - low)


def calculate_income_tax(income) -> float:
    """Progressive tax on annual taxable income."""
    return round_half_up(_apply(safe_number(income), INCOME_TAX_BRACKETS))


def calculate_tax_offset(income) -> float:
    """Low income tax offset, never below zero."""
    return round_half_up(max(0.0, _apply(safe_number(income), TAX_OFFSET_BRACKETS)))


def calculate_levy(income) -> float:
    return round_half_up(max(0.0, _apply(safe_number(income), LEVY_BRACKETS)))


def calculate_total_tax(income) -> TaxResult:
    """Tax payable on ``income`` after the offset, including the levy.

    Income is not validated; callers pass sanitized, non-negative values.
    """

    income_tax = calculate_income_tax(income)
    offset = calculate_tax_offset(income)
    levy = calculate_levy(income)
    total = round_half_up(max(0.0, income_tax - offset + levy))
    return TaxResult(income_tax=income_tax, offset=offset, levy=levy, total_tax=total)
