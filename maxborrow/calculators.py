from __future__ import annotations
import math
from decimal import Decimal, ROUND_HALF_UP

from .presets import FREQUENCY_PER_YEAR


def safe_number(x, default=0.0):
    """Return a finite float for ``x`` or a fallback value.

    Searches divide by property values and monthly rates that can legitimately
    be zero, and upstream form values may arrive as ``None`` or ``NaN``.
    Anything that is not a finite number is replaced with ``default`` before
    it can leak into later arithmetic.
    """

    try:
        if x is None:
            return default
        value = float(x)
    except (TypeError, ValueError):
        return default
    if math.isnan(value) or math.isinf(value):
        return default
    return value


def round_half_up(value, places: int = 2) -> float:
    """Round to ``places`` decimals with halves rounded away from zero."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(safe_number(value))).quantize(quantum, rounding=ROUND_HALF_UP))


def monthly_payment(principal, annual_rate_pct, term_years):
    """Calculate the fully amortizing monthly payment for a loan.

    ``principal`` is the starting loan amount, ``annual_rate_pct`` is the
    nominal yearly interest rate (e.g. ``6.5`` for 6.5%), and ``term_years`` is
    the amortization period in years. A zero or negative principal repays
    nothing.
    """

    L = safe_number(principal)
    r = safe_number(annual_rate_pct) / 100 / 12
    n = int(safe_number(term_years) * 12)
    if n <= 0 or L <= 0:
        return 0.0
    if abs(r) < 1e-9:
        return L / n
    return (r * L) / (1 - (1 + r) ** (-n))


def principal_from_payment(payment, annual_rate_pct, term_years):
    """Reverse amortization to find the loan amount for a given payment.

    This is the present value of an annuity, ``PMT * (1 - (1 + r)^-n) / r``,
    used to turn a monthly surplus into the largest loan it can repay.
    """

    P = safe_number(payment)
    r = safe_number(annual_rate_pct) / 100 / 12
    n = int(safe_number(term_years) * 12)
    if n <= 0 or P <= 0:
        return 0.0
    if abs(r) < 1e-9:
        return P * n
    return P * (1 - (1 + r) ** (-n)) / r


def interest_only_payment(principal, annual_rate_pct):
    """Monthly interest on ``principal`` with no principal reduction."""
    return max(safe_number(principal), 0.0) * safe_number(annual_rate_pct) / 100 / 12


def average_interest_first_years(principal, annual_rate_pct, term_years, years=5):
    """Average yearly interest over the first ``years`` of a P&I schedule.

    Walks the amortization schedule month by month; a schedule shorter than
    ``years`` is averaged over its own length.
    """

    balance = max(safe_number(principal), 0.0)
    r = safe_number(annual_rate_pct) / 100 / 12
    n = int(safe_number(term_years) * 12)
    months = min(int(years * 12), n)
    if balance <= 0 or months <= 0:
        return 0.0
    pmt = monthly_payment(balance, annual_rate_pct, term_years)
    total = 0.0
    for _ in range(months):
        interest = balance * r
        total += interest
        balance = max(balance - (pmt - interest), 0.0)
    return total / (months / 12)


def frequency_multiplier(frequency: str) -> int:
    """Number of periods per year; unknown frequencies are treated as yearly."""
    return FREQUENCY_PER_YEAR.get(str(frequency).lower(), 1)


def to_annual(amount, frequency: str) -> float:
    """Convert an amount paid at ``frequency`` to a yearly figure.

    Non-positive or missing amounts count as zero.
    """

    value = safe_number(amount)
    if value <= 0:
        return 0.0
    return value * frequency_multiplier(frequency)


def to_monthly(amount, frequency: str) -> float:
    return to_annual(amount, frequency) / 12


def from_annual(amount, frequency: str) -> float:
    """Express a yearly amount in ``frequency`` periods."""
    return safe_number(amount) / frequency_multiplier(frequency)
