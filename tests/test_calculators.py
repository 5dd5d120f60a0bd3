import math

from maxborrow.calculators import (
    average_interest_first_years,
    from_annual,
    interest_only_payment,
    monthly_payment,
    principal_from_payment,
    round_half_up,
    safe_number,
    to_annual,
    to_monthly,
)


def test_amortization_inverse_roundtrip():
    principal = 600000
    rate = 9.19
    term = 30
    pmt = monthly_payment(principal, rate, term)
    back = principal_from_payment(pmt, rate, term)
    assert abs(back - principal) < 1.5


def test_zero_rate_uses_linear_division():
    assert monthly_payment(360000, 0, 30) == 1000
    assert principal_from_payment(1000, 0, 30) == 360000


def test_zero_or_negative_principal_repays_nothing():
    assert monthly_payment(0, 6.5, 30) == 0.0
    assert monthly_payment(-5000, 6.5, 30) == 0.0
    assert principal_from_payment(-100, 6.5, 30) == 0.0
    assert monthly_payment(100000, 6.5, 0) == 0.0


def test_safe_number_replaces_non_finite_values():
    assert safe_number(None) == 0.0
    assert safe_number(float("nan"), default=5.0) == 5.0
    assert safe_number(float("inf")) == 0.0
    assert safe_number("abc", default=1.0) == 1.0
    assert safe_number("3.5") == 3.5


def test_round_half_up_on_cents():
    assert round_half_up(2.675) == 2.68
    assert round_half_up(0.125) == 0.13
    assert round_half_up(-1.005) == -1.01
    assert round_half_up(float("nan")) == 0.0


def test_frequency_conversion():
    assert to_annual(100, "weekly") == 5200
    assert to_annual(100, "fortnightly") == 2600
    assert to_annual(100, "monthly") == 1200
    assert to_annual(100, "yearly") == 100
    assert to_monthly(5200, "yearly") == 5200 / 12
    assert from_annual(5200, "weekly") == 100


def test_non_positive_amounts_convert_to_zero():
    assert to_annual(-50, "weekly") == 0.0
    assert to_annual(0, "monthly") == 0.0
    assert to_annual(None, "monthly") == 0.0


def test_interest_only_payment():
    assert math.isclose(interest_only_payment(500000, 6.0), 2500.0)


def test_average_interest_declines_with_amortization():
    avg = average_interest_first_years(500000, 6.0, 30, 5)
    # Below a full year of interest on the opening balance, but not by much
    assert 28000 < avg < 30000
    assert average_interest_first_years(500000, 0, 30, 5) == 0.0
    assert average_interest_first_years(0, 6.0, 30, 5) == 0.0
