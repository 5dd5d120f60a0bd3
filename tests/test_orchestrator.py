import pytest

from conftest import TAILORED, make_financials, make_request
from maxborrow.bands import LvrBand
from maxborrow.config import AssessmentPolicy
from maxborrow.errors import InvalidInputError
from maxborrow.models import LoanProductDetails
from maxborrow.orchestrator import (
    calculate_max_borrowing,
    determine_reason,
    select_deposit_result,
    select_financial_result,
)
from maxborrow.products import LoanScenario
from maxborrow.scenarios import ScenarioGenerator
from maxborrow.trace import capture_trace


def test_deposit_bound_result(deposit_bound_request):
    res = calculate_max_borrowing(deposit_bound_request)
    deposit_70_80 = next(r for r in res.deposit_results if r.band is LvrBand.BAND_70_80)
    assert res.reason == "DEPOSIT"
    assert res.deposit_band is LvrBand.BAND_70_80
    assert res.max_borrowing == res.max_by_deposit == deposit_70_80.loan_amount
    assert res.max_by_financials > res.max_by_deposit
    assert len(res.financial_results) == 5
    assert len(res.deposit_results) == 5


def test_unmatched_financials_fall_back_to_70_80(deposit_bound_request):
    res = calculate_max_borrowing(deposit_bound_request, include_scenarios=False)
    # Income this high implies an LVR above every band
    assert not any(r.lvr_band_match for r in res.financial_results)
    assert res.financial_band is LvrBand.BAND_70_80


def test_financials_bound_result(serviceability_bound_request):
    res = calculate_max_borrowing(serviceability_bound_request)
    assert res.reason == "FINANCIALS"
    assert res.max_borrowing == res.max_by_financials
    assert res.financial_band is LvrBand.BAND_0_50
    assert res.max_by_deposit > res.max_by_financials


def test_global_max_caps_the_result(deposit_bound_request):
    policy = AssessmentPolicy(global_max_borrowing=500000)
    res = calculate_max_borrowing(deposit_bound_request, policy=policy)
    assert res.reason == "GLOBAL_MAX"
    assert res.max_borrowing == 500000
    assert res.scenarios == []


def test_unserviceable_household():
    req = make_request(make_financials(salary=30000, expenses_monthly=5000))
    res = calculate_max_borrowing(req, include_scenarios=False)
    assert res.reason == "UNSERVICEABLE"
    assert res.max_borrowing == 0
    assert res.max_by_financials == 0


def test_tailored_product_uses_top_deposit_band(deposit_bound_request):
    req = deposit_bound_request.model_copy(update={"product": TAILORED})
    res = calculate_max_borrowing(req, include_scenarios=False)
    assert res.loan_scenario == "TAILORED"
    assert res.deposit_band is LvrBand.BAND_80_85
    standard = calculate_max_borrowing(deposit_bound_request, include_scenarios=False)
    assert res.max_by_deposit > standard.max_by_deposit


def test_identical_inputs_give_identical_results(deposit_bound_request):
    first = calculate_max_borrowing(deposit_bound_request)
    second = calculate_max_borrowing(deposit_bound_request)
    assert first == second
    assert first.model_dump() == second.model_dump()


def test_negative_savings_rejected():
    with pytest.raises(InvalidInputError):
        calculate_max_borrowing(make_request(savings=-1))


def test_non_finite_savings_are_sanitized():
    res = calculate_max_borrowing(make_request(savings=float("nan")), include_scenarios=False)
    assert res.max_by_deposit == 0


def test_injected_product_selector(deposit_bound_request):
    calls = []

    def selector(band, preferences, is_investment, scenario):
        calls.append((band, scenario))
        return LoanProductDetails(name="Flat Rate", interest_rate=5.0)

    res = calculate_max_borrowing(deposit_bound_request, product_selector=selector, include_scenarios=False)
    assert len(calls) == 5
    assert {scenario for _, scenario in calls} == {LoanScenario.STRAIGHT_UP_POWER_UP_FIXED}
    assert all(r.interest_rate == 5.0 for r in res.financial_results)


def test_scenario_failure_keeps_baseline(deposit_bound_request):
    class Broken(ScenarioGenerator):
        def generate(self, request, baseline, run):
            raise RuntimeError("boom")

    res = calculate_max_borrowing(deposit_bound_request, scenario_generator=Broken())
    baseline = calculate_max_borrowing(deposit_bound_request, include_scenarios=False)
    assert res.scenarios == []
    assert res.max_borrowing == baseline.max_borrowing


def test_results_frame(deposit_bound_request):
    frame = calculate_max_borrowing(deposit_bound_request, include_scenarios=False).results_frame()
    assert len(frame) == 10
    assert set(frame["solver"]) == {"financials", "deposit"}
    assert {"band", "loan_amount", "calculated_lvr", "lvr_band_match"} <= set(frame.columns)


def test_calculation_is_traced(deposit_bound_request):
    with capture_trace() as trace:
        calculate_max_borrowing(deposit_bound_request, include_scenarios=False)
    messages = trace.messages()
    assert any(m.startswith("Max borrowing") for m in messages)
    assert any(m.startswith("Deposit 70-80") for m in messages)


def test_reason_tie_break_order():
    assert determine_reason(100, 100, 100, 100) == "GLOBAL_MAX"
    assert determine_reason(100, 100, 100, 500) == "FINANCIALS"
    assert determine_reason(80, 100, 80, 500) == "DEPOSIT"
    assert determine_reason(0, 0, 80, 500) == "UNSERVICEABLE"


def test_selection_helpers(deposit_bound_request):
    res = calculate_max_borrowing(deposit_bound_request, include_scenarios=False)
    assert select_financial_result(res.financial_results).band is LvrBand.BAND_70_80
    assert select_deposit_result(res.deposit_results, LoanScenario.OWN_HOME_COMBINED).band is LvrBand.BAND_70_80
    assert select_deposit_result(res.deposit_results, LoanScenario.TAILORED).band is LvrBand.BAND_80_85

    matched = [
        r.model_copy(update={"lvr_band_match": r.band in (LvrBand.BAND_0_50, LvrBand.BAND_60_70)})
        for r in res.financial_results
    ]
    assert select_financial_result(matched).band is LvrBand.BAND_60_70


def test_savings_below_purchase_costs_bind_at_zero():
    res = calculate_max_borrowing(make_request(savings=2000), include_scenarios=False)
    assert res.max_by_deposit == 0
    assert res.max_borrowing == 0
    assert res.max_by_financials > 0
    assert res.reason == "DEPOSIT"
