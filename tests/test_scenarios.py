from types import SimpleNamespace

import pytest

from conftest import make_financials, make_request
from maxborrow.bands import LvrBand
from maxborrow.orchestrator import calculate_max_borrowing
from maxborrow.scenarios import ScenarioGenerator


def _by_id(result):
    return {s.id: s for s in result.scenarios}


def test_extra_savings_scenarios_when_deposit_binds(deposit_bound_request):
    res = calculate_max_borrowing(deposit_bound_request)
    scenarios = _by_id(res)
    assert set(scenarios) == {"savings-20000", "savings-50000", "savings-100000"}

    plus_50k = scenarios["savings-50000"]
    assert plus_50k.category == "SAVINGS"
    assert plus_50k.input_delta == 50000
    assert plus_50k.impact >= 0
    assert plus_50k.new_max_borrowing == pytest.approx(res.max_borrowing + plus_50k.impact)


def test_savings_scenarios_are_independent(deposit_bound_request):
    scenarios = _by_id(calculate_max_borrowing(deposit_bound_request))
    impacts = [scenarios[f"savings-{n}"].impact for n in (20000, 50000, 100000)]
    assert impacts == sorted(impacts)
    assert impacts[0] > 0

    rerun = calculate_max_borrowing(deposit_bound_request.model_copy(update={"savings": 250000}), include_scenarios=False)
    assert scenarios["savings-50000"].new_max_borrowing == rerun.max_borrowing


def test_serviceability_scenarios(serviceability_bound_request):
    res = calculate_max_borrowing(serviceability_bound_request)
    scenarios = _by_id(res)
    assert set(scenarios) == {"expenses-benchmark", "credit-close"}

    expenses = scenarios["expenses-benchmark"]
    assert expenses.category == "EXPENSES"
    # 3,000 a month declared against a 555 a week benchmark
    assert expenses.input_delta == pytest.approx(36000 - 555 * 52)
    assert expenses.impact > 0

    credit = scenarios["credit-close"]
    assert credit.category == "CREDIT"
    assert credit.input_delta == 5000
    assert credit.impact > 0
    assert credit.new_max_borrowing == pytest.approx(res.max_borrowing + credit.impact)


def test_no_expense_scenario_when_under_benchmark():
    req = make_request(make_financials(salary=60000, expenses_monthly=1000), savings=300000)
    res = calculate_max_borrowing(req)
    assert res.reason == "FINANCIALS"
    assert res.scenarios == []


def test_no_scenarios_when_required_loan_is_met(deposit_bound_request):
    req = deposit_bound_request.model_copy(update={"required_loan_amount": 100000})
    assert calculate_max_borrowing(req).scenarios == []

    short = deposit_bound_request.model_copy(update={"required_loan_amount": 5000000})
    assert len(calculate_max_borrowing(short).scenarios) == 3


def test_generator_leaves_the_request_unchanged(serviceability_bound_request):
    baseline = calculate_max_borrowing(serviceability_bound_request, include_scenarios=False)
    seen = []

    def run(request):
        seen.append(request)
        return SimpleNamespace(max_borrowing=baseline.max_borrowing + 1000)

    scenarios = ScenarioGenerator().generate(serviceability_bound_request, baseline, run)
    assert [s.impact for s in scenarios] == [1000, 1000]
    assert serviceability_bound_request.financials.liabilities.credit_card_limit == 5000
    assert seen[1].financials.liabilities.credit_card_limit == 0
    assert seen[0].financials.liabilities.expenses.frequency == "monthly"
    assert seen[0].financials.liabilities.expenses.amount == pytest.approx(555 * 52 / 12)


def test_global_max_baseline_gets_nothing(deposit_bound_request):
    baseline = calculate_max_borrowing(deposit_bound_request, include_scenarios=False)
    capped = baseline.model_copy(update={"reason": "GLOBAL_MAX"})
    assert ScenarioGenerator().generate(deposit_bound_request, capped, calculate_max_borrowing) == []


def test_optional_lvr_savings_scenarios(serviceability_bound_request):
    baseline = calculate_max_borrowing(serviceability_bound_request, include_scenarios=False)
    run = lambda request: SimpleNamespace(max_borrowing=baseline.max_borrowing)
    generator = ScenarioGenerator(lvr_savings_scenarios=True)

    ids = [s.id for s in generator.generate(serviceability_bound_request, baseline, run)]
    assert not any(i.startswith("savings") for i in ids)

    higher_band = baseline.model_copy(update={"financial_band": LvrBand.BAND_70_80})
    ids = [s.id for s in generator.generate(serviceability_bound_request, higher_band, run)]
    assert "savings-20000" in ids
