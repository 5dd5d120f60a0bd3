from conftest import make_financials, make_request
from maxborrow.config import AssessmentPolicy
from maxborrow.orchestrator import calculate_max_borrowing
from maxborrow.rules import evaluate_rules, explain


def _codes(result, **kwargs):
    return {r.code for r in evaluate_rules(result, **kwargs)}


def test_global_max_reached(deposit_bound_request):
    res = calculate_max_borrowing(
        deposit_bound_request,
        policy=AssessmentPolicy(global_max_borrowing=500000),
        include_scenarios=False,
    )
    assert "GLOBAL_MAX_REACHED" in _codes(res)
    assert "$500,000" in explain(res)


def test_unserviceable_is_critical():
    res = calculate_max_borrowing(
        make_request(make_financials(salary=30000, expenses_monthly=5000)),
        include_scenarios=False,
    )
    rules = {r.code: r for r in evaluate_rules(res)}
    assert rules["UNSERVICEABLE"].severity == "critical"
    assert "income does not" in explain(res).lower()


def test_financial_band_fallback_flagged(deposit_bound_request):
    res = calculate_max_borrowing(deposit_bound_request, include_scenarios=False)
    codes = _codes(res)
    assert "FINANCIAL_BAND_FALLBACK" in codes
    assert "DEPOSIT_BAND_MISMATCH" not in codes
    assert "deposit" in explain(res)


def test_required_loan_shortfall(deposit_bound_request):
    res = calculate_max_borrowing(deposit_bound_request, include_scenarios=False)
    assert "REQUIRED_LOAN_SHORTFALL" in _codes(res, required_loan_amount=res.max_borrowing + 1)
    assert "REQUIRED_LOAN_SHORTFALL" not in _codes(res, required_loan_amount=res.max_borrowing)


def test_serviceability_explanation(serviceability_bound_request):
    res = calculate_max_borrowing(serviceability_bound_request, include_scenarios=False)
    assert "income can repay" in explain(res)
    assert "0-50%" in explain(res)


def test_package_exports_explanation_helpers():
    import maxborrow

    assert maxborrow.evaluate_rules is evaluate_rules
    assert maxborrow.explain is explain
    assert "capture_trace" in maxborrow.__all__
