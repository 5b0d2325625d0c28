import pytest

from spend_planner.analysis import calculate_conversion_rates, fit_spend_curves
from spend_planner.models import ConversionEntry, RoleStateKey, SpendCurve
from spend_planner.recommendations import (
    churn_adjusted_staff, current_spend_for, generate_recommendations,
    recommendation_label, spend_for_applications
)


@pytest.fixture
def recs(ashby, spend, mmm, headcount):
    rates = calculate_conversion_rates(ashby)
    curves = fit_spend_curves(spend, mmm)
    return generate_recommendations(headcount, rates, curves, spend)


def test_churn_adjusted_staff():
    assert churn_adjusted_staff(10) == 7
    assert churn_adjusted_staff(0) == 0


def test_gap_and_spend_for_engineers(recs):
    rec = recs[0]

    assert (rec.role, rec.state) == ('Engineer', 'CA')
    assert rec.gap == 43
    assert rec.target_apps == 287
    assert rec.spend_needed == 7175
    assert rec.current_spend == 1500
    assert rec.change_percent == 378
    assert rec.recommendation == 'increase'
    assert rec.confidence == 'medium'


def test_overstaffed_target_has_zero_gap(recs):
    rec = recs[1]

    assert rec.gap == 0
    assert rec.target_apps == 0
    assert rec.spend_needed == 0
    assert rec.change_percent == -100
    assert rec.recommendation == 'decrease'
    assert rec.confidence == 'high'


def test_unknown_group_uses_defaults(recs):
    rec = recs[2]

    assert rec.gap == 3
    assert rec.target_apps == 150
    assert rec.current_spend == 0
    assert rec.change_percent == 0
    assert rec.recommendation == 'maintain'
    assert rec.confidence == 'low'


def test_order_follows_headcount_rows(recs, headcount):
    assert [(r.role, r.state) for r in recs] == [(h['role'], h['state']) for h in headcount]


@pytest.mark.parametrize("forecast,signed", [("0", "100"), ("5", "5"), ("-3", "0"), ("x", "2")])
def test_gap_is_never_negative(forecast, signed):
    headcount = [{'month': 'm', 'role': 'r', 'state': 's',
                  'forecast_headcount': forecast, 'hires_signed': signed}]
    rec = generate_recommendations(headcount, {}, {}, [])[0]

    assert rec.gap >= 0


def test_zero_rate_and_zero_efficiency_are_guarded():
    key = RoleStateKey('r', 's')
    rates = {key: ConversionEntry('r', 's', 10, 0, 0.0, 0.0, True, 'low', 0.0, 0.3)}
    curves = {key: SpendCurve('r', 's', 0.0, 0.0, 100.0, 0.75)}
    spend = [{'date': 'd', 'role': 'r', 'state': 's', 'spend': '100'}]
    headcount = [{'month': 'm', 'role': 'r', 'state': 's',
                  'forecast_headcount': '2', 'hires_signed': '0'}]

    rec = generate_recommendations(headcount, rates, curves, spend)[0]

    assert rec.target_apps == 100
    assert rec.spend_needed == 0
    assert rec.recommendation == 'decrease'


@pytest.mark.parametrize("change,label", [
    (5.1, 'increase'), (5, 'maintain'), (0, 'maintain'), (-5, 'maintain'), (-5.1, 'decrease')
])
def test_recommendation_label(change, label):
    assert recommendation_label(change) == label


def test_current_spend_is_mean_of_matching_rows(spend):
    assert current_spend_for(spend, RoleStateKey('Engineer', 'CA')) == 1500
    assert current_spend_for(spend, RoleStateKey('Engineer', 'TX')) == 0


def test_hill_curve_is_inverted_for_spend():
    curve = SpendCurve('r', 's', 0.1, 200.0, 800.0, 0.99, method='hill')

    assert spend_for_applications(curve, 100) == pytest.approx(800)
    assert spend_for_applications(curve, 0) == 0


def test_hill_target_past_ceiling_is_capped():
    curve = SpendCurve('r', 's', 0.1, 200.0, 800.0, 0.99, method='hill')

    assert spend_for_applications(curve, 500) == pytest.approx(800 * 190 / 10)
    assert spend_for_applications(curve, 500) == spend_for_applications(curve, 190)


def test_ratio_curve_spend_is_linear():
    curve = SpendCurve('r', 's', 0.04, 84.0, 1500.0, 0.75)

    assert spend_for_applications(curve, 287) == pytest.approx(7175)
