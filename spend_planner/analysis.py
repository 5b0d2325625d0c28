"""Statistical analysis for the Hiring Spend Planner."""

import logging
import math
from typing import Dict, List, Optional, Tuple
import numpy as np
import pandas as pd
from scipy import stats as stats_module
from scipy.optimize import curve_fit
from spend_planner.config import (
    BLEND_MIN_APPLICATIONS, BLEND_MIN_HIRES, CONFIDENCE_THRESHOLDS,
    CURVE_METHOD, DEFAULT_CONVERSION_RATE, HILL_MIN_POINTS, HIRED_STATUS,
    MAX_APPS_HEADROOM, PLACEHOLDER_R_SQUARED, RETENTION_WINDOW_DAYS
)
from spend_planner.data_loader import Record, to_float, to_int
from spend_planner.models import (
    ConversionEntry, Recommendation, RetentionCohort, RoleStateKey,
    SpendCurve, Summary
)

logger = logging.getLogger(__name__)


def calculate_confidence_interval(successes: int, trials: int,
                                  confidence: float = 0.95) -> Tuple[float, float]:
    """Wilson score interval on a hire rate; the full range when there are no applicants."""
    if trials == 0:
        return (0.0, 1.0)
    ci = stats_module.binomtest(successes, trials).proportion_ci(
        confidence_level=confidence, method="wilson"
    )
    return (float(ci.low), float(ci.high))


def get_confidence_score(applications: int, hires: int) -> str:
    """Classify sample strength as high, medium or low."""
    for level in ("high", "medium"):
        min_apps, min_hires = CONFIDENCE_THRESHOLDS[level]
        if applications >= min_apps and hires >= min_hires:
            return level
    return "low"


def get_role_average_conversion(ashby: List[Record], role: str) -> float:
    """Hire rate for a role across all states, defaulting when it is zero or undefined."""
    role_records = [r for r in ashby if r.get('role') == role]
    total_apps = len(role_records)
    total_hires = sum(1 for r in role_records if r.get('status') == HIRED_STATUS)

    if total_apps == 0 or total_hires == 0:
        return DEFAULT_CONVERSION_RATE
    return total_hires / total_apps


def calculate_conversion_rates(ashby: List[Record]) -> Dict[RoleStateKey, ConversionEntry]:
    """Compute per (role, state) conversion rates, blending small samples."""
    groups: Dict[RoleStateKey, Dict[str, int]] = {}
    for record in ashby:
        key = RoleStateKey(record.get('role', ''), record.get('state', ''))
        if key not in groups:
            groups[key] = {'applications': 0, 'hires': 0}
        groups[key]['applications'] += 1
        if record.get('status') == HIRED_STATUS:
            groups[key]['hires'] += 1

    role_averages: Dict[str, float] = {}
    rates = {}
    for key, group in groups.items():
        applications = group['applications']
        hires = group['hires']
        raw_rate = hires / applications

        blended = applications < BLEND_MIN_APPLICATIONS or hires < BLEND_MIN_HIRES
        rate = raw_rate
        if blended:
            if key.role not in role_averages:
                role_averages[key.role] = get_role_average_conversion(ashby, key.role)
            rate = (raw_rate + role_averages[key.role]) / 2

        ci_lower, ci_upper = calculate_confidence_interval(hires, applications)

        rates[key] = ConversionEntry(
            role=key.role,
            state=key.state,
            applications=applications,
            hires=hires,
            raw_rate=raw_rate,
            rate=rate,
            blended=blended,
            confidence=get_confidence_score(applications, hires),
            ci_lower=ci_lower,
            ci_upper=ci_upper
        )
        logger.debug("Conversion %s: %d/%d -> %.4f (blended=%s)",
                     key.label, hires, applications, rate, blended)

    return rates


def fit_ratio_curve(spend_data: List[float], apps_data: List[float]) -> Dict[str, float]:
    """
    Simplified saturation curve from average spend and applications.

    Efficiency is the ratio of averages; the ceiling is the best observed
    volume plus headroom and the half-saturation point is the average spend.
    Fit quality is a fixed placeholder, not derived from residuals.
    """
    avg_spend = float(np.mean(spend_data))
    avg_apps = float(np.mean(apps_data))

    return {
        'efficiency': avg_apps / avg_spend if avg_spend != 0 else math.nan,
        'max_apps': float(np.max(apps_data)) * MAX_APPS_HEADROOM,
        'half_sat': avg_spend,
        'r_squared': PLACEHOLDER_R_SQUARED
    }


def _hill(spend, max_apps, half_sat):
    return max_apps * spend / (half_sat + spend)


def fit_hill_curve(pairs: List[Tuple[float, float]]) -> Optional[Dict[str, float]]:
    """Least-squares fit of apps = max_apps * s / (half_sat + s) over date-paired points."""
    points = np.array([p for p in pairs if np.isfinite(p[0]) and np.isfinite(p[1])], dtype=float)
    if len(points) < HILL_MIN_POINTS:
        return None

    spend, apps = points[:, 0], points[:, 1]
    p0 = [apps.max() * MAX_APPS_HEADROOM, max(spend.mean(), 1.0)]
    try:
        (max_apps, half_sat), _ = curve_fit(
            _hill, spend, apps, p0=p0, bounds=([0, 1e-9], [np.inf, np.inf]), maxfev=5000
        )
    except (RuntimeError, ValueError) as e:
        logger.debug("Hill fit failed: %s", e)
        return None

    residuals = apps - _hill(spend, max_apps, half_sat)
    ss_res = float(np.sum(residuals**2))
    ss_tot = float(np.sum((apps - apps.mean())**2))
    r_squared = 1 - ss_res / ss_tot if ss_tot > 0 else 0.0

    avg_spend = float(spend.mean())
    return {
        'efficiency': float(_hill(avg_spend, max_apps, half_sat) / avg_spend) if avg_spend > 0 else math.nan,
        'max_apps': float(max_apps),
        'half_sat': float(half_sat),
        'r_squared': r_squared
    }


def fit_spend_curves(spend: List[Record], mmm: List[Record],
                     method: str = CURVE_METHOD) -> Dict[RoleStateKey, SpendCurve]:
    """Fit a spend-response curve for every (role, state) with both spend and application data."""
    groups: Dict[RoleStateKey, Dict[str, list]] = {}
    spend_by_date: Dict[Tuple[RoleStateKey, str], float] = {}
    apps_by_date: Dict[Tuple[RoleStateKey, str], float] = {}

    for record in spend:
        key = RoleStateKey(record.get('role', ''), record.get('state', ''))
        if key not in groups:
            groups[key] = {'spend': [], 'apps': [], 'pairs': []}
        amount = to_float(record.get('spend', ''))
        groups[key]['spend'].append(amount)
        date_key = (key, record.get('date', ''))
        spend_by_date[date_key] = spend_by_date.get(date_key, 0.0) + amount

    for record in mmm:
        key = RoleStateKey(record.get('role', ''), record.get('state', ''))
        if key in groups:
            apps = to_int(record.get('applications', ''))
            groups[key]['apps'].append(apps)
            date_key = (key, record.get('date', ''))
            if date_key in spend_by_date:
                apps_by_date[date_key] = apps_by_date.get(date_key, 0) + apps

    # Split rows (one per channel) are summed per date before pairing
    for date_key, apps in apps_by_date.items():
        groups[date_key[0]]['pairs'].append((spend_by_date[date_key], apps))

    curves = {}
    for key, group in groups.items():
        if not group['spend'] or not group['apps']:
            continue

        fit = None
        fit_method = 'ratio'
        n_points = len(group['spend'])
        if method == 'hill':
            fit = fit_hill_curve(group['pairs'])
            if fit is not None:
                fit_method = 'hill'
                n_points = len(group['pairs'])
            else:
                logger.info("Falling back to ratio curve for %s", key.label)
        if fit is None:
            fit = fit_ratio_curve(group['spend'], group['apps'])

        curves[key] = SpendCurve(
            role=key.role,
            state=key.state,
            method=fit_method,
            n_points=n_points,
            **fit
        )

    return curves


def analyze_retention(roster: List[Record]) -> List[RetentionCohort]:
    """Compute 90-day retention per (role, state) cohort."""
    cohorts: Dict[RoleStateKey, RetentionCohort] = {}
    window = pd.Timedelta(days=RETENTION_WINDOW_DAYS)

    for employee in roster:
        key = RoleStateKey(employee.get('role', ''), employee.get('state', ''))
        if key not in cohorts:
            cohorts[key] = RetentionCohort(role=key.role, state=key.state, total=0, retained_90=0)
        cohorts[key].total += 1

        termination = employee.get('termination_date', '')
        if not termination:
            cohorts[key].retained_90 += 1
            continue

        hire_date = pd.to_datetime(employee.get('hire_date', ''), errors='coerce', utc=True)
        term_date = pd.to_datetime(termination, errors='coerce', utc=True)
        if pd.isna(hire_date) or pd.isna(term_date):
            logger.debug("Unparseable dates for employee %s", employee.get('employee_id'))
            continue

        if term_date >= hire_date + window:
            cohorts[key].retained_90 += 1

    return list(cohorts.values())


def calculate_summary(spend: List[Record], mmm: List[Record],
                      recommendations: Optional[List[Recommendation]] = None) -> Summary:
    """Compute headline totals for the overview cards."""
    total_spend = sum(to_float(r.get('spend', '')) for r in spend)
    total_applications = sum(to_int(r.get('applications', '')) for r in mmm)
    hiring_gap = sum(rec.gap for rec in recommendations) if recommendations else 0

    return Summary(
        total_spend=total_spend,
        total_applications=total_applications,
        cost_per_app=total_spend / total_applications if total_applications > 0 else 0,
        hiring_gap=hiring_gap
    )
