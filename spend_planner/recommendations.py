"""Recommendation generation for the Hiring Spend Planner."""

import logging
import math
from typing import Dict, List
import numpy as np
from spend_planner.config import (
    CHANGE_THRESHOLD_PCT, CHURN_MONTHS, DEFAULT_CONVERSION_RATE,
    HILL_SATURATION_CAP, MONTHLY_CHURN
)
from spend_planner.data_loader import Record, to_float, to_int
from spend_planner.models import (
    ConversionEntry, Recommendation, RoleStateKey, SpendCurve
)

logger = logging.getLogger(__name__)


def _round_half_up(value: float) -> int:
    """Round half up to a whole number; non-finite values become 0."""
    if not math.isfinite(value):
        return 0
    return int(math.floor(value + 0.5))


def churn_adjusted_staff(hires_signed: float) -> int:
    """Signed hires expected to still be on staff after the churn window."""
    return int(math.floor(hires_signed * (1 - MONTHLY_CHURN) ** CHURN_MONTHS))


def recommendation_label(change_percent: float) -> str:
    """Increase or decrease when spend must move by more than the threshold."""
    if change_percent > CHANGE_THRESHOLD_PCT:
        return 'increase'
    if change_percent < -CHANGE_THRESHOLD_PCT:
        return 'decrease'
    return 'maintain'


def spend_for_applications(curve: SpendCurve, target_apps: int) -> float:
    """
    Spend expected to produce target_apps under a fitted curve.

    Ratio curves are linear in efficiency. Hill curves are inverted,
    s = half_sat * a / (max_apps - a), with the target capped just below
    the ceiling since the curve never reaches it.
    """
    if target_apps <= 0:
        return 0.0

    if curve.method == 'hill' and curve.max_apps > 0:
        apps = min(target_apps, curve.max_apps * HILL_SATURATION_CAP)
        if apps < target_apps:
            logger.warning("%s needs %d applications, above the %.0f ceiling; planning for %.0f",
                           curve.key.label, target_apps, curve.max_apps, apps)
        return curve.half_sat * apps / (curve.max_apps - apps)

    if not math.isfinite(curve.efficiency) or curve.efficiency <= 0:
        return 0.0
    return target_apps / curve.efficiency


def current_spend_for(spend: List[Record], key: RoleStateKey) -> float:
    """Mean spend for a (role, state), 0 when it has no spend rows."""
    amounts = [
        to_float(s.get('spend', ''))
        for s in spend
        if s.get('role') == key.role and s.get('state') == key.state
    ]
    if not amounts:
        return 0.0
    return float(np.mean(amounts))


def generate_recommendations(headcount: List[Record],
                             conversion_rates: Dict[RoleStateKey, ConversionEntry],
                             spend_curves: Dict[RoleStateKey, SpendCurve],
                             spend: List[Record]) -> List[Recommendation]:
    """Turn headcount targets into per-(role, state) spend recommendations."""
    recommendations = []

    for target in headcount:
        key = RoleStateKey(target.get('role', ''), target.get('state', ''))
        entry = conversion_rates.get(key)
        conversion_rate = entry.rate if entry and entry.rate > 0 else DEFAULT_CONVERSION_RATE
        curve = spend_curves.get(key)

        hires_signed = to_int(target.get('hires_signed', ''))
        forecast = to_int(target.get('forecast_headcount', ''))
        if math.isnan(hires_signed) or math.isnan(forecast):
            logger.warning("Non-numeric headcount target for %s, treating gap as 0", key.label)
            gap = 0
        else:
            gap = max(0, forecast - churn_adjusted_staff(hires_signed))

        target_apps = math.ceil(gap / conversion_rate)

        spend_needed = spend_for_applications(curve, target_apps) if curve else 0.0

        current_spend = current_spend_for(spend, key)
        change_percent = 0.0
        if current_spend > 0:
            change_percent = (spend_needed - current_spend) / current_spend * 100

        recommendations.append(Recommendation(
            role=key.role,
            state=key.state,
            gap=gap,
            target_apps=target_apps,
            spend_needed=_round_half_up(spend_needed),
            current_spend=_round_half_up(current_spend),
            change_percent=_round_half_up(change_percent),
            recommendation=recommendation_label(change_percent),
            confidence=entry.confidence if entry else 'low'
        ))

    return recommendations
