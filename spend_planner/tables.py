"""DataFrame views of analysis results for the dashboard tables."""

import pandas as pd
from spend_planner.models import AnalysisResult


def recommendations_frame(result: AnalysisResult) -> pd.DataFrame:
    rows = [{
        'Role': r.role,
        'State': r.state,
        'Gap': r.gap,
        'Target Apps': r.target_apps,
        'Spend Needed': r.spend_needed,
        'Current Spend': r.current_spend,
        'Change %': r.change_percent,
        'Recommendation': r.recommendation,
        'Confidence': r.confidence
    } for r in result.recommendations]
    return pd.DataFrame(rows, columns=[
        'Role', 'State', 'Gap', 'Target Apps', 'Spend Needed',
        'Current Spend', 'Change %', 'Recommendation', 'Confidence'
    ])


def conversion_frame(result: AnalysisResult) -> pd.DataFrame:
    rows = [{
        'Role': e.role,
        'State': e.state,
        'Applications': e.applications,
        'Hires': e.hires,
        'Raw Rate': e.raw_rate,
        'Rate': e.rate,
        'Blended': e.blended,
        'CI Lower': e.ci_lower,
        'CI Upper': e.ci_upper,
        'Confidence': e.confidence
    } for e in result.conversion_rates.values()]
    return pd.DataFrame(rows, columns=[
        'Role', 'State', 'Applications', 'Hires', 'Raw Rate', 'Rate',
        'Blended', 'CI Lower', 'CI Upper', 'Confidence'
    ])


def curves_frame(result: AnalysisResult) -> pd.DataFrame:
    rows = [{
        'Role': c.role,
        'State': c.state,
        'Method': c.method,
        'Efficiency': c.efficiency,
        'Max Apps': c.max_apps,
        'Half Saturation': c.half_sat,
        'R²': c.r_squared,
        'Points': c.n_points
    } for c in result.spend_curves.values()]
    return pd.DataFrame(rows, columns=[
        'Role', 'State', 'Method', 'Efficiency', 'Max Apps',
        'Half Saturation', 'R²', 'Points'
    ])


def retention_frame(result: AnalysisResult) -> pd.DataFrame:
    rows = [{
        'Role': c.role,
        'State': c.state,
        'Headcount': c.total,
        'Retained 90d': c.retained_90,
        'Retention': c.retention_rate,
        'vs Benchmark': c.vs_benchmark
    } for c in (result.retention or [])]
    return pd.DataFrame(rows, columns=[
        'Role', 'State', 'Headcount', 'Retained 90d', 'Retention', 'vs Benchmark'
    ])
