"""Configuration constants for the Hiring Spend Planner."""

DATASET_SCHEMAS = {
    "mmm": ["date", "role", "state", "applications"],
    "ashby": ["candidate_id", "role", "state", "applied_at", "hired_at", "status"],
    "spend": ["date", "role", "state", "spend"],
    "headcount": ["month", "role", "state", "forecast_headcount", "hires_signed"],
    "roster": ["employee_id", "role", "state", "hire_date", "termination_date"],
}

REQUIRED_DATASETS = ["mmm", "ashby", "spend", "headcount"]
OPTIONAL_DATASETS = ["roster"]

NUMERIC_COLUMNS = {
    "mmm": ["applications"],
    "spend": ["spend"],
    "headcount": ["forecast_headcount", "hires_signed"],
}

HIRED_STATUS = "hired"

# Small-sample blending
BLEND_MIN_APPLICATIONS = 30
BLEND_MIN_HIRES = 5
DEFAULT_CONVERSION_RATE = 0.02

CONFIDENCE_THRESHOLDS = {
    "high": (100, 10),
    "medium": (30, 5),
}

# Spend curves
MAX_APPS_HEADROOM = 1.2
PLACEHOLDER_R_SQUARED = 0.75
CURVE_METHOD = "ratio"
HILL_MIN_POINTS = 3
# Targets at or past the fitted ceiling are planned at this share of it
HILL_SATURATION_CAP = 0.95

# Attrition: 8% per month over a 3 month window
MONTHLY_CHURN = 0.08
CHURN_MONTHS = 3

CHANGE_THRESHOLD_PCT = 5

RETENTION_WINDOW_DAYS = 90
RETENTION_BENCHMARK = 0.78
