"""Data models for the Hiring Spend Planner."""

from dataclasses import dataclass, field
from typing import Dict, List, NamedTuple, Optional
from spend_planner.config import RETENTION_BENCHMARK


class RoleStateKey(NamedTuple):
    role: str
    state: str

    @property
    def label(self) -> str:
        return f"{self.role}|{self.state}"


@dataclass
class ValidationResult:
    dataset: str
    ok: bool
    row_count: int = 0
    missing_columns: List[str] = field(default_factory=list)
    numeric_issues: int = 0
    message: str = ""


@dataclass
class ConversionEntry:
    role: str
    state: str
    applications: int
    hires: int
    raw_rate: float
    rate: float
    blended: bool
    confidence: str
    ci_lower: float
    ci_upper: float

    @property
    def key(self) -> RoleStateKey:
        return RoleStateKey(self.role, self.state)


@dataclass
class SpendCurve:
    role: str
    state: str
    efficiency: float
    max_apps: float
    half_sat: float
    r_squared: float
    method: str = "ratio"
    n_points: int = 0

    @property
    def key(self) -> RoleStateKey:
        return RoleStateKey(self.role, self.state)


@dataclass
class Recommendation:
    role: str
    state: str
    gap: int
    target_apps: int
    spend_needed: int
    current_spend: int
    change_percent: int
    recommendation: str
    confidence: str


@dataclass
class RetentionCohort:
    role: str
    state: str
    total: int
    retained_90: int

    @property
    def retention_rate(self) -> float:
        return self.retained_90 / self.total

    @property
    def vs_benchmark(self) -> float:
        return self.retention_rate - RETENTION_BENCHMARK


@dataclass
class Summary:
    total_spend: float
    total_applications: float
    cost_per_app: float
    hiring_gap: int


@dataclass
class AnalysisResult:
    conversion_rates: Dict[RoleStateKey, ConversionEntry]
    spend_curves: Dict[RoleStateKey, SpendCurve]
    recommendations: List[Recommendation]
    retention: Optional[List[RetentionCohort]]
    summary: Summary
