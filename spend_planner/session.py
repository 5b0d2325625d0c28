"""Session state and the analyze action for the Hiring Spend Planner."""

import logging
from typing import Dict, List, Optional, Tuple
from spend_planner.analysis import (
    analyze_retention, calculate_conversion_rates, calculate_summary,
    fit_spend_curves
)
from spend_planner.config import CURVE_METHOD, DATASET_SCHEMAS, REQUIRED_DATASETS
from spend_planner.data_loader import Record, load_dataset
from spend_planner.models import AnalysisResult, ValidationResult
from spend_planner.recommendations import generate_recommendations

logger = logging.getLogger(__name__)


def perform_analysis(data: Dict[str, Optional[List[Record]]],
                     curve_method: str = CURVE_METHOD) -> AnalysisResult:
    """Run the full pipeline over loaded datasets. Pure in its inputs."""
    conversion_rates = calculate_conversion_rates(data['ashby'])
    spend_curves = fit_spend_curves(data['spend'], data['mmm'], method=curve_method)
    recommendations = generate_recommendations(
        data['headcount'], conversion_rates, spend_curves, data['spend']
    )
    retention = analyze_retention(data['roster']) if data.get('roster') else None

    return AnalysisResult(
        conversion_rates=conversion_rates,
        spend_curves=spend_curves,
        recommendations=recommendations,
        retention=retention,
        summary=calculate_summary(data['spend'], data['mmm'], recommendations)
    )


class AnalysisSession:
    """Dataset slots plus the most recent analysis result."""

    def __init__(self, curve_method: str = CURVE_METHOD):
        self.curve_method = curve_method
        self.data: Dict[str, Optional[List[Record]]] = {name: None for name in DATASET_SCHEMAS}
        self.statuses: Dict[str, ValidationResult] = {}
        self.result: Optional[AnalysisResult] = None

    def load(self, name: str, text: str) -> ValidationResult:
        records, status = load_dataset(name, text)
        if name in self.data:
            self.data[name] = records
        self.statuses[name] = status
        return status

    def missing_required(self) -> List[str]:
        return [name for name in REQUIRED_DATASETS if self.data[name] is None]

    @property
    def ready(self) -> bool:
        return not self.missing_required()

    def analyze(self) -> Tuple[Optional[AnalysisResult], Optional[str]]:
        """
        Run the pipeline and replace the current result.

        Returns:
            Tuple of (result, error_message). On failure the previous
            result is left in place.
        """
        missing = self.missing_required()
        if missing:
            return None, f"Missing required datasets: {', '.join(missing)}"

        try:
            result = perform_analysis(self.data, curve_method=self.curve_method)
        except Exception as e:
            logger.exception("Analysis failed")
            return None, f"Error during analysis: {e}"

        self.result = result
        logger.info(
            "Analysis complete: %d conversion groups, %d curves, %d recommendations",
            len(result.conversion_rates), len(result.spend_curves), len(result.recommendations)
        )
        return result, None

    def reset(self) -> None:
        self.data = {name: None for name in DATASET_SCHEMAS}
        self.statuses = {}
        self.result = None
