"""CSV loading and validation for the Hiring Spend Planner."""

import logging
import math
import re
from typing import Dict, List, Optional, Tuple
from spend_planner.config import DATASET_SCHEMAS, NUMERIC_COLUMNS
from spend_planner.models import ValidationResult

logger = logging.getLogger(__name__)

Record = Dict[str, str]

_FLOAT_PREFIX = re.compile(r"^\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")
_INT_PREFIX = re.compile(r"^\s*[+-]?\d+")


def to_float(value: str) -> float:
    """Parse the leading numeric part of a cell, NaN if there is none."""
    match = _FLOAT_PREFIX.match(value or "")
    if not match:
        return math.nan
    return float(match.group(0))


def to_int(value: str) -> float:
    """Parse the leading integer part of a cell ("12.7" -> 12), NaN if there is none."""
    match = _INT_PREFIX.match(value or "")
    if not match:
        return math.nan
    return int(match.group(0))


def parse_csv_text(text: str) -> List[Record]:
    """Parse comma-delimited text into records keyed by the header row.

    No quoting or escaping is supported. Cells are whitespace-trimmed and
    missing trailing fields become empty strings.
    """
    lines = [line for line in text.strip().split("\n") if line.strip()]
    if not lines:
        return []

    headers = [h.strip() for h in lines[0].split(",")]
    records = []
    for line in lines[1:]:
        values = line.split(",")
        records.append({
            header: values[i].strip() if i < len(values) else ""
            for i, header in enumerate(headers)
        })
    return records


def count_numeric_issues(name: str, records: List[Record]) -> int:
    """Count cells in numeric columns that will not parse as numbers."""
    columns = NUMERIC_COLUMNS.get(name, [])
    return sum(
        1
        for record in records
        for column in columns
        if math.isnan(to_float(record.get(column, "")))
    )


def validate_dataset(name: str, records: List[Record]) -> ValidationResult:
    """Validate parsed records against the dataset's required columns."""
    if name not in DATASET_SCHEMAS:
        return ValidationResult(dataset=name, ok=False, message=f"Unknown dataset '{name}'")

    if not records:
        return ValidationResult(dataset=name, ok=False, message="File is empty or has no data rows")

    required = DATASET_SCHEMAS[name]
    missing = [column for column in required if column not in records[0]]
    if missing:
        return ValidationResult(
            dataset=name,
            ok=False,
            row_count=len(records),
            missing_columns=missing,
            message=f"Missing required column(s): {', '.join(missing)}"
        )

    issues = count_numeric_issues(name, records)
    message = f"{len(records)} rows loaded"
    if issues:
        message += f" ({issues} non-numeric values)"

    return ValidationResult(
        dataset=name,
        ok=True,
        row_count=len(records),
        numeric_issues=issues,
        message=message
    )


def load_dataset(name: str, text: str) -> Tuple[Optional[List[Record]], ValidationResult]:
    """Parse and validate uploaded CSV text for one dataset slot."""
    records = parse_csv_text(text)
    result = validate_dataset(name, records)

    if not result.ok:
        logger.warning("Rejected %s upload: %s", name, result.message)
        return None, result

    if result.numeric_issues:
        logger.warning("%s has %d non-numeric values in numeric columns", name, result.numeric_issues)
    logger.info("Loaded %s: %d rows", name, result.row_count)
    return records, result
