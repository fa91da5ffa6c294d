from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, List, Optional

from progress_editor.core.dataset import Dataset, Row, parse_date
from progress_editor.core.exceptions import SchemaViolation
from progress_editor.validation.errors import ValidationIssue


@dataclass
class SchemaResult:
    """
    Tagged outcome of structural validation.

    Exactly one of `dataset` / `issues` is meaningful:
    - ok: dataset holds the typed Dataset (rows may carry hidden=None)
    - failure: issues lists every violation found
    """
    dataset: Optional[Dataset] = None
    issues: List[ValidationIssue] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.issues

    def raise_for_issues(self) -> Dataset:
        if self.issues:
            raise SchemaViolation(self.issues)
        return self.dataset


def _join(*parts: Any) -> str:
    return ".".join(str(p) for p in parts)


def _is_number(value: Any) -> bool:
    # JSON true/false parse to bool, which is an int subclass
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_finite(value: float) -> bool:
    # integer literals beyond float range overflow instead of becoming inf
    try:
        return math.isfinite(float(value))
    except OverflowError:
        return False


def _check_row(i: int, raw_row: Any, issues: List[ValidationIssue]) -> Optional[Row]:
    path = _join("rows", i)
    if not isinstance(raw_row, dict):
        issues.append(ValidationIssue(path, "Expected object"))
        return None

    n_before = len(issues)

    date_value = raw_row.get("date")
    if date_value is None:
        issues.append(ValidationIssue(_join(path, "date"), "Required"))
    elif not isinstance(date_value, str):
        issues.append(ValidationIssue(_join(path, "date"), "Expected string"))
    else:
        try:
            parse_date(date_value)
        except ValueError:
            issues.append(
                ValidationIssue(_join(path, "date"), f"Invalid date '{date_value}', expected YYYY-MM-DD")
            )

    values = raw_row.get("values")
    if values is None:
        issues.append(ValidationIssue(_join(path, "values"), "Required"))
    elif not isinstance(values, dict):
        issues.append(ValidationIssue(_join(path, "values"), "Expected object"))
    else:
        for key, value in values.items():
            if not _is_number(value):
                issues.append(ValidationIssue(_join(path, "values", key), "Expected number"))
            elif not _is_finite(value):
                # json.loads accepts the NaN and Infinity literals
                issues.append(ValidationIssue(_join(path, "values", key), "Expected finite number"))

    hidden = raw_row.get("hidden")
    if hidden is not None and not isinstance(hidden, bool):
        issues.append(ValidationIssue(_join(path, "hidden"), "Expected boolean"))

    if len(issues) != n_before:
        return None

    return Row(
        date=date_value,
        values={k: float(v) for k, v in values.items()},
        hidden=hidden,
    )


def validate_dataset_dict(raw: Any) -> SchemaResult:
    """
    Structurally validate a parsed JSON document.

    Collects every violation instead of stopping at the first one. Only the
    shape is checked here: value keys vs headers and date ordering are left to
    the normaliser and the table engine.
    """
    if not isinstance(raw, dict):
        return SchemaResult(issues=[ValidationIssue("", "Expected object at document root")])

    issues: List[ValidationIssue] = []

    headers = raw.get("headers")
    if headers is None:
        issues.append(ValidationIssue("headers", "Required"))
    elif not isinstance(headers, list):
        issues.append(ValidationIssue("headers", "Expected array"))
    else:
        for i, h in enumerate(headers):
            if not isinstance(h, str):
                issues.append(ValidationIssue(_join("headers", i), "Expected string"))

    rows_raw = raw.get("rows")
    rows: List[Row] = []
    if rows_raw is None:
        issues.append(ValidationIssue("rows", "Required"))
    elif not isinstance(rows_raw, list):
        issues.append(ValidationIssue("rows", "Expected array"))
    else:
        for i, raw_row in enumerate(rows_raw):
            row = _check_row(i, raw_row, issues)
            if row is not None:
                rows.append(row)

    if issues:
        return SchemaResult(issues=issues)

    return SchemaResult(dataset=Dataset(headers=tuple(headers), rows=tuple(rows)))
