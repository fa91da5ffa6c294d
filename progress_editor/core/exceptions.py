from __future__ import annotations

from typing import List

from progress_editor.validation.errors import ValidationIssue, format_issues


class ProgressEditorError(Exception):
    """Base exception for all progress_editor errors"""
    pass


# ---------------------------------------------------------------------------
# Table mutations
# ---------------------------------------------------------------------------

class DuplicateColumnName(ProgressEditorError):
    """Rename target already exists as a different header"""

    def __init__(self, name: str):
        self.name = name
        super().__init__("A column with this name already exists")


class UnknownColumn(ProgressEditorError, KeyError):
    """Header referenced by an operation is not part of the dataset"""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown column '{name}'")

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.args[0]


class RowIndexError(ProgressEditorError, IndexError):
    """Row index outside 0..len(rows)-1"""

    def __init__(self, index: int, n_rows: int):
        self.index = index
        self.n_rows = n_rows
        super().__init__(f"Row index {index} out of range (dataset has {n_rows} rows)")


class InvalidDateShift(ProgressEditorError):
    """
    Shifting the row date would collide with or cross a neighbouring row,
    breaking chronological order.
    """
    pass


# ---------------------------------------------------------------------------
# Persistence
# ---------------------------------------------------------------------------

class PersistenceError(ProgressEditorError):
    """Base for load/save failures"""
    pass


class MalformedJson(PersistenceError):
    """Input is not parseable as JSON"""
    pass


class SchemaViolation(PersistenceError):
    """
    JSON parsed but failed structural validation.
    Carries every path-qualified issue found.
    """

    def __init__(self, issues: List[ValidationIssue]):
        self.issues = issues
        super().__init__(format_issues(issues))


class ReadError(PersistenceError):
    """Underlying storage failure while reading"""
    pass


class WriteError(PersistenceError):
    """Underlying storage failure while writing"""
    pass


# ---------------------------------------------------------------------------
# Notification
# ---------------------------------------------------------------------------

class NotificationError(ProgressEditorError):
    """Publishing the dataset to the external consumer failed"""
    pass
