from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ValidationIssue:
    """
    A single structural violation.

    - path: dotted field path, e.g. "rows.2.values.Lab 1" ("" for the document root)
    - message: human-readable description
    """
    path: str
    message: str

    def format(self) -> str:
        return f"{self.path}: {self.message}" if self.path else self.message


def format_issues(issues: list[ValidationIssue]) -> str:
    return "\n".join(i.format() for i in issues)
