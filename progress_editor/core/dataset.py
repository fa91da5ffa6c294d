from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, Optional, Tuple

import pandas as pd

DATE_FORMAT = "%Y-%m-%d"

# Seed date used when the first row is added to an empty table
SEED_DATE = "2027-10-14"


def parse_date(text: str) -> date:
    """Parse a canonical ``YYYY-MM-DD`` string. Raises ValueError otherwise."""
    parsed = datetime.strptime(text, DATE_FORMAT).date()
    # strptime also takes unpadded months/days (2027-1-5)
    if format_date(parsed) != text:
        raise ValueError(f"date {text!r} is not in YYYY-MM-DD form")
    return parsed


def format_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)


def add_months(text: str, months: int) -> str:
    """
    Calendar-month addition on an ISO date string.

    Lands on the last valid day of the target month when the source day does
    not exist there (2027-01-31 + 1 month -> 2027-02-28).
    """
    shifted = pd.Timestamp(parse_date(text)) + pd.DateOffset(months=months)
    return format_date(shifted.date())


@dataclass(frozen=True)
class Row:
    """
    One chronological sample.

    - date: canonical ISO date string (YYYY-MM-DD)
    - values: column name -> multiplier; key set mirrors Dataset.headers
    - hidden: de-emphasised in the view; None only between validation and
      normalisation (absent in the source document)
    """

    date: str
    values: Dict[str, float] = field(default_factory=dict)
    hidden: Optional[bool] = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date,
            "values": dict(self.values),
            "hidden": bool(self.hidden),
        }


@dataclass(frozen=True)
class Dataset:
    """
    Immutable snapshot of the table.

    Mutations never touch an existing snapshot; the TableEngine builds a new
    Dataset for every committed change.
    """

    headers: Tuple[str, ...] = ()
    rows: Tuple[Row, ...] = ()

    def __post_init__(self) -> None:
        # Accept lists from callers, store tuples
        object.__setattr__(self, "headers", tuple(self.headers))
        object.__setattr__(self, "rows", tuple(self.rows))

    @property
    def last_row(self) -> Optional[Row]:
        return self.rows[-1] if self.rows else None

    def to_dict(self) -> Dict[str, Any]:
        """Plain dict in the persisted JSON shape."""
        return {
            "headers": list(self.headers),
            "rows": [row.to_dict() for row in self.rows],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Dataset:
        """
        Rebuild a Dataset from an already-validated dict.

        No structural checks happen here; run validate_dataset_dict first for
        untrusted input.
        """
        return cls(
            headers=tuple(data.get("headers", [])),
            rows=tuple(
                Row(
                    date=r["date"],
                    values={k: float(v) for k, v in r.get("values", {}).items()},
                    hidden=r.get("hidden"),
                )
                for r in data.get("rows", [])
            ),
        )

