from __future__ import annotations

import functools
import logging
import math
import threading
from typing import Callable, Dict, List, Optional

from progress_editor.core.dataset import SEED_DATE, Dataset, Row, add_months, parse_date
from progress_editor.core.defaults import default_dataset
from progress_editor.core.exceptions import (
    DuplicateColumnName,
    InvalidDateShift,
    RowIndexError,
    UnknownColumn,
)
from progress_editor.core.state import EditorState

logger = logging.getLogger(__name__)

CommitListener = Callable[[Dataset], None]

NEW_COLUMN_VALUE = 1.0
ROW_STEP_MONTHS = 3


def _atomic(method):
    """Run a read-build-commit operation under the engine lock."""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            return method(self, *args, **kwargs)

    return wrapper


class TableEngine:
    """
    Owns the structural operations on the current dataset.

    Every public mutation:
    - builds a complete new Dataset from the current snapshot
    - either commits it (replacing EditorState.dataset and notifying the
      commit listener) or raises before anything is committed

    The engine does not do I/O; persistence and publishing happen in the
    commit listener (see ChangeNotifier).

    Each operation holds a re-entrant lock from reading the snapshot until
    the commit listener returns (Dash callbacks run on server threads).
    """

    def __init__(self, state: EditorState, on_commit: Optional[CommitListener] = None):
        self.state = state
        self._on_commit = on_commit
        self._lock = threading.RLock()

    @property
    def dataset(self) -> Dataset:
        return self.state.dataset

    def set_commit_listener(self, listener: Optional[CommitListener]) -> None:
        self._on_commit = listener

    def _commit(self, new: Dataset, op: str) -> Dataset:
        self.state.dataset = new
        logger.debug("commit", extra={"op": op, "n_rows": len(new.rows), "n_headers": len(new.headers)})
        if self._on_commit is not None:
            self._on_commit(new)
        return new

    def _check_index(self, index: int) -> Row:
        rows = self.dataset.rows
        # no negative wrap-around: -1 is a caller bug, not "last row"
        if not isinstance(index, int) or index < 0 or index >= len(rows):
            raise RowIndexError(index, len(rows))
        return rows[index]

    def _replace_row(self, index: int, row: Row) -> Dataset:
        rows = list(self.dataset.rows)
        rows[index] = row
        return Dataset(headers=self.dataset.headers, rows=tuple(rows))

    # ------------------------------------------------------------------
    # Whole-dataset operations
    # ------------------------------------------------------------------
    @_atomic
    def replace(self, dataset: Dataset) -> Dataset:
        """Commit an externally produced snapshot (file load, cache restore)."""
        return self._commit(dataset, "replace")

    @_atomic
    def reset_to_default(self) -> Dataset:
        """Discard the current table in favour of the built-in snapshot."""
        return self._commit(default_dataset(), "reset_to_default")

    # ------------------------------------------------------------------
    # Rows
    # ------------------------------------------------------------------
    @_atomic
    def add_row(self) -> Dataset:
        """
        Append a row.

        - empty table: one visible row at the seed date, every column 1.0
        - otherwise: 3 calendar months after the last row, same values as the
          last row, hidden
        """
        ds = self.dataset
        last = ds.last_row
        if last is None:
            row = Row(
                date=SEED_DATE,
                values={h: NEW_COLUMN_VALUE for h in ds.headers},
                hidden=False,
            )
        else:
            row = Row(
                date=add_months(last.date, ROW_STEP_MONTHS),
                values=dict(last.values),
                hidden=True,
            )
        return self._commit(Dataset(headers=ds.headers, rows=ds.rows + (row,)), "add_row")

    @_atomic
    def remove_row(self, index: int) -> Dataset:
        self._check_index(index)
        rows = self.dataset.rows
        return self._commit(
            Dataset(headers=self.dataset.headers, rows=rows[:index] + rows[index + 1:]),
            "remove_row",
        )

    @_atomic
    def toggle_row_hidden(self, index: int) -> Dataset:
        row = self._check_index(index)
        flipped = Row(date=row.date, values=dict(row.values), hidden=not row.hidden)
        return self._commit(self._replace_row(index, flipped), "toggle_row_hidden")

    @_atomic
    def can_shift_row_date(self, index: int, months: int) -> bool:
        """
        True if moving the row by `months` keeps it strictly between its
        neighbours. Used by the presentation layer to disable the arrows.
        """
        try:
            self._shifted_date(index, months)
        except (InvalidDateShift, RowIndexError):
            return False
        return True

    def _shifted_date(self, index: int, months: int) -> str:
        if months not in (1, -1):
            raise InvalidDateShift(f"Rows move one month at a time, got {months}")

        row = self._check_index(index)
        rows = self.dataset.rows
        new_date = add_months(row.date, months)
        new_day = parse_date(new_date)

        if months < 0 and index > 0 and new_day <= parse_date(rows[index - 1].date):
            raise InvalidDateShift(
                f"Cannot move {row.date} to {new_date}: previous row is dated {rows[index - 1].date}"
            )
        if months > 0 and index < len(rows) - 1 and new_day >= parse_date(rows[index + 1].date):
            raise InvalidDateShift(
                f"Cannot move {row.date} to {new_date}: next row is dated {rows[index + 1].date}"
            )
        return new_date

    @_atomic
    def shift_row_date(self, index: int, months: int) -> Dataset:
        """Move a row one calendar month earlier (-1) or later (+1)."""
        new_date = self._shifted_date(index, months)
        row = self.dataset.rows[index]
        moved = Row(date=new_date, values=dict(row.values), hidden=row.hidden)
        return self._commit(self._replace_row(index, moved), "shift_row_date")

    # ------------------------------------------------------------------
    # Cells
    # ------------------------------------------------------------------
    @_atomic
    def set_cell_value(self, index: int, header: str, raw: str) -> Dataset:
        """
        Store `raw` parsed as float. Unparseable input is kept as NaN until the
        dataset is normalised for persistence; no range check here.
        """
        row = self._check_index(index)
        if header not in self.dataset.headers:
            raise UnknownColumn(header)

        value = parse_cell(raw)
        values = dict(row.values)
        values[header] = value
        updated = Row(date=row.date, values=values, hidden=row.hidden)
        return self._commit(self._replace_row(index, updated), "set_cell_value")

    # ------------------------------------------------------------------
    # Columns
    # ------------------------------------------------------------------
    @_atomic
    def add_column(self) -> Dataset:
        """
        Append "Lab {n+1}" (n = current column count) set to 1.0 on every row.

        The generated name is not re-checked against renamed columns.
        """
        ds = self.dataset
        name = f"Lab {len(ds.headers) + 1}"
        rows = tuple(
            Row(date=r.date, values={**r.values, name: NEW_COLUMN_VALUE}, hidden=r.hidden)
            for r in ds.rows
        )
        return self._commit(Dataset(headers=ds.headers + (name,), rows=rows), "add_column")

    @_atomic
    def remove_column(self, name: str) -> Dataset:
        ds = self.dataset
        if name not in ds.headers:
            return ds

        rows = tuple(
            Row(date=r.date, values={k: v for k, v in r.values.items() if k != name}, hidden=r.hidden)
            for r in ds.rows
        )
        headers = tuple(h for h in ds.headers if h != name)
        return self._commit(Dataset(headers=headers, rows=rows), "remove_column")

    @_atomic
    def rename_column(self, old: str, new: str) -> Dataset:
        ds = self.dataset
        if old == new:
            return ds
        if new in ds.headers:
            raise DuplicateColumnName(new)
        if old not in ds.headers:
            raise UnknownColumn(old)

        headers = tuple(new if h == old else h for h in ds.headers)
        rows = tuple(
            Row(date=r.date, values=_rename_key(r.values, old, new), hidden=r.hidden)
            for r in ds.rows
        )
        return self._commit(Dataset(headers=headers, rows=rows), "rename_column")


def _rename_key(values: Dict[str, float], old: str, new: str) -> Dict[str, float]:
    # keep key position so iteration order follows the headers
    return {(new if k == old else k): v for k, v in values.items()}


def parse_cell(raw: object) -> float:
    """float(raw), or NaN when the input is empty or not a number."""
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return float(raw)
    try:
        return float(str(raw).strip())
    except (TypeError, ValueError):
        return math.nan


def header_key_mismatches(dataset: Dataset) -> List[int]:
    """Indices of rows whose value keys differ from the headers."""
    expected = set(dataset.headers)
    return [i for i, r in enumerate(dataset.rows) if set(r.values) != expected]
