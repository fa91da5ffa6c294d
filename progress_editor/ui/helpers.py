from __future__ import annotations

import math
from typing import Any, Dict, List, Optional, Tuple

import dash_bootstrap_components as dbc
from dash import html

from progress_editor.core.dataset import Dataset, parse_date
from progress_editor.services.dialogs import KIND_ERROR, KIND_WARNING, Message
from progress_editor.ui.ids import DATE_COLUMN_ID, header_column_id

_ALERT_COLOR = {KIND_ERROR: "danger", KIND_WARNING: "warning"}


def _cell(value: Any) -> Any:
    # NaN is not valid JSON for the browser; show the in-progress edit as empty
    if isinstance(value, float) and math.isnan(value):
        return ""
    return value


def _date_label(text: str) -> str:
    try:
        return parse_date(text).strftime("%b %Y")
    except ValueError:
        return text


def table_columns(dataset: Dataset) -> List[Dict[str, Any]]:
    columns = [{"name": "Date", "id": DATE_COLUMN_ID, "editable": False}]
    columns += [
        {"name": header, "id": header_column_id(i), "editable": True}
        for i, header in enumerate(dataset.headers)
    ]
    return columns


def table_records(dataset: Dataset) -> List[Dict[str, Any]]:
    records = []
    for row in dataset.rows:
        record: Dict[str, Any] = {DATE_COLUMN_ID: _date_label(row.date)}
        for i, header in enumerate(dataset.headers):
            record[header_column_id(i)] = _cell(row.values.get(header, math.nan))
        records.append(record)
    return records


def hidden_row_styles(dataset: Dataset) -> List[Dict[str, Any]]:
    """Dim hidden rows (they stay in the table and in the published data)."""
    return [
        {"if": {"row_index": i}, "opacity": 0.6, "fontStyle": "italic"}
        for i, row in enumerate(dataset.rows)
        if row.hidden
    ]


def find_edited_cell(
        data: Optional[List[Dict[str, Any]]],
        previous: Optional[List[Dict[str, Any]]],
) -> Optional[Tuple[int, str, Any]]:
    """
    First (row index, column id, new value) that differs between the table's
    current and previous data, or None.
    """
    if not data or not previous or len(data) != len(previous):
        return None
    for i, (new_rec, old_rec) in enumerate(zip(data, previous)):
        for col_id, value in new_rec.items():
            if col_id != DATE_COLUMN_ID and old_rec.get(col_id) != value:
                return i, col_id, value
    return None


def header_for_column_id(dataset: Dataset, col_id: str) -> Optional[str]:
    if not col_id.startswith("h"):
        return None
    try:
        position = int(col_id[1:])
    except ValueError:
        return None
    if 0 <= position < len(dataset.headers):
        return dataset.headers[position]
    return None


def message_alerts(messages: List[Message]) -> List[dbc.Alert]:
    alerts = []
    for msg in messages:
        body = [html.Strong(msg.title), html.Br()] if msg.title else []
        # keep multi-line validation reports readable
        for j, line in enumerate(msg.text.splitlines()):
            if j:
                body.append(html.Br())
            body.append(line)
        alerts.append(
            dbc.Alert(
                body,
                color=_ALERT_COLOR.get(msg.kind, "info"),
                dismissable=True,
                className="mb-2",
            )
        )
    return alerts
