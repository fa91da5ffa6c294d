import math

import dash_bootstrap_components as dbc

from progress_editor.core.dataset import Dataset, Row
from progress_editor.services.dialogs import KIND_ERROR, Message
from progress_editor.ui.helpers import (
    find_edited_cell,
    header_for_column_id,
    hidden_row_styles,
    message_alerts,
    table_columns,
    table_records,
)


def _make_dataset() -> Dataset:
    # a header named "date" must not clash with the date column
    return Dataset(
        headers=("date", "Lab 2"),
        rows=(
            Row(date="2027-01-01", values={"date": 1.0, "Lab 2": math.nan}, hidden=False),
            Row(date="2027-04-01", values={"date": 2.0}, hidden=True),
        ),
    )


def test_table_columns_use_positional_ids():
    cols = table_columns(_make_dataset())

    assert [c["id"] for c in cols] == ["date", "h0", "h1"]
    assert [c["name"] for c in cols] == ["Date", "date", "Lab 2"]
    assert cols[0]["editable"] is False


def test_table_records_blank_nan_and_missing_values():
    records = table_records(_make_dataset())

    assert records[0] == {"date": "Jan 2027", "h0": 1.0, "h1": ""}
    assert records[1]["h1"] == ""


def test_hidden_row_styles_only_for_hidden_rows():
    styles = hidden_row_styles(_make_dataset())

    assert [s["if"]["row_index"] for s in styles] == [1]


def test_find_edited_cell():
    before = [{"date": "Jan 2027", "h0": 1.0}, {"date": "Apr 2027", "h0": 2.0}]
    after = [{"date": "Jan 2027", "h0": 1.0}, {"date": "Apr 2027", "h0": "3.5"}]

    assert find_edited_cell(after, before) == (1, "h0", "3.5")
    assert find_edited_cell(before, before) is None
    assert find_edited_cell(after, None) is None


def test_header_for_column_id():
    ds = _make_dataset()

    assert header_for_column_id(ds, "h1") == "Lab 2"
    assert header_for_column_id(ds, "h5") is None
    assert header_for_column_id(ds, "date") is None
    assert header_for_column_id(ds, "hx") is None


def test_message_alerts_map_kind_to_colour():
    alerts = message_alerts([Message("Invalid data format:\nrows: Required", KIND_ERROR, "Validation Error")])

    assert len(alerts) == 1
    assert isinstance(alerts[0], dbc.Alert)
    assert alerts[0].color == "danger"
