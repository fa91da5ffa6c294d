from __future__ import annotations

import pytest

from progress_editor.core.dataset import Dataset, Row, add_months, parse_date
from progress_editor.core.defaults import default_dataset


@pytest.mark.parametrize(
    "start, months, expected",
    [
        ("2027-01-31", 1, "2027-02-28"),
        ("2028-01-31", 1, "2028-02-29"),
        ("2027-03-31", -1, "2027-02-28"),
        ("2027-07-31", 3, "2027-10-31"),
        ("2027-11-30", 3, "2028-02-29"),
        ("2027-12-15", 1, "2028-01-15"),
    ],
)
def test_add_months_is_calendar_month_arithmetic(start, months, expected):
    assert add_months(start, months) == expected


@pytest.mark.parametrize("text", ["2027-13-01", "27-01-01", "2027/01/01", "", "2027-02-30", "2027-1-05"])
def test_parse_date_rejects_non_iso_dates(text):
    with pytest.raises(ValueError):
        parse_date(text)


def test_dataset_coerces_sequences_to_tuples():
    ds = Dataset(headers=["A"], rows=[Row(date="2027-01-01", values={"A": 1.0})])

    assert ds.headers == ("A",)
    assert isinstance(ds.rows, tuple)
    assert ds.last_row.date == "2027-01-01"


def test_to_dict_always_writes_hidden():
    ds = Dataset(headers=("A",), rows=(Row(date="2027-01-01", values={"A": 2}, hidden=None),))

    assert ds.to_dict() == {
        "headers": ["A"],
        "rows": [{"date": "2027-01-01", "values": {"A": 2}, "hidden": False}],
    }


def test_from_dict_keeps_missing_hidden_as_none():
    ds = Dataset.from_dict({"headers": ["A"], "rows": [{"date": "2027-01-01", "values": {"A": 1}}]})

    assert ds.rows[0].hidden is None
    assert ds.rows[0].values == {"A": 1.0}


def test_default_dataset_respects_table_invariants():
    ds = default_dataset()

    assert ds.headers
    assert len(set(ds.headers)) == len(ds.headers)
    dates = [parse_date(r.date) for r in ds.rows]
    assert dates == sorted(dates)
    assert len(set(dates)) == len(dates)
    for row in ds.rows:
        assert set(row.values) == set(ds.headers)
        assert row.hidden in (True, False)
        assert all(v >= 0 for v in row.values.values())


def test_default_dataset_returns_fresh_equal_snapshots():
    assert default_dataset() == default_dataset()
    assert default_dataset() is not default_dataset()
