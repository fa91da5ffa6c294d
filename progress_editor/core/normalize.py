from __future__ import annotations

import math

from progress_editor.core.dataset import Dataset, Row


def normalize_loaded(dataset: Dataset) -> Dataset:
    """
    Inbound repair for a structurally valid dataset.

    Only fills `hidden=False` where the source omitted it. Rows are not
    resequenced and mismatched value keys are kept as-is.
    """
    return Dataset(
        headers=dataset.headers,
        rows=tuple(
            row if row.hidden is not None else Row(date=row.date, values=dict(row.values), hidden=False)
            for row in dataset.rows
        ),
    )


def _finite_or_zero(value: float) -> float:
    try:
        return value if math.isfinite(value) else 0.0
    except TypeError:
        return 0.0


def prepare_for_persistence(dataset: Dataset) -> Dataset:
    """
    Outbound sanitising copy: every non-finite value (NaN from an in-progress
    edit, +/-inf) becomes 0. The input snapshot is not modified.
    """
    return Dataset(
        headers=dataset.headers,
        rows=tuple(
            Row(
                date=row.date,
                values={k: _finite_or_zero(v) for k, v in row.values.items()},
                hidden=row.hidden,
            )
            for row in dataset.rows
        ),
    )
