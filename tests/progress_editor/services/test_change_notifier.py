from __future__ import annotations

import math
from pathlib import Path

import pytest

from progress_editor.core.dataset import Dataset, Row
from progress_editor.core.events import DATA_EVENT, EventBus
from progress_editor.core.exceptions import NotificationError, WriteError
from progress_editor.core.state import EditorState
from progress_editor.core.table_engine import TableEngine
from progress_editor.services.change_notifier import ChangeNotifier
from progress_editor.services.persistence import PersistenceGateway


def _dataset(value: float = 1.0) -> Dataset:
    return Dataset(headers=("A",), rows=(Row(date="2027-01-01", values={"A": value}, hidden=False),))


class _FailingGateway(PersistenceGateway):
    def write_cache(self, dataset: Dataset) -> Path:
        raise WriteError("disk full")


def test_publish_emits_normalised_snapshot_and_writes_cache(tmp_path):
    bus = EventBus()
    received = []
    bus.subscribe(DATA_EVENT, received.append)
    gateway = PersistenceGateway(EditorState(), cache_dir_resolver=lambda: tmp_path)
    notifier = ChangeNotifier(bus, gateway)

    future = notifier.publish(_dataset(math.nan))
    path = future.result(timeout=5)
    notifier.shutdown()

    assert received[0].rows[0].values == {"A": 0.0}
    assert path == gateway.cache_path
    assert gateway.load_cache() == received[0]


def test_failing_subscriber_is_reported_and_mutation_stays(tmp_path):
    bus = EventBus()

    def broken(_payload):
        raise RuntimeError("chart crashed")

    bus.subscribe(DATA_EVENT, broken)
    errors = []
    state = EditorState(dataset=_dataset())
    gateway = PersistenceGateway(state, cache_dir_resolver=lambda: tmp_path)
    notifier = ChangeNotifier(bus, gateway, on_notify_error=errors.append)
    engine = TableEngine(state, on_commit=notifier.publish)

    ds = engine.set_cell_value(0, "A", "5")
    notifier.shutdown()

    assert engine.dataset is ds
    assert ds.rows[0].values["A"] == 5.0
    assert len(errors) == 1
    assert isinstance(errors[0], NotificationError)
    assert str(errors[0]) == "Error sending data to chart: chart crashed"
    # cache is still written after a failed emit
    assert gateway.load_cache().rows[0].values["A"] == 5.0


def test_cache_failure_goes_only_to_cache_handler(tmp_path):
    notify_errors, cache_errors = [], []
    gateway = _FailingGateway(EditorState(), cache_dir_resolver=lambda: tmp_path)
    notifier = ChangeNotifier(
        EventBus(),
        gateway,
        on_notify_error=notify_errors.append,
        on_cache_error=cache_errors.append,
    )

    future = notifier.publish(_dataset())
    with pytest.raises(WriteError):
        future.result(timeout=5)
    notifier.shutdown()

    assert notify_errors == []
    assert len(cache_errors) == 1
    assert str(cache_errors[0]) == "disk full"


def test_default_cache_error_handler_only_logs(tmp_path, caplog):
    gateway = _FailingGateway(EditorState(), cache_dir_resolver=lambda: tmp_path)
    notifier = ChangeNotifier(EventBus(), gateway)

    notifier.publish(_dataset())
    notifier.shutdown()

    assert "Failed to cache data: disk full" in caplog.text


def test_publish_without_cache_write_only_emits(tmp_path):
    bus = EventBus()
    received = []
    bus.subscribe(DATA_EVENT, received.append)
    gateway = PersistenceGateway(EditorState(), cache_dir_resolver=lambda: tmp_path)
    notifier = ChangeNotifier(bus, gateway)

    assert notifier.publish(_dataset(), write_cache=False) is None
    notifier.shutdown()

    assert len(received) == 1
    assert gateway.load_cache() is None
