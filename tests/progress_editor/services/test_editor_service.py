from __future__ import annotations

import json
import logging

from progress_editor.core.dataset import Dataset, Row
from progress_editor.core.defaults import default_dataset
from progress_editor.core.events import DATA_EVENT, EventBus
from progress_editor.core.normalize import prepare_for_persistence
from progress_editor.services.dialogs import KIND_ERROR, KIND_INFO, MessageQueueDialogs
from progress_editor.services.editor_service import create_editor_service
from progress_editor.services.persistence import CACHE_FILENAME, DEFAULT_SAVE_FILENAME


def _make_service(tmp_path, bus=None):
    dialogs = MessageQueueDialogs()
    service = create_editor_service(tmp_path / "cache", bus=bus, dialogs=dialogs)
    return service, dialogs


def _write_json(path, doc) -> None:
    path.write_text(json.dumps(doc), encoding="utf-8")


def test_startup_without_cache_publishes_default(tmp_path):
    bus = EventBus()
    received = []
    bus.subscribe(DATA_EVENT, received.append)
    service, dialogs = _make_service(tmp_path, bus)

    ds = service.startup()
    service.shutdown()

    assert ds == default_dataset()
    assert received == [ds]
    assert dialogs.drain() == []
    assert (tmp_path / "cache" / CACHE_FILENAME).exists()


def test_startup_restores_cached_dataset(tmp_path):
    (tmp_path / "cache").mkdir()
    _write_json(
        tmp_path / "cache" / CACHE_FILENAME,
        {"headers": ["X"], "rows": [{"date": "2028-01-01", "values": {"X": 4}}]},
    )
    service, _ = _make_service(tmp_path)

    ds = service.startup()
    service.shutdown()

    assert ds.headers == ("X",)
    assert ds.rows[0].hidden is False


def test_startup_with_corrupt_cache_reports_and_keeps_default(tmp_path):
    cache_file = tmp_path / "cache" / CACHE_FILENAME
    cache_file.parent.mkdir()
    cache_file.write_text("{", encoding="utf-8")
    bus = EventBus()
    received = []
    bus.subscribe(DATA_EVENT, received.append)
    service, dialogs = _make_service(tmp_path, bus)

    ds = service.startup()
    service.shutdown()

    assert ds == default_dataset()
    assert received == [ds]
    # broken cache is left alone until the next edit
    assert cache_file.read_text(encoding="utf-8") == "{"
    [msg] = dialogs.drain()
    assert msg.text == "Invalid JSON file format"
    assert msg.kind == KIND_ERROR


def test_open_file_with_invalid_shape_reports_validation_error(tmp_path):
    service, dialogs = _make_service(tmp_path)
    bad = tmp_path / "bad.json"
    _write_json(bad, {"headers": ["A"], "rows": [{"date": "2027-01-01", "values": {"A": "x"}}]})
    before = service.dataset

    assert service.open_file(bad) is None
    service.shutdown()

    [msg] = dialogs.drain()
    assert msg.title == "Validation Error"
    assert msg.text == "Invalid data format:\nrows.0.values.A: Expected number"
    assert service.dataset is before


def test_open_file_missing_path_reports_load_error(tmp_path):
    service, dialogs = _make_service(tmp_path)

    assert service.open_file(tmp_path / "nope.json") is None
    service.shutdown()

    [msg] = dialogs.drain()
    assert msg.title == "Load Error"
    assert msg.text.startswith("Failed to load file: ")


def test_open_file_replaces_dataset(tmp_path):
    service, _ = _make_service(tmp_path)
    good = tmp_path / "good.json"
    _write_json(good, {"headers": ["B"], "rows": [{"date": "2027-01-01", "values": {"B": 2}, "hidden": True}]})

    ds = service.open_file(good)
    service.shutdown()

    assert service.dataset is ds
    assert ds.rows[0] == Row(date="2027-01-01", values={"B": 2.0}, hidden=True)


def test_open_file_cancelled_does_nothing(tmp_path):
    service, dialogs = _make_service(tmp_path)

    assert service.open_file() is None
    service.shutdown()
    assert dialogs.drain() == []


def test_save_file_uses_pending_path_and_reports_success(tmp_path):
    service, dialogs = _make_service(tmp_path)
    target = tmp_path / "mine.json"
    dialogs.pending_path = str(target)

    written = service.save_file()
    service.shutdown()

    assert written == target
    assert dialogs.pending_path is None
    [msg] = dialogs.drain()
    assert (msg.text, msg.kind, msg.title) == ("File saved successfully", KIND_INFO, "Success")


def test_save_file_defaults_to_standard_name(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    service, _ = _make_service(tmp_path)

    written = service.save_file()
    service.shutdown()

    assert str(written) == DEFAULT_SAVE_FILENAME
    assert (tmp_path / DEFAULT_SAVE_FILENAME).exists()


def test_save_file_failure_is_reported(tmp_path):
    service, dialogs = _make_service(tmp_path)

    assert service.save_file(tmp_path / "missing" / "x.json") is None
    service.shutdown()

    [msg] = dialogs.drain()
    assert msg.title == "Save Error"
    assert msg.text.startswith("Failed to save file: ")


def test_duplicate_rename_becomes_validation_message(tmp_path):
    service, dialogs = _make_service(tmp_path)
    before = service.dataset

    assert service.rename_column("Lab 1", "Lab 2") is None
    service.shutdown()

    assert service.dataset is before
    [msg] = dialogs.drain()
    assert msg.title == "Validation Error"
    assert msg.text == "A column with this name already exists"


def test_bad_row_index_becomes_error_message(tmp_path):
    service, dialogs = _make_service(tmp_path)

    assert service.remove_row(99) is None
    assert service.toggle_row_hidden(-1) is None
    service.shutdown()

    texts = [m.text for m in dialogs.drain()]
    assert texts[0].startswith("Error removing row: Row index 99 out of range")
    assert texts[1].startswith("Error toggling row visibility: Row index -1")


def test_add_row_with_unparseable_last_date_is_reported(tmp_path):
    service, dialogs = _make_service(tmp_path)
    service.engine.replace(Dataset(headers=("A",), rows=(Row(date="someday", values={"A": 1.0}),)))

    assert service.add_row() is None
    service.shutdown()

    [msg] = dialogs.drain()
    assert msg.text.startswith("Error adding row: ")


def test_successful_operations_publish_each_commit(tmp_path):
    bus = EventBus()
    received = []
    bus.subscribe(DATA_EVENT, received.append)
    service, dialogs = _make_service(tmp_path, bus)

    service.add_row()
    service.add_column()
    service.set_cell_value(0, "Lab 1", "abc")
    service.shutdown()

    assert len(received) == 3
    # published copy is sanitised, the working copy keeps NaN
    assert received[-1].rows[0].values["Lab 1"] == 0.0
    assert service.dataset.rows[0].values["Lab 1"] != service.dataset.rows[0].values["Lab 1"]
    assert dialogs.drain() == []


def test_subscriber_failure_becomes_communication_error(tmp_path):
    bus = EventBus()

    def broken(_payload):
        raise RuntimeError("boom")

    bus.subscribe(DATA_EVENT, broken)
    service, dialogs = _make_service(tmp_path, bus)

    ds = service.add_column()
    service.shutdown()

    assert ds is not None
    [msg] = dialogs.drain()
    assert msg.title == "Communication Error"
    assert msg.text == "Error sending data to chart: boom"


def test_corrupt_cache_is_replaced_by_first_edit(tmp_path):
    cache_file = tmp_path / "cache" / CACHE_FILENAME
    cache_file.parent.mkdir()
    cache_file.write_text("{", encoding="utf-8")
    service, _ = _make_service(tmp_path)
    service.startup()

    service.add_column()
    service.shutdown()

    assert service.gateway.load_cache() == prepare_for_persistence(service.dataset)


def test_open_file_with_out_of_range_integer_reports_validation_error(tmp_path):
    service, dialogs = _make_service(tmp_path)
    huge = tmp_path / "huge.json"
    huge.write_text(
        '{"headers": ["A"], "rows": [{"date": "2027-01-01", "values": {"A": ' + "9" * 400 + "}}]}",
        encoding="utf-8",
    )
    before = service.dataset

    assert service.open_file(huge) is None
    service.shutdown()

    [msg] = dialogs.drain()
    assert msg.title == "Validation Error"
    assert msg.text == "Invalid data format:\nrows.0.values.A: Expected finite number"
    assert service.dataset is before


def test_duplicate_rename_is_logged(tmp_path, caplog):
    service, _ = _make_service(tmp_path)

    with caplog.at_level(logging.ERROR, logger="progress_editor.services.editor_service"):
        service.rename_column("Lab 1", "Lab 2")
    service.shutdown()

    assert "renaming column rejected: A column with this name already exists" in caplog.text


def test_answering_feeds_one_dialog_then_clears(tmp_path):
    service, dialogs = _make_service(tmp_path)
    target = tmp_path / "picked.json"

    with dialogs.answering(str(target)):
        written = service.save_file()
        assert dialogs.pending_path is None
    service.shutdown()

    assert written == target
    assert target.exists()
    assert dialogs.pending_path is None
