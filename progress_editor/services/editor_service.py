from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional, TypeVar

from progress_editor.core.dataset import Dataset
from progress_editor.core.events import EventBus
from progress_editor.core.exceptions import (
    DuplicateColumnName,
    MalformedJson,
    ProgressEditorError,
    SchemaViolation,
)
from progress_editor.core.state import EditorState
from progress_editor.core.table_engine import TableEngine, header_key_mismatches
from progress_editor.services.change_notifier import ChangeNotifier
from progress_editor.services.dialogs import KIND_ERROR, KIND_INFO, DialogService, MessageQueueDialogs
from progress_editor.services.persistence import (
    DEFAULT_SAVE_FILENAME,
    PersistenceGateway,
    default_cache_dir,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

JSON_FILTERS = [{"name": "JSON", "extensions": ["json"]}]


class EditorService:
    """
    User-facing facade over engine, gateway and notifier.

    Every user-initiated operation is recovered here: ProgressEditorErrors
    become dialog messages and the call returns None, the process never sees
    the exception.
    """

    def __init__(
            self,
            engine: TableEngine,
            gateway: PersistenceGateway,
            notifier: ChangeNotifier,
            dialogs: DialogService,
    ):
        self.engine = engine
        self.gateway = gateway
        self.notifier = notifier
        self.dialogs = dialogs

        self.engine.set_commit_listener(self.notifier.publish)
        if self.notifier.on_notify_error is None:
            self.notifier.on_notify_error = self._report_notification_error

    @property
    def dataset(self) -> Dataset:
        return self.engine.dataset

    # ------------------------------------------------------------------
    # Error reporting
    # ------------------------------------------------------------------
    def _report_notification_error(self, exc: Exception) -> None:
        self.dialogs.notify(str(exc), KIND_ERROR, title="Communication Error")

    def _report_load_error(self, exc: ProgressEditorError) -> None:
        if isinstance(exc, MalformedJson):
            self.dialogs.notify("Invalid JSON file format", KIND_ERROR, title="Load Error")
        elif isinstance(exc, SchemaViolation):
            self.dialogs.notify(f"Invalid data format:\n{exc}", KIND_ERROR, title="Validation Error")
        else:
            self.dialogs.notify(f"Failed to load file: {exc}", KIND_ERROR, title="Load Error")

    def _run(self, label: str, fn: Callable[..., T], *args) -> Optional[T]:
        try:
            return fn(*args)
        except DuplicateColumnName as e:
            logger.error("%s rejected: %s", label, e)
            self.dialogs.notify(str(e), KIND_ERROR, title="Validation Error")
        except ProgressEditorError as e:
            logger.error("%s failed: %s", label, e)
            self.dialogs.notify(f"Error {label}: {e}", KIND_ERROR, title="Error")
        return None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def startup(self) -> Dataset:
        """
        Commit the cached dataset if there is one, else the current (default)
        snapshot, so the chart consumer and the cache both see it once.

        An unreadable or malformed cache is reported and left on disk: the
        default snapshot is published to the chart only, and the file is first
        overwritten by the next edit.
        """
        loaded: Optional[Dataset] = None
        try:
            loaded = self.gateway.load_cache()
        except ProgressEditorError as e:
            logger.error("Cached dataset could not be loaded: %s", e)
            self._report_load_error(e)
            self.notifier.publish(self.engine.dataset, write_cache=False)
            return self.engine.dataset

        if loaded is not None:
            self._warn_on_mismatched_keys(loaded, source=str(self.gateway.cache_path))
            return self.engine.replace(loaded)
        return self.engine.replace(self.engine.dataset)

    def shutdown(self) -> None:
        self.notifier.shutdown(wait=True)

    # ------------------------------------------------------------------
    # Load / save
    # ------------------------------------------------------------------
    def open_file(self, path: Optional[str | Path] = None) -> Optional[Dataset]:
        if path is None:
            path = self.dialogs.confirm({"mode": "open", "multiple": False, "filters": JSON_FILTERS})
            if not path:
                return None

        try:
            loaded = self.gateway.load_from_path(path)
        except ProgressEditorError as e:
            logger.error("Failed to load file %s: %s", path, e)
            self._report_load_error(e)
            return None

        self._warn_on_mismatched_keys(loaded, source=str(path))
        return self.engine.replace(loaded)

    def save_file(self, path: Optional[str | Path] = None) -> Optional[Path]:
        if path is None:
            path = self.dialogs.confirm(
                {"mode": "save", "default_path": DEFAULT_SAVE_FILENAME, "filters": JSON_FILTERS}
            )
            if not path:
                return None

        try:
            written = self.gateway.save_to_path(path, self.engine.dataset)
        except ProgressEditorError as e:
            logger.error("Failed to save file %s: %s", path, e)
            self.dialogs.notify(f"Failed to save file: {e}", KIND_ERROR, title="Save Error")
            return None

        self.dialogs.notify("File saved successfully", KIND_INFO, title="Success")
        return written

    @staticmethod
    def _warn_on_mismatched_keys(dataset: Dataset, source: str) -> None:
        bad_rows = header_key_mismatches(dataset)
        if bad_rows:
            logger.warning(
                "Loaded dataset has rows whose values do not match the headers",
                extra={"source": source, "rows": bad_rows},
            )

    # ------------------------------------------------------------------
    # Table operations
    # ------------------------------------------------------------------
    def add_row(self) -> Optional[Dataset]:
        try:
            return self.engine.add_row()
        except (ProgressEditorError, ValueError) as e:
            # ValueError: last row carries a date add_months cannot parse
            logger.error("Error adding row: %s", e)
            self.dialogs.notify(f"Error adding row: {e}", KIND_ERROR, title="Error")
            return None

    def add_column(self) -> Optional[Dataset]:
        return self._run("adding column", self.engine.add_column)

    def remove_column(self, name: str) -> Optional[Dataset]:
        return self._run("removing column", self.engine.remove_column, name)

    def rename_column(self, old: str, new: str) -> Optional[Dataset]:
        return self._run("renaming column", self.engine.rename_column, old, new)

    def set_cell_value(self, index: int, header: str, raw: str) -> Optional[Dataset]:
        return self._run("updating value", self.engine.set_cell_value, index, header, raw)

    def shift_row_date(self, index: int, months: int) -> Optional[Dataset]:
        return self._run("moving row date", self.engine.shift_row_date, index, months)

    def remove_row(self, index: int) -> Optional[Dataset]:
        return self._run("removing row", self.engine.remove_row, index)

    def toggle_row_hidden(self, index: int) -> Optional[Dataset]:
        return self._run("toggling row visibility", self.engine.toggle_row_hidden, index)

    def reset_to_default(self) -> Optional[Dataset]:
        return self._run("resetting data", self.engine.reset_to_default)


def create_editor_service(
        cache_dir: Optional[Path] = None,
        *,
        bus: Optional[EventBus] = None,
        dialogs: Optional[DialogService] = None,
) -> EditorService:
    """
    Wire state, engine, gateway, notifier and dialogs for one editor process.
    """
    state = EditorState()
    bus = bus or EventBus()
    resolver = (lambda: Path(cache_dir)) if cache_dir is not None else default_cache_dir

    gateway = PersistenceGateway(state, cache_dir_resolver=resolver)
    engine = TableEngine(state)
    notifier = ChangeNotifier(bus, gateway)
    return EditorService(engine, gateway, notifier, dialogs or MessageQueueDialogs())
