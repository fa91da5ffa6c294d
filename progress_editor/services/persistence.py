from __future__ import annotations

import json
import logging
import os
import threading
from pathlib import Path
from typing import Callable, Optional

from platformdirs import user_cache_dir

from progress_editor.core.dataset import Dataset
from progress_editor.core.exceptions import MalformedJson, ReadError, WriteError
from progress_editor.core.normalize import normalize_loaded, prepare_for_persistence
from progress_editor.core.state import EditorState
from progress_editor.services.storage import LocalFileSystemStorage, StorageBackend
from progress_editor.validation.dataset_schema import validate_dataset_dict

logger = logging.getLogger(__name__)

APP_NAME = "progress-editor"
CACHE_FILENAME = "ai-progress-data.cache.json"
DEFAULT_SAVE_FILENAME = "ai-progress-data.json"
CACHE_DIR_ENV = "PROGRESS_EDITOR_CACHE_DIR"


def default_cache_dir() -> Path:
    """
    Platform cache directory for the app.

    Selection order:
        1) env var PROGRESS_EDITOR_CACHE_DIR
        2) platformdirs user cache dir for "progress-editor"
    """
    override = os.getenv(CACHE_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return Path(user_cache_dir(APP_NAME))


def encode_dataset(dataset: Dataset) -> bytes:
    """Sanitise and serialise to pretty-printed (2-space) JSON."""
    clean = prepare_for_persistence(dataset)
    return json.dumps(clean.to_dict(), indent=2, ensure_ascii=False).encode("utf-8")


def decode_dataset(raw: bytes | str) -> Dataset:
    """
    Parse -> structural validation -> inbound normalisation.

    Raises:
        MalformedJson: input is not JSON
        SchemaViolation: JSON does not have the dataset shape
    """
    try:
        doc = json.loads(raw)
    except ValueError as e:
        # JSONDecodeError and UnicodeDecodeError are both ValueErrors
        raise MalformedJson(f"Invalid JSON file format: {e}") from e

    dataset = validate_dataset_dict(doc).raise_for_issues()
    return normalize_loaded(dataset)


class PersistenceGateway:
    """
    Round-trips the dataset to user-chosen files and to the background cache.

    The cache location is resolved once (on first use) and memoised on the
    shared EditorState, together with the storage backend rooted there.
    """

    def __init__(
            self,
            state: EditorState,
            cache_dir_resolver: Callable[[], Path] = default_cache_dir,
            cache_filename: str = CACHE_FILENAME,
    ):
        self.state = state
        self._cache_dir_resolver = cache_dir_resolver
        self._cache_filename = cache_filename
        self._cache_store: Optional[StorageBackend] = None
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # User files
    # ------------------------------------------------------------------
    def load_from_path(self, path: str | Path) -> Dataset:
        path = Path(path)
        logger.info("Loading dataset from %s", path)
        try:
            raw = path.read_bytes()
        except OSError as e:
            raise ReadError(f"Failed to read {path}: {e.strerror or e}") from e
        return decode_dataset(raw)

    def save_to_path(self, path: str | Path, dataset: Dataset) -> Path:
        path = Path(path)
        data = encode_dataset(dataset)
        try:
            path.write_bytes(data)
        except OSError as e:
            raise WriteError(f"Failed to write {path}: {e.strerror or e}") from e
        logger.info("Saved dataset to %s", path, extra={"n_rows": len(dataset.rows)})
        return path

    # ------------------------------------------------------------------
    # Background cache
    # ------------------------------------------------------------------
    def _store(self) -> StorageBackend:
        with self._lock:
            if self._cache_store is None:
                cache_dir = self._cache_dir_resolver()
                try:
                    self._cache_store = LocalFileSystemStorage(cache_dir)
                except OSError as e:
                    raise WriteError(f"Cannot create cache directory {cache_dir}: {e.strerror or e}") from e
                self.state.cache_path = self._cache_store.locate(self._cache_filename)
                logger.info("Resolved cache path %s", self.state.cache_path)
            return self._cache_store

    @property
    def cache_path(self) -> Path:
        self._store()
        return self.state.cache_path

    def load_cache(self) -> Optional[Dataset]:
        """
        Cached dataset, or None when no cache exists yet.

        A cache that exists but is unreadable or malformed raises exactly like
        a user file would.
        """
        store = self._store()
        if not store.exists(self._cache_filename):
            logger.info("No cached dataset at %s", self.state.cache_path)
            return None
        try:
            raw = store.read_bytes(self._cache_filename)
        except OSError as e:
            raise ReadError(f"Failed to read cache {self.state.cache_path}: {e.strerror or e}") from e
        return decode_dataset(raw)

    def write_cache(self, dataset: Dataset) -> Path:
        store = self._store()
        data = encode_dataset(dataset)
        try:
            store.write_bytes(self._cache_filename, data)
        except OSError as e:
            raise WriteError(f"Failed to write cache {self.state.cache_path}: {e.strerror or e}") from e
        logger.info("Data cached successfully", extra={"path": str(self.state.cache_path)})
        return self.state.cache_path
