from __future__ import annotations

import json
from pathlib import Path

from progress_editor.core.dataset import Dataset
from progress_editor.core.normalize import normalize_loaded

DEFAULT_DATA_PATH = Path(__file__).parent / "default_data.json"


def default_dataset() -> Dataset:
    """Fresh copy of the built-in snapshot shipped with the package."""
    raw = json.loads(DEFAULT_DATA_PATH.read_text(encoding="utf-8"))
    return normalize_loaded(Dataset.from_dict(raw))
