from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from progress_editor.core.dataset import Dataset
from progress_editor.core.defaults import default_dataset


@dataclass
class EditorState:
    """
    The single owned, mutable state of an editor process.

    Fields:

    - dataset: the current snapshot. Only TableEngine replaces it; the
      snapshot object itself is never mutated.
    - cache_path: background cache location, resolved lazily by the
      PersistenceGateway on first use and reused for the process lifetime.

    Created once at startup and passed to both the engine and the gateway
    instead of living in module-level globals.
    """

    dataset: Dataset = field(default_factory=default_dataset)
    cache_path: Optional[Path] = None
