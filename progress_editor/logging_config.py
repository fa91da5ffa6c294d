from __future__ import annotations

import logging
import os
from typing import Optional

from pythonjsonlogger import jsonlogger

LOG_FORMAT_ENV = "PROGRESS_EDITOR_LOG_FORMAT"
LOG_LEVEL_ENV = "PROGRESS_EDITOR_LOG_LEVEL"

# werkzeug logs every callback POST at INFO
_NOISY_LOGGERS = ("werkzeug",)


def _resolve_level(level: Optional[int]) -> int:
    if level is not None:
        return level
    name = os.getenv(LOG_LEVEL_ENV, "INFO").upper()
    resolved = logging.getLevelName(name)
    return resolved if isinstance(resolved, int) else logging.INFO


def _build_formatter(format_mode: str) -> logging.Formatter:
    if format_mode == "plain":
        return logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    # `extra={...}` fields are merged into the JSON record; the thread name
    # tells cache-writer records apart from callback records
    return jsonlogger.JsonFormatter("%(asctime)s %(levelname)s %(name)s %(threadName)s %(message)s")


def configure_logging(
        level: Optional[int] = None,
        force_format: Optional[str] = None,
) -> None:
    """
    Configure the root logger for the editor process.

    Format selection:
        1) force_format argument ("json" or "plain")
        2) env var PROGRESS_EDITOR_LOG_FORMAT
        3) "json"

    Level selection:
        1) level argument
        2) env var PROGRESS_EDITOR_LOG_LEVEL (a level name, e.g. "DEBUG")
        3) INFO
    """
    format_mode = (force_format or os.getenv(LOG_FORMAT_ENV, "json")).lower()

    root = logging.getLogger()
    root.setLevel(_resolve_level(level))

    handler = logging.StreamHandler()
    handler.setFormatter(_build_formatter(format_mode))

    # one handler only, even when called twice
    root.handlers.clear()
    root.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
