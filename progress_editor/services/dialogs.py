from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

logger = logging.getLogger(__name__)

KIND_INFO = "info"
KIND_WARNING = "warning"
KIND_ERROR = "error"


@dataclass(frozen=True)
class Message:
    """A modal-style message for the user."""
    text: str
    kind: str = KIND_INFO
    title: Optional[str] = None


class DialogService(ABC):
    """
    Boundary to whatever presents file pickers and messages.

    - confirm(options): ask for a file path; None means the user cancelled
    - notify(message, kind): show a message
    """

    @abstractmethod
    def confirm(self, options: Dict[str, Any]) -> Optional[str]:
        pass

    @abstractmethod
    def notify(self, message: str, kind: str = KIND_INFO, title: Optional[str] = None) -> None:
        pass


@dataclass
class MessageQueueDialogs(DialogService):
    """
    Non-interactive dialog service.

    Messages are queued until the UI drains them; `confirm` answers with the
    path the UI put in `pending_path` (the path input of the web front-end)
    falling back to options["default_path"].

    Callbacks run on server threads, so the UI sets the path through
    `answering(path)`, which holds the path lock until the dialog-driven call
    returns.
    """
    pending_path: Optional[str] = None
    messages: List[Message] = field(default_factory=list)
    _path_lock: threading.RLock = field(default_factory=threading.RLock, repr=False, compare=False)
    _messages_lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    @contextmanager
    def answering(self, path: Optional[str]) -> Iterator[None]:
        with self._path_lock:
            self.pending_path = path
            try:
                yield
            finally:
                self.pending_path = None

    def confirm(self, options: Dict[str, Any]) -> Optional[str]:
        with self._path_lock:
            path = (self.pending_path or "").strip() or options.get("default_path")
            self.pending_path = None
        return path or None

    def notify(self, message: str, kind: str = KIND_INFO, title: Optional[str] = None) -> None:
        log = logger.error if kind == KIND_ERROR else logger.info
        log("dialog_message", extra={"kind": kind, "title": title, "text": message})
        with self._messages_lock:
            self.messages.append(Message(text=message, kind=kind, title=title))

    def drain(self) -> List[Message]:
        with self._messages_lock:
            out, self.messages = self.messages, []
        return out
