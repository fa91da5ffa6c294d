from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

DATA_EVENT = "data"

Handler = Callable[[Any], None]


class EventBus:
    """
    In-process notification channel keyed by event name.

    Handlers run synchronously, in subscription order, on the emitting
    thread. A failing handler aborts the emit and the exception propagates
    to the caller.
    """

    def __init__(self):
        self._handlers: Dict[str, List[Handler]] = {}

    def subscribe(self, event: str, handler: Handler) -> Callable[[], None]:
        """
        Register a handler for `event`.
        :return: a callable that removes the subscription again
        """
        self._handlers.setdefault(event, []).append(handler)

        def unsubscribe() -> None:
            handlers = self._handlers.get(event, [])
            if handler in handlers:
                handlers.remove(handler)

        return unsubscribe

    def emit(self, event: str, payload: Any) -> int:
        """Deliver payload to every handler of `event`; returns the number of handlers called."""
        handlers = list(self._handlers.get(event, []))
        logger.debug("emit", extra={"event": event, "n_handlers": len(handlers)})
        for handler in handlers:
            handler(payload)
        return len(handlers)
