from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Optional

from progress_editor.core.dataset import Dataset
from progress_editor.core.events import DATA_EVENT, EventBus
from progress_editor.core.exceptions import NotificationError
from progress_editor.core.normalize import prepare_for_persistence
from progress_editor.services.persistence import PersistenceGateway

logger = logging.getLogger(__name__)

ErrorHandler = Callable[[Exception], None]


def _log_cache_failure(exc: Exception) -> None:
    logger.warning("Failed to cache data: %s", exc)


class ChangeNotifier:
    """
    Write-through side effects of every committed mutation.

    publish(dataset):
      (a) normalises the snapshot and emits it on the "data" channel, on the
          calling thread. A failing subscriber is reported through
          `on_notify_error` (user-visible); the mutation stays committed.
      (b) submits a cache write to a background worker and returns its
          Future. Failures go to `on_cache_error` (log-only by default).
          Skipped when `write_cache` is False.

    Successive cache writes may overlap on disk; the last one wins.
    """

    def __init__(
            self,
            bus: EventBus,
            gateway: PersistenceGateway,
            *,
            on_notify_error: Optional[ErrorHandler] = None,
            on_cache_error: ErrorHandler = _log_cache_failure,
            max_workers: int = 1,
    ):
        self.bus = bus
        self.gateway = gateway
        self.on_notify_error = on_notify_error
        self.on_cache_error = on_cache_error
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="cache-writer")

    def publish(self, dataset: Dataset, write_cache: bool = True) -> Optional[Future]:
        normalized = prepare_for_persistence(dataset)

        try:
            self.bus.emit(DATA_EVENT, normalized)
        except Exception as e:
            logger.exception("Error emitting data event")
            err = NotificationError(f"Error sending data to chart: {e}")
            if self.on_notify_error is not None:
                self.on_notify_error(err)

        if not write_cache:
            return None

        future = self._executor.submit(self.gateway.write_cache, normalized)
        future.add_done_callback(self._route_cache_result)
        return future

    def _route_cache_result(self, future: Future) -> None:
        exc = future.exception()
        if exc is not None:
            self.on_cache_error(exc)

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)
