from __future__ import annotations

import pytest

from progress_editor.core.events import DATA_EVENT, EventBus


def test_emit_calls_handlers_in_subscription_order():
    bus = EventBus()
    seen = []
    bus.subscribe(DATA_EVENT, lambda p: seen.append(("first", p)))
    bus.subscribe(DATA_EVENT, lambda p: seen.append(("second", p)))
    bus.subscribe("other", lambda p: seen.append(("other", p)))

    n = bus.emit(DATA_EVENT, 42)

    assert n == 2
    assert seen == [("first", 42), ("second", 42)]


def test_unsubscribe_stops_delivery():
    bus = EventBus()
    seen = []
    unsubscribe = bus.subscribe(DATA_EVENT, seen.append)

    unsubscribe()
    unsubscribe()

    assert bus.emit(DATA_EVENT, 1) == 0
    assert seen == []


def test_handler_failure_propagates_to_emitter():
    bus = EventBus()

    def boom(_payload):
        raise RuntimeError("renderer gone")

    bus.subscribe(DATA_EVENT, boom)

    with pytest.raises(RuntimeError, match="renderer gone"):
        bus.emit(DATA_EVENT, None)
