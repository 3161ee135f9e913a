"""Tests for the in-process event bus."""

from datetime import date

from session_timeline.core.events import DateSelected, EventBus, SessionActivated


def test_publish_reaches_only_matching_type():
    bus = EventBus()
    selected = []
    activated = []
    bus.subscribe(DateSelected, selected.append)
    bus.subscribe(SessionActivated, activated.append)

    bus.publish(DateSelected(date(2024, 6, 10)))

    assert selected == [DateSelected(date(2024, 6, 10))]
    assert activated == []


def test_dispose_removes_handler():
    bus = EventBus()
    received = []
    dispose = bus.subscribe(DateSelected, received.append)
    assert bus.handler_count(DateSelected) == 1

    dispose()
    dispose()
    bus.publish(DateSelected(date(2024, 6, 10)))

    assert received == []
    assert bus.handler_count(DateSelected) == 0


def test_failing_handler_does_not_stop_delivery():
    bus = EventBus()
    received = []

    def broken(_event):
        raise RuntimeError("handler failure")

    bus.subscribe(DateSelected, broken)
    bus.subscribe(DateSelected, received.append)
    bus.publish(DateSelected(date(2024, 6, 10)))

    assert len(received) == 1


def test_publish_without_handlers():
    EventBus().publish(DateSelected(date(2024, 6, 10)))
