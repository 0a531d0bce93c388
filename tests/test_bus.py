"""Tests for publish/dispatch semantics of the event bus."""

from __future__ import annotations

import logging

import pytest
from pydantic import ValidationError

from app.domain.bus import EventBus
from app.domain.errors import HandlerFailure, InvalidEventName
from app.domain.events import Event
from app.domain.registry import Registry, SubscriberDescriptor


class Recorder:
    """Subscriber that appends (label, event) to a shared call list."""

    def __init__(self, label: str, calls: list) -> None:
        self.label = label
        self.calls = calls

    def call(self, event: Event) -> None:
        self.calls.append((self.label, event))


class Exploding:
    def call(self, event: Event) -> None:
        raise RuntimeError("mail server down")


def _subscribe(registry: Registry, event_name: str, handler) -> SubscriberDescriptor:
    descriptor = SubscriberDescriptor(
        subscriber_type=type(handler), event_name=event_name, factory=lambda: handler
    )
    registry.register(event_name, descriptor)
    return descriptor


@pytest.fixture()
def registry() -> Registry:
    return Registry()


@pytest.fixture()
def bus(registry: Registry) -> EventBus:
    return EventBus(registry)


def test_publish_with_no_subscribers_is_silent(bus, caplog):
    caplog.set_level(logging.DEBUG, logger="app.domain.bus")

    assert bus.publish("payment.processed", {"amount": 10}) is None

    assert "No subscribers for 'payment.processed'" in caplog.text


def test_publish_reaches_only_matching_subscribers(registry, bus):
    calls: list = []
    _subscribe(registry, "order.created", Recorder("A", calls))
    _subscribe(registry, "order.shipped", Recorder("B", calls))

    bus.publish("order.created", {"order_id": 7})

    assert len(calls) == 1
    label, event = calls[0]
    assert label == "A"
    assert event.name == "order.created"
    assert event.payload["order_id"] == 7


def test_handlers_run_in_registration_order(registry, bus):
    calls: list = []
    for label in ("first", "second", "third"):
        _subscribe(registry, "order.created", Recorder(label, calls))

    bus.publish("order.created", {"order_id": 1})

    assert [label for label, _ in calls] == ["first", "second", "third"]


def test_every_handler_receives_the_same_event(registry, bus):
    calls: list = []
    _subscribe(registry, "order.created", Recorder("A", calls))
    _subscribe(registry, "order.created", Recorder("B", calls))

    bus.publish("order.created", {"order_id": 1})

    assert calls[0][1] is calls[1][1]


def test_duplicate_registration_invokes_twice(registry, bus):
    calls: list = []
    descriptor = _subscribe(registry, "order.created", Recorder("A", calls))
    registry.register("order.created", descriptor)

    bus.publish("order.created", {"order_id": 1})

    assert [label for label, _ in calls] == ["A", "A"]


def test_failing_handler_stops_the_loop(registry, bus):
    calls: list = []
    _subscribe(registry, "order.created", Recorder("before", calls))
    failing = _subscribe(registry, "order.created", Exploding())
    _subscribe(registry, "order.created", Recorder("after", calls))

    with pytest.raises(HandlerFailure) as exc_info:
        bus.publish("order.created", {"order_id": 1})

    assert [label for label, _ in calls] == ["before"]
    failure = exc_info.value
    assert failure.descriptor is failing
    assert failure.event.name == "order.created"
    assert isinstance(failure.__cause__, RuntimeError)
    assert str(failure.__cause__) == "mail server down"


def test_payload_is_copied_and_event_is_frozen(registry, bus):
    calls: list = []
    _subscribe(registry, "order.created", Recorder("A", calls))
    payload = {"order_id": 1}

    bus.publish("order.created", payload)
    payload["order_id"] = 2

    event = calls[0][1]
    assert event.payload == {"order_id": 1}
    with pytest.raises(ValidationError):
        event.name = "order.shipped"


def test_publish_without_payload_gives_empty_mapping(registry, bus):
    calls: list = []
    _subscribe(registry, "heartbeat", Recorder("A", calls))

    bus.publish("heartbeat")

    assert calls[0][1].payload == {}


def test_publish_rejects_empty_name(bus):
    with pytest.raises(InvalidEventName):
        bus.publish("", {})


def test_event_requires_non_empty_name():
    with pytest.raises(ValidationError):
        Event(name="", payload={})


def test_late_registration_visible_to_next_publish(registry, bus):
    calls: list = []
    bus.publish("order.created", {"order_id": 1})

    _subscribe(registry, "order.created", Recorder("late", calls))
    bus.publish("order.created", {"order_id": 2})

    assert [event.payload["order_id"] for _, event in calls] == [2]


def test_registration_during_dispatch_is_not_seen_by_that_publish(registry, bus):
    calls: list = []

    class RegistersAnother:
        def call(self, event: Event) -> None:
            calls.append(("registrar", event))
            _subscribe(registry, "order.created", Recorder("late", calls))

    _subscribe(registry, "order.created", RegistersAnother())

    bus.publish("order.created", {"order_id": 1})
    assert [label for label, _ in calls] == ["registrar"]


def test_handlers_may_publish_nested_events(registry, bus):
    calls: list = []

    class Forwarder:
        def call(self, event: Event) -> None:
            calls.append(("forwarder", event))
            bus.publish("order.audited", event.payload)

    _subscribe(registry, "order.created", Forwarder())
    _subscribe(registry, "order.created", Recorder("after", calls))
    _subscribe(registry, "order.audited", Recorder("auditor", calls))

    bus.publish("order.created", {"order_id": 3})

    assert [label for label, _ in calls] == ["forwarder", "auditor", "after"]


def test_handlers_cannot_change_the_payload_for_later_handlers(registry, bus):
    seen: list = []

    class Mutator:
        def call(self, event: Event) -> None:
            event.payload["order_id"] = 999

    class Reader:
        def call(self, event: Event) -> None:
            seen.append(event.payload["order_id"])

    _subscribe(registry, "order.created", Mutator())
    _subscribe(registry, "order.created", Reader())

    with pytest.raises(HandlerFailure) as exc_info:
        bus.publish("order.created", {"order_id": 7})

    assert isinstance(exc_info.value.__cause__, TypeError)
    assert seen == []

    _subscribe(registry, "order.shipped", Reader())
    bus.publish("order.shipped", {"order_id": 7})
    assert seen == [7]


def test_default_payload_is_read_only():
    event = Event(name="heartbeat")

    assert event.payload == {}
    with pytest.raises(TypeError):
        event.payload["x"] = 1
