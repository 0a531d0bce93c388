"""Errors raised by the registry and the event bus."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from app.domain.events import Event
    from app.domain.registry import SubscriberDescriptor


class DomainEventError(Exception):
    """Base class for event bus errors."""


class InvalidEventName(DomainEventError, ValueError):
    """An event name was empty or not a string."""

    def __init__(self, name: Any) -> None:
        super().__init__(f"Invalid event name: {name!r}")
        self.name = name


class HandlerFailure(DomainEventError):
    """A subscriber raised while handling a published event.

    The original exception is chained as ``__cause__``.
    """

    def __init__(self, event: Event, descriptor: SubscriberDescriptor) -> None:
        super().__init__(
            f"{descriptor.subscriber_type.__name__} failed handling {event.name!r}"
        )
        self.event = event
        self.descriptor = descriptor


def validate_event_name(name: Any) -> str:
    if not isinstance(name, str) or not name:
        raise InvalidEventName(name)
    return name
