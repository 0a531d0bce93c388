"""Process-wide mapping from event name to the subscribers that handle it."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

from app.domain.errors import validate_event_name

if TYPE_CHECKING:
    from app.domain.subscriber import Subscriber

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubscriberDescriptor:
    """One subscriber type bound to the single event name it declared."""

    subscriber_type: type
    event_name: str
    factory: Callable[[], Subscriber] = field(compare=False, repr=False)

    def resolve(self) -> Subscriber:
        return self.factory()


class Registry:
    """Ordered subscriber lists keyed by exact event name.

    Dispatch order is registration order.  Descriptors are never removed.
    Writes replace the per-name tuple wholesale under a lock, so readers never
    observe a half-applied registration.
    """

    def __init__(self) -> None:
        self._subscribers: dict[str, tuple[SubscriberDescriptor, ...]] = {}
        self._lock = threading.Lock()

    def register(self, event_name: str, descriptor: SubscriberDescriptor) -> None:
        validate_event_name(event_name)
        with self._lock:
            current = self._subscribers.get(event_name, ())
            self._subscribers[event_name] = current + (descriptor,)
        logger.debug(
            "Registered %s for %r (position %d)",
            descriptor.subscriber_type.__name__,
            event_name,
            len(current) + 1,
        )

    def lookup(self, event_name: str) -> tuple[SubscriberDescriptor, ...]:
        if not isinstance(event_name, str):
            return ()
        return self._subscribers.get(event_name, ())

    def event_names(self) -> list[str]:
        return list(self._subscribers)

    def __len__(self) -> int:
        return sum(len(d) for d in self._subscribers.values())
