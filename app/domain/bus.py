"""Simple synchronous in-process event bus."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from app.domain.errors import HandlerFailure, validate_event_name
from app.domain.events import Event
from app.domain.registry import Registry

logger = logging.getLogger(__name__)


class EventBus:
    """Publish named events to the subscribers in a :class:`Registry`.

    Handlers are called synchronously in registration order.  The first
    handler that raises stops the loop; the error propagates wrapped in
    :class:`HandlerFailure`.
    """

    def __init__(self, registry: Registry) -> None:
        self.registry = registry

    def publish(self, event_name: str, payload: Mapping[str, Any] | None = None) -> None:
        validate_event_name(event_name)
        event = Event(name=event_name, payload=dict(payload or {}))

        descriptors = self.registry.lookup(event_name)
        if not descriptors:
            logger.debug("No subscribers for %r", event_name)
            return

        logger.debug("Dispatching %r to %d subscribers", event_name, len(descriptors))
        for descriptor in descriptors:
            try:
                descriptor.resolve().call(event)
            except Exception as exc:
                raise HandlerFailure(event, descriptor) from exc
