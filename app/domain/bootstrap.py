"""Explicit bootstrap: turn declared subscriber types into registry entries."""

from __future__ import annotations

import inspect
import logging
import threading
from typing import Any, Callable, Iterable, Mapping

from app.domain.errors import validate_event_name
from app.domain.registry import Registry, SubscriberDescriptor
from app.domain.subscriber import Subscriber, declared_events

logger = logging.getLogger(__name__)


def _constructor_kwargs(cls: type, dependencies: Mapping[str, Any]) -> dict[str, Any]:
    """Pick the constructor arguments for *cls* out of *dependencies* by name."""
    kwargs: dict[str, Any] = {}
    for param in inspect.signature(cls).parameters.values():
        if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
            continue
        if param.name in dependencies:
            kwargs[param.name] = dependencies[param.name]
        elif param.default is param.empty:
            raise TypeError(
                f"{cls.__name__} needs dependency {param.name!r}, "
                "which was not provided"
            )
    return kwargs


def _shared_instance(cls: type, kwargs: dict[str, Any]) -> Callable[[], Subscriber]:
    instance: list[Subscriber] = []
    lock = threading.Lock()

    def factory() -> Subscriber:
        if not instance:
            with lock:
                if not instance:
                    instance.append(cls(**kwargs))
        return instance[0]

    return factory


def register_subscribers(
    registry: Registry,
    subscriber_types: Iterable[type],
    dependencies: Mapping[str, Any] | None = None,
) -> list[SubscriberDescriptor]:
    """Register every declared event of every type in *subscriber_types*.

    Must run once per type, before steady-state publishing.  Running it twice
    for the same type registers that type twice.  Each type gets one shared
    instance, built on first dispatch with its constructor arguments taken
    from *dependencies*.

    Every type is checked before anything is registered, so a bad type
    leaves *registry* untouched.
    """
    dependencies = dependencies or {}
    registered: list[SubscriberDescriptor] = []

    for cls in subscriber_types:
        names = declared_events(cls)
        if not names:
            logger.debug("%s declares no events; not registered", cls.__name__)
            continue
        if not callable(getattr(cls, "call", None)):
            raise TypeError(f"{cls.__name__} does not implement call(event)")
        for name in names:
            validate_event_name(name)

        factory = _shared_instance(cls, _constructor_kwargs(cls, dependencies))
        registered.extend(
            SubscriberDescriptor(subscriber_type=cls, event_name=name, factory=factory)
            for name in names
        )

    for descriptor in registered:
        registry.register(descriptor.event_name, descriptor)

    logger.info(
        "Registered %d subscriptions across %d event names",
        len(registered),
        len({d.event_name for d in registered}),
    )
    return registered
