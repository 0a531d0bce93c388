"""Subscriber contract and the class-level ``handles_event`` declaration."""

from __future__ import annotations

from typing import Callable, Protocol, TypeVar, runtime_checkable

from app.domain.events import Event

T = TypeVar("T", bound=type)

_DECLARED = "__handles_events__"


@runtime_checkable
class Subscriber(Protocol):
    def call(self, event: Event) -> None: ...


def handles_event(name: str) -> Callable[[T], T]:
    """Declare that the decorated class handles events called *name*.

    Only records the declaration on the class.  Nothing is registered until
    bootstrap calls :func:`app.domain.bootstrap.register_subscribers`.
    Stacking the decorator declares several names; each one becomes its own
    registry entry.
    """

    def decorate(cls: T) -> T:
        # Decorators apply bottom-up; prepend so the tuple reads top-down.
        declared = cls.__dict__.get(_DECLARED, ())
        setattr(cls, _DECLARED, (name,) + declared)
        cls.event_name = name
        return cls

    return decorate


def declared_events(cls: type) -> tuple[str, ...]:
    """Names *cls* declared itself, in source order.

    Declarations are not inherited: a subclass of a subscriber must declare
    its own events.
    """
    return cls.__dict__.get(_DECLARED, ())
