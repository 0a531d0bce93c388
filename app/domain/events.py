"""The immutable event value passed to subscribers."""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.domain.errors import validate_event_name

ORDER_CREATED = "order.created"
ORDER_SHIPPED = "order.shipped"


class Event(BaseModel):
    """A named occurrence plus its payload.

    Created at publish time and never mutated.  ``payload`` is opaque to the
    bus; by convention it carries identifiers rather than domain objects.
    It is a read-only copy of what the publisher passed in.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    payload: Mapping[str, Any] = Field(default_factory=dict, validate_default=True)

    @field_validator("name", mode="before")
    @classmethod
    def _non_empty_name(cls, value: Any) -> str:
        return validate_event_name(value)

    @field_validator("payload", mode="after")
    @classmethod
    def _freeze_payload(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return MappingProxyType(dict(value))
