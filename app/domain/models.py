"""Domain models for the orders service."""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import StrEnum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field, computed_field, field_validator

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

T = TypeVar("T")


class OrderStatus(StrEnum):
    PENDING = "pending"
    SHIPPED = "shipped"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


# ---------------------------------------------------------------------------
# Core domain models
# ---------------------------------------------------------------------------


class OrderItem(BaseModel):
    sku: str = Field(min_length=1)
    quantity: int = Field(gt=0)
    unit_price_cents: int = Field(ge=0)


class Order(BaseModel):
    id: str = Field(default_factory=_new_id)
    customer_email: str
    items: list[OrderItem] = Field(min_length=1)
    status: OrderStatus = OrderStatus.PENDING
    created_at: datetime = Field(default_factory=_utcnow)
    shipped_at: datetime | None = None

    @field_validator("customer_email")
    @classmethod
    def _looks_like_email(cls, value: str) -> str:
        if not _EMAIL_RE.match(value):
            raise ValueError("customer_email is not a valid e-mail address")
        return value.lower()

    @computed_field
    @property
    def total_cents(self) -> int:
        return sum(item.quantity * item.unit_price_cents for item in self.items)


class OutboundEmail(BaseModel):
    id: str = Field(default_factory=_new_id)
    order_id: str
    to: str
    sender: str
    subject: str
    body: str
    sent_at: datetime = Field(default_factory=_utcnow)


class ActivityEntry(BaseModel):
    id: str = Field(default_factory=_new_id)
    order_id: str
    event_name: str
    recorded_at: datetime = Field(default_factory=_utcnow)


# ---------------------------------------------------------------------------
# Use-case results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of a use-case: a value on success, a list of errors otherwise."""

    value: T | None = None
    errors: list[dict[str, Any]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    @classmethod
    def success(cls, value: T) -> Result[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, errors: list[dict[str, Any]]) -> Result[T]:
        if not errors:
            raise ValueError("a failed Result needs at least one error")
        return cls(errors=list(errors))


# ---------------------------------------------------------------------------
# Request / Response DTOs
# ---------------------------------------------------------------------------


class CreateOrderRequest(BaseModel):
    customer_email: str
    items: list[OrderItem]


class SubscriptionsResponse(BaseModel):
    subscriptions: dict[str, list[str]]
