"""Order use-cases.  Each one publishes a domain event after it persists."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Mapping

from pydantic import ValidationError

from app.domain.bus import EventBus
from app.domain.events import ORDER_CREATED, ORDER_SHIPPED
from app.domain.models import Order, OrderStatus, Result
from app.repos.memory import OrderRepository

logger = logging.getLogger(__name__)

NOT_FOUND = "not_found"
ALREADY_SHIPPED = "already_shipped"


def create_order(
    params: Mapping[str, Any], repo: OrderRepository, bus: EventBus
) -> Result[Order]:
    """Validate and save a new order, then publish ``order.created``.

    Invalid params return a failed Result and publish nothing.  Subscriber
    errors are not caught here: they propagate as ``HandlerFailure`` after
    the order has been saved.
    """
    try:
        order = Order(**params)
    except ValidationError as exc:
        return Result.failure(
            [
                {"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]}
                for err in exc.errors()
            ]
        )

    repo.add(order)
    logger.info("Created order %s (%d items)", order.id, len(order.items))

    # Identifiers only; subscribers re-fetch current state.
    bus.publish(ORDER_CREATED, {"order_id": order.id})
    return Result.success(order)


def ship_order(
    order_id: str,
    repo: OrderRepository,
    bus: EventBus,
    now: datetime | None = None,
) -> Result[Order]:
    """Mark a pending order shipped and publish ``order.shipped``."""
    order = repo.get(order_id)
    if order is None:
        return Result.failure([{"type": NOT_FOUND, "msg": "Order not found"}])
    if order.status == OrderStatus.SHIPPED:
        return Result.failure(
            [{"type": ALREADY_SHIPPED, "msg": "Order has already shipped"}]
        )

    order.status = OrderStatus.SHIPPED
    order.shipped_at = now or datetime.now(timezone.utc)
    logger.info("Shipped order %s", order.id)

    bus.publish(ORDER_SHIPPED, {"order_id": order.id})
    return Result.success(order)
