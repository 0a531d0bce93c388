"""Subscribers reacting to order events."""

from __future__ import annotations

import logging

from app.domain.events import ORDER_CREATED, ORDER_SHIPPED, Event
from app.domain.models import ActivityEntry, Order, OutboundEmail
from app.domain.subscriber import handles_event
from app.repos.memory import ActivityLog, MailOutbox, OrderRepository

logger = logging.getLogger(__name__)


def _fetch_order(order_repo: OrderRepository, event: Event) -> Order:
    order_id = event.payload["order_id"]
    order = order_repo.get(order_id)
    if order is None:
        raise LookupError(f"Order {order_id} not found")
    return order


@handles_event(ORDER_CREATED)
class SendConfirmationEmail:
    def __init__(
        self, order_repo: OrderRepository, outbox: MailOutbox, mail_sender: str
    ) -> None:
        self.order_repo = order_repo
        self.outbox = outbox
        self.mail_sender = mail_sender

    def call(self, event: Event) -> None:
        order = _fetch_order(self.order_repo, event)
        logger.info("Sending confirmation email for order %s", order.id)
        self.outbox.send(
            OutboundEmail(
                order_id=order.id,
                to=order.customer_email,
                sender=self.mail_sender,
                subject=f"Order {order.id} confirmed",
                body=(
                    f"Thanks for your order of {len(order.items)} item(s), "
                    f"total {order.total_cents / 100:.2f}."
                ),
            )
        )


@handles_event(ORDER_SHIPPED)
class SendShippingNotice:
    def __init__(
        self, order_repo: OrderRepository, outbox: MailOutbox, mail_sender: str
    ) -> None:
        self.order_repo = order_repo
        self.outbox = outbox
        self.mail_sender = mail_sender

    def call(self, event: Event) -> None:
        order = _fetch_order(self.order_repo, event)
        logger.info("Sending shipping notice for order %s", order.id)
        self.outbox.send(
            OutboundEmail(
                order_id=order.id,
                to=order.customer_email,
                sender=self.mail_sender,
                subject=f"Order {order.id} shipped",
                body=f"Your order shipped on {order.shipped_at:%Y-%m-%d}.",
            )
        )


@handles_event(ORDER_CREATED)
@handles_event(ORDER_SHIPPED)
class RecordOrderActivity:
    """Appends one activity entry per order event it sees."""

    def __init__(self, activity_log: ActivityLog) -> None:
        self.activity_log = activity_log

    def call(self, event: Event) -> None:
        self.activity_log.add(
            ActivityEntry(order_id=event.payload["order_id"], event_name=event.name)
        )


# Enumerated by bootstrap; order here is dispatch order within an event name.
SUBSCRIBERS: list[type] = [
    SendConfirmationEmail,
    SendShippingNotice,
    RecordOrderActivity,
]
