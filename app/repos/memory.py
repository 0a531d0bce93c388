"""In-memory repositories for orders and the records handlers produce."""

from __future__ import annotations

from app.domain.models import ActivityEntry, Order, OutboundEmail


class OrderRepository:
    """Dict-backed store for Order instances, keyed by id."""

    def __init__(self) -> None:
        self._store: dict[str, Order] = {}

    def add(self, order: Order) -> None:
        self._store[order.id] = order

    def get(self, order_id: str) -> Order | None:
        return self._store.get(order_id)

    def list_all(self) -> list[Order]:
        return list(self._store.values())


class MailOutbox:
    """List-backed record of e-mails handed to the mailer."""

    def __init__(self) -> None:
        self._sent: list[OutboundEmail] = []

    def send(self, email: OutboundEmail) -> None:
        self._sent.append(email)

    def list_for_order(self, order_id: str) -> list[OutboundEmail]:
        return [e for e in self._sent if e.order_id == order_id]

    def list_all(self) -> list[OutboundEmail]:
        return list(self._sent)


class ActivityLog:
    """List-backed store for ActivityEntry instances."""

    def __init__(self) -> None:
        self._entries: list[ActivityEntry] = []

    def add(self, entry: ActivityEntry) -> None:
        self._entries.append(entry)

    def list_for_order(self, order_id: str) -> list[ActivityEntry]:
        return sorted(
            [e for e in self._entries if e.order_id == order_id],
            key=lambda e: e.recorded_at,
        )
