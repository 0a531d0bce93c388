"""FastAPI application: entry point for the orders service."""

from __future__ import annotations

import logging

import uvicorn
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from app.config import configure_logging, load_settings
from app.domain.bootstrap import register_subscribers
from app.domain.bus import EventBus
from app.domain.errors import HandlerFailure
from app.domain.models import (
    ActivityEntry,
    CreateOrderRequest,
    Order,
    OutboundEmail,
    SubscriptionsResponse,
)
from app.domain.registry import Registry
from app.repos.memory import ActivityLog, MailOutbox, OrderRepository
from app.services.orders import NOT_FOUND, create_order, ship_order
from app.subscribers.orders import SUBSCRIBERS

logger = logging.getLogger(__name__)

settings = load_settings()
configure_logging(settings)

app = FastAPI(title=settings.app_title)

# ---------------------------------------------------------------------------
# Singletons (created at import time for simplicity)
# ---------------------------------------------------------------------------
registry = Registry()
event_bus = EventBus(registry)
order_repo = OrderRepository()
outbox = MailOutbox()
activity_log = ActivityLog()

register_subscribers(
    registry,
    SUBSCRIBERS,
    dependencies={
        "order_repo": order_repo,
        "outbox": outbox,
        "activity_log": activity_log,
        "mail_sender": settings.mail_sender,
    },
)


@app.exception_handler(HandlerFailure)
def handler_failure(request: Request, exc: HandlerFailure) -> JSONResponse:
    logger.error(
        "Subscriber %s failed on %r during %s %s",
        exc.descriptor.subscriber_type.__name__,
        exc.event.name,
        request.method,
        request.url.path,
        exc_info=exc,
    )
    return JSONResponse(
        status_code=500,
        content={"detail": "Event handler failed", "event": exc.event.name},
    )


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@app.post("/orders", response_model=Order, status_code=201)
def post_order(body: CreateOrderRequest) -> Order:
    """Create an order; subscribers to ``order.created`` run before responding."""
    result = create_order(body.model_dump(), order_repo, event_bus)
    if not result.ok:
        raise HTTPException(status_code=422, detail=result.errors)
    return result.value


@app.get("/orders", response_model=list[Order])
def list_orders() -> list[Order]:
    return order_repo.list_all()


@app.get("/orders/{order_id}", response_model=Order)
def get_order(order_id: str) -> Order:
    order = order_repo.get(order_id)
    if order is None:
        raise HTTPException(status_code=404, detail="Order not found")
    return order


@app.post("/orders/{order_id}/ship", response_model=Order)
def post_ship_order(order_id: str) -> Order:
    """Ship a pending order and publish ``order.shipped``."""
    result = ship_order(order_id, order_repo, event_bus)
    if not result.ok:
        error = result.errors[0]
        status = 404 if error["type"] == NOT_FOUND else 409
        raise HTTPException(status_code=status, detail=error["msg"])
    return result.value


@app.get("/orders/{order_id}/emails", response_model=list[OutboundEmail])
def list_order_emails(order_id: str) -> list[OutboundEmail]:
    if order_repo.get(order_id) is None:
        raise HTTPException(status_code=404, detail="Order not found")
    return outbox.list_for_order(order_id)


@app.get("/orders/{order_id}/activity", response_model=list[ActivityEntry])
def list_order_activity(order_id: str) -> list[ActivityEntry]:
    if order_repo.get(order_id) is None:
        raise HTTPException(status_code=404, detail="Order not found")
    return activity_log.list_for_order(order_id)


@app.get("/subscriptions", response_model=SubscriptionsResponse)
def list_subscriptions() -> SubscriptionsResponse:
    """Registered subscriber class names per event name, in dispatch order."""
    return SubscriptionsResponse(
        subscriptions={
            name: [d.subscriber_type.__name__ for d in registry.lookup(name)]
            for name in registry.event_names()
        }
    )


def run() -> None:
    """Serve the app with uvicorn on the configured host and port."""
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    run()
