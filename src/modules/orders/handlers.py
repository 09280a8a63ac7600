"""Event handlers for Orders domain events."""

from __future__ import annotations

import structlog

from modules.orders.events import OrderApproved, OrderCreated, OrderDeclined
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class OrderCreatedHandler(IEventHandler[OrderCreated]):
    def handle(self, event: OrderCreated) -> None:
        logger.info(
            "order.event.created",
            order_id=str(event.aggregate_id),
            transaction_id=event.transaction_id,
            amount=event.amount,
        )


class OrderApprovedHandler(IEventHandler[OrderApproved]):
    def handle(self, event: OrderApproved) -> None:
        logger.info(
            "order.event.approved",
            order_id=str(event.aggregate_id),
            transaction_id=event.transaction_id,
            delivery_id=event.delivery_id,
        )


class OrderDeclinedHandler(IEventHandler[OrderDeclined]):
    def handle(self, event: OrderDeclined) -> None:
        logger.info(
            "order.event.declined",
            order_id=str(event.aggregate_id),
            transaction_id=event.transaction_id,
        )


order_created_handler = OrderCreatedHandler()
order_approved_handler = OrderApprovedHandler()
order_declined_handler = OrderDeclinedHandler()
