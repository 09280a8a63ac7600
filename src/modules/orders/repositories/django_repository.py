"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API.
All write operations are wrapped in ``transaction.atomic()`` so the Order
aggregate (Order + OrderItems + outbox rows) is persisted atomically.

Settlement reads use ``select_for_update()``: two concurrent settlements
of one order serialize on the row lock.
"""

from __future__ import annotations

import json
from dataclasses import asdict
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional
from uuid import UUID

import structlog
from django.core.exceptions import ValidationError
from django.db import models, transaction

from modules.core.exceptions import ConflictError
from modules.core.models import OutboxEvent
from modules.orders.models import Order, OrderItem, OrderStatusHistory
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)

RELATED = ("items__product", "status_history")


def _reference_filter(ref: str) -> models.Q:
    return models.Q(transaction_id=ref) | models.Q(order_id=ref)


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    def _queryset(self) -> "models.QuerySet[Order]":
        return (
            Order.objects.select_related("customer", "delivery")
            .prefetch_related(*RELATED)
        )

    # ------------------------------------------------------------------
    # Create (aggregate root + children)
    # ------------------------------------------------------------------

    @transaction.atomic
    def create(self, data: Dict[str, Any]) -> Order:
        """Create an order with its items atomically."""
        delivery = data["delivery_info"]
        order = Order(
            customer_id=data["customer_id"],
            delivery_first_name=delivery["first_name"],
            delivery_last_name=delivery["last_name"],
            delivery_address=delivery["address"],
            delivery_city=delivery["city"],
            delivery_state=delivery["state"],
            delivery_postal_code=delivery["postal_code"],
            delivery_phone=delivery["phone"],
            subtotal=data["subtotal"],
            base_fee=data["base_fee"],
            delivery_fee=data["delivery_fee"],
        )
        order.save()

        items = data["items"]
        OrderItem.objects.bulk_create(
            [
                OrderItem(
                    order=order,
                    product_id=item["product_id"],
                    quantity=item["quantity"],
                    position=position,
                )
                for position, item in enumerate(items)
            ]
        )

        logger.info(
            "order.persisted",
            order_id=str(order.id),
            transaction_id=order.transaction_id,
            item_count=len(items),
        )
        return order

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: str) -> Optional[Order]:
        """Retrieve an order with eager-loaded relations.

        ``select_related`` for customer and delivery (JOINs) and
        ``prefetch_related`` for items and history.  Returns ``None`` for
        non-existent or invalid IDs.
        """
        try:
            return self._queryset().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_by_reference(self, ref: str) -> Optional[Order]:
        return self._queryset().filter(_reference_filter(ref)).first()

    def list(self, filters: Optional[Dict[str, Any]] = None) -> "models.QuerySet[Order]":
        """List orders with optional filters.

        Supported filter keys include ``status``, ``customer_id`` and
        ``created_at__range``.
        """
        queryset = Order.objects.select_related("customer")
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    def get_for_update(self, id: str) -> Optional[Order]:
        """Retrieve an order with a row-level lock (SELECT FOR UPDATE).

        Must be called inside a transaction.  Returns ``None`` for
        non-existent or invalid IDs.
        """
        try:
            return (
                Order.objects.select_for_update()
                .prefetch_related("items")
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def get_for_update_by_reference(self, ref: str) -> Optional[Order]:
        return (
            Order.objects.select_for_update()
            .prefetch_related("items")
            .filter(_reference_filter(ref))
            .first()
        )

    # ------------------------------------------------------------------
    # Save / status (IRepository contract)
    # ------------------------------------------------------------------

    @transaction.atomic
    def save(self, entity: Order) -> Order:
        """Persist an order and move its pending domain events to the outbox."""
        entity.save()

        events = entity.domain_events
        for event in events:
            OutboxEvent.objects.create(
                event_type=event.event_name,
                aggregate_id=str(event.aggregate_id),
                payload=_serialize_event_payload(event),
                topic="orders",
            )
        entity.clear_domain_events()

        logger.info("order.saved", order_id=str(entity.id), event_count=len(events))
        return entity

    @transaction.atomic
    def update_status(self, order: Order, status: str, notes: str = "") -> Order:
        old_status = order.status
        if not order.can_transition_to(status):
            logger.warning(
                "order.transition_refused",
                order_id=str(order.id),
                old_status=old_status,
                new_status=status,
            )
            raise ConflictError(
                f"Order {order.transaction_id} cannot move from {old_status} to {status}."
            )
        order.status = status
        order.save(update_fields=["status"])
        self.add_history(order.id, status, notes=notes, old_status=old_status)
        return order

    @transaction.atomic
    def add_history(
        self,
        order_id: UUID,
        status: str,
        notes: str = "",
        old_status: Optional[str] = None,
    ) -> OrderStatusHistory:
        """Record a status write in the order's audit trail."""
        history = OrderStatusHistory.objects.create(
            order_id=order_id,
            old_status=old_status,
            new_status=status,
            notes=notes,
        )
        logger.info(
            "order.history_added",
            order_id=str(order_id),
            old_status=old_status,
            new_status=status,
        )
        return history


def _serialize_event_payload(event: Any) -> Dict[str, Any]:
    data = asdict(event)
    normalized = _normalize_for_json(data)
    return json.loads(json.dumps(normalized))


def _normalize_for_json(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, (UUID, Decimal)):
        return str(value)
    if isinstance(value, list):
        return [_normalize_for_json(item) for item in value]
    if isinstance(value, dict):
        return {key: _normalize_for_json(val) for key, val in value.items()}
    return value
