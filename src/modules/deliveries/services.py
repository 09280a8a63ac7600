"""Delivery service layer.

- ``DeliveryAssigner``: creates the delivery of an approved order.
- ``DeliveryService``: read queries for the deliveries API.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional
from uuid import UUID

import structlog

from modules.core.exceptions import NotFoundError

if TYPE_CHECKING:
    from django.db import models

    from modules.deliveries.models import Delivery
    from modules.deliveries.repositories.interfaces import IDeliveryRepository

logger = structlog.get_logger(__name__)


class DeliveryAssigner:
    """Creates one PENDING delivery per approved order.

    Performs no duplicate check of its own; the settlement flow calls it
    exactly once per approval and the schema rejects a second row.
    """

    def __init__(self, repository: IDeliveryRepository) -> None:
        self._repo = repository

    def assign(self, order_id: UUID, customer_id: UUID) -> Delivery:
        delivery = self._repo.create(order_id=order_id, customer_id=customer_id)
        logger.info(
            "delivery.assigned",
            delivery_id=str(delivery.id),
            order_id=str(order_id),
            customer_id=str(customer_id),
        )
        return delivery


class DeliveryService:
    def __init__(self, repository: IDeliveryRepository) -> None:
        self._repo = repository

    def list_deliveries(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> "models.QuerySet[Delivery]":
        return self._repo.list(filters)

    def get_delivery(self, id: str) -> Delivery:
        """Raises ``NotFoundError`` if the delivery does not exist."""
        delivery = self._repo.get_by_id(id)
        if not delivery:
            raise NotFoundError("delivery", id)
        return delivery
