"""Django ORM implementation of the Delivery repository."""

from __future__ import annotations

from typing import Any, Dict, Optional
from uuid import UUID

import structlog
from django.core.exceptions import ValidationError
from django.db import models, transaction

from modules.deliveries.models import Delivery, DeliveryStatus
from modules.deliveries.repositories.interfaces import IDeliveryRepository

logger = structlog.get_logger(__name__)


class DeliveryDjangoRepository(IDeliveryRepository):
    """Concrete Delivery repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[Delivery]:
        """Returns ``None`` for non-existent or invalid IDs."""
        try:
            return Delivery.objects.select_related("order").filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> "models.QuerySet[Delivery]":
        queryset = Delivery.objects.select_related("order")
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    @transaction.atomic
    def save(self, entity: Delivery) -> Delivery:
        entity.save()
        logger.info("delivery.saved", delivery_id=str(entity.id), status=entity.status)
        return entity

    def create(self, order_id: UUID, customer_id: UUID) -> Delivery:
        """Insert a PENDING delivery.

        A second delivery for the same order violates the one-to-one
        constraint and raises ``IntegrityError``.
        """
        return Delivery.objects.create(
            order_id=order_id,
            customer_id=customer_id,
            status=DeliveryStatus.PENDING,
        )

    def get_by_order_id(self, order_id: str) -> Optional[Delivery]:
        try:
            return Delivery.objects.filter(order_id=order_id).first()
        except (ValueError, ValidationError):
            return None
