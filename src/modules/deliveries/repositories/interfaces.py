"""Delivery repository interface."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Optional
from uuid import UUID

from django.db import models

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.deliveries.models import Delivery


class IDeliveryRepository(IRepository["Delivery"]):
    """Repository contract for the Delivery entity."""

    @abstractmethod
    def list(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> "models.QuerySet[Delivery]":
        """List deliveries with optional filters."""

    @abstractmethod
    def create(self, order_id: UUID, customer_id: UUID) -> Delivery:
        """Insert a PENDING delivery for ``order_id``."""

    @abstractmethod
    def get_by_order_id(self, order_id: str) -> Optional[Delivery]:
        """Retrieve the delivery attached to an order, if any."""
