"""Order repository interface.

Extends ``IRepository[Order]`` with the operations the creation and
settlement flows need: atomic creation with items, look-up by the human
identifiers, row-locked reads, status writes with an audit trail.

The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Optional
from uuid import UUID

from django.db import models

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.orders.models import Order, OrderStatusHistory


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root.

    The aggregate includes OrderItem children and OrderStatusHistory
    records.  Mutations must be atomic.
    """

    @abstractmethod
    def create(self, data: Dict[str, Any]) -> Order:
        """Create a PENDING order with its items atomically.

        ``data`` must include ``customer_id``, ``items`` (list of dicts with
        ``product_id`` and ``quantity``), ``delivery_info`` (dict of the
        seven delivery fields), ``subtotal``, ``base_fee`` and
        ``delivery_fee``.
        """

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> "models.QuerySet[Order]":
        """List orders with optional filters."""

    @abstractmethod
    def get_by_reference(self, ref: str) -> Optional[Order]:
        """Retrieve an order by ``transaction_id`` or ``order_id``."""

    @abstractmethod
    def get_for_update(self, id: str) -> Optional[Order]:
        """Retrieve an order by internal id with a row-level lock."""

    @abstractmethod
    def get_for_update_by_reference(self, ref: str) -> Optional[Order]:
        """Row-locked look-up by ``transaction_id`` or ``order_id``."""

    @abstractmethod
    def update_status(self, order: Order, status: str, notes: str = "") -> Order:
        """Write ``status``, bump ``updated_at`` and append a history record.

        Raises:
            ConflictError: ``status`` is not reachable from the current one.
        """

    @abstractmethod
    def add_history(
        self,
        order_id: UUID,
        status: str,
        notes: str = "",
        old_status: Optional[str] = None,
    ) -> OrderStatusHistory:
        """Record a status write in the order's audit trail."""
