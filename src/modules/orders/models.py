"""Order, OrderItem, and OrderStatusHistory models.

- ``transaction_id`` / ``order_id`` are human-readable identifiers sharing
  one timestamp and random suffix (``TXN-YYYYMMDDHHMMSS-NNNN`` and
  ``ORD-YYYYMMDDHHMMSS-NNNN``), generated on first save.  The UUIDv7 ``id``
  is the internal reference.
- ``amount`` is always ``subtotal + base_fee + delivery_fee``, recalculated
  on every save.
- Every status write appends an ``OrderStatusHistory`` row.
- Customer and Product FKs use PROTECT to preserve financial history.
"""

from __future__ import annotations

import secrets
from decimal import Decimal
from typing import Any, Tuple

from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from modules.core.models import BaseModel
from modules.orders.constants import (
    IDENTIFIER_MAX_RETRIES,
    TERMINAL_STATES,
    VALID_TRANSITIONS,
    OrderStatus,
)
from shared.domain.events import DomainEventMixin

MONEY = {"max_digits": 14, "decimal_places": 2}


class Order(DomainEventMixin, BaseModel):
    """Order aggregate root (a.k.a. transaction)."""

    transaction_id = models.CharField(max_length=32, unique=True, editable=False)
    order_id = models.CharField(max_length=32, unique=True, editable=False)
    customer = models.ForeignKey(
        "customers.Customer",
        on_delete=models.PROTECT,
        related_name="orders",
    )
    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
    )

    delivery_first_name = models.CharField(max_length=100)
    delivery_last_name = models.CharField(max_length=100)
    delivery_address = models.CharField(max_length=255)
    delivery_city = models.CharField(max_length=100)
    delivery_state = models.CharField(max_length=100)
    delivery_postal_code = models.CharField(max_length=20)
    delivery_phone = models.CharField(max_length=30)

    subtotal = models.DecimalField(**MONEY, default=Decimal("0.00"))
    base_fee = models.DecimalField(**MONEY, default=Decimal("0.00"))
    delivery_fee = models.DecimalField(**MONEY, default=Decimal("0.00"))
    amount = models.DecimalField(**MONEY, default=Decimal("0.00"), editable=False)

    class Meta:
        db_table = "orders"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="orders_status_idx"),
            models.Index(fields=["-created_at"], name="orders_created_idx"),
        ]

    # ------------------------------------------------------------------
    # State Machine helpers
    # ------------------------------------------------------------------

    @property
    def is_terminal(self) -> bool:
        """Return ``True`` once the order is APPROVED or DECLINED."""
        return self.status in TERMINAL_STATES

    def can_transition_to(self, new_status: str) -> bool:
        return new_status in VALID_TRANSITIONS.get(self.status, set())

    # ------------------------------------------------------------------
    # Identifier generation
    # ------------------------------------------------------------------

    @staticmethod
    def generate_identifiers() -> Tuple[str, str]:
        """Return ``(transaction_id, order_id)`` with a shared suffix."""
        stamp = f"{timezone.now():%Y%m%d%H%M%S}-{secrets.randbelow(10_000):04d}"
        return f"TXN-{stamp}", f"ORD-{stamp}"

    def _assign_identifiers(self) -> None:
        for _ in range(IDENTIFIER_MAX_RETRIES):
            transaction_id, order_id = self.generate_identifiers()
            taken = Order.objects.filter(
                models.Q(transaction_id=transaction_id) | models.Q(order_id=order_id)
            ).exists()
            if not taken:
                self.transaction_id, self.order_id = transaction_id, order_id
                return
        raise RuntimeError(
            f"Failed to generate unique order identifiers after "
            f"{IDENTIFIER_MAX_RETRIES} attempts"
        )

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, *args: Any, **kwargs: Any) -> None:
        if not self.transaction_id:
            self._assign_identifiers()
        self.amount = self.subtotal + self.base_fee + self.delivery_fee
        update_fields = kwargs.get("update_fields")
        if update_fields is not None and "amount" not in update_fields:
            kwargs["update_fields"] = list(update_fields) + ["amount"]
        super().save(*args, **kwargs)

    @property
    def delivery_info(self) -> dict[str, str]:
        return {
            "first_name": self.delivery_first_name,
            "last_name": self.delivery_last_name,
            "address": self.delivery_address,
            "city": self.delivery_city,
            "state": self.delivery_state,
            "postal_code": self.delivery_postal_code,
            "phone": self.delivery_phone,
        }

    def __str__(self) -> str:
        return f"{self.transaction_id} ({self.status})"


class OrderItem(BaseModel):
    """Line item: one ``(product, quantity)`` pair, kept in cart order."""

    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="items",
    )
    product = models.ForeignKey(
        "products.Product",
        on_delete=models.PROTECT,
        related_name="order_items",
    )
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    position = models.PositiveSmallIntegerField(default=0)

    class Meta:
        db_table = "order_items"
        ordering = ["position"]
        constraints = [
            models.CheckConstraint(
                check=models.Q(quantity__gte=1),
                name="order_items_quantity_positive",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.product_id} x{self.quantity}"


class OrderStatusHistory(BaseModel):
    """Append-only audit trail of order status writes.

    ``old_status`` is ``None`` for the creation record.
    """

    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="status_history",
    )
    old_status = models.CharField(  # noqa: DJ01
        max_length=20,
        choices=OrderStatus.choices,
        null=True,
        blank=True,
    )
    new_status = models.CharField(max_length=20, choices=OrderStatus.choices)
    notes = models.TextField(blank=True, default="")

    class Meta:
        db_table = "order_status_history"
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(
                fields=["order", "created_at"],
                name="osh_order_created_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.order_id} : {self.old_status} -> {self.new_status}"
