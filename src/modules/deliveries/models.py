"""Delivery model.

A delivery is created once, when an order's payment is approved.  The
one-to-one link on ``order`` rejects a second delivery for the same order
at the database level.
"""

from __future__ import annotations

from django.db import models

from modules.core.models import BaseModel


class DeliveryStatus(models.TextChoices):
    PENDING = "PENDING", "Pending"
    ASSIGNED = "ASSIGNED", "Assigned"
    SHIPPED = "SHIPPED", "Shipped"
    DELIVERED = "DELIVERED", "Delivered"


class Delivery(BaseModel):
    order = models.OneToOneField(
        "orders.Order",
        on_delete=models.PROTECT,
        related_name="delivery",
    )
    customer = models.ForeignKey(
        "customers.Customer",
        on_delete=models.PROTECT,
        related_name="deliveries",
    )
    status = models.CharField(
        max_length=20,
        choices=DeliveryStatus.choices,
        default=DeliveryStatus.PENDING,
    )

    class Meta:
        db_table = "deliveries"
        verbose_name_plural = "deliveries"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="deliveries_status_idx"),
        ]

    def __str__(self) -> str:
        return f"Delivery {self.id} for order {self.order_id} ({self.status})"
