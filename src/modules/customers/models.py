"""Customer model.

A customer is created on the first order placed with a given email and
reused by every later order with that email.  ``email`` carries a UNIQUE
constraint so concurrent first orders cannot create two rows.
"""

from __future__ import annotations

from django.db import models

from modules.core.models import BaseModel


class Customer(BaseModel):
    """Customer aggregate root.

    Email matching is case-insensitive: the resolver trims and lower-cases
    ``email`` before the look-up, and the stored value is that lower-case
    form rather than the casing of the first request.
    Profile fields are never overwritten by later orders.
    """

    name = models.CharField(max_length=255)
    email = models.EmailField(max_length=254, unique=True)
    address = models.TextField()

    class Meta:
        db_table = "customers"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["-created_at"], name="customers_created_idx"),
        ]

    def __str__(self) -> str:
        local, _, domain = self.email.partition("@")
        return f"{self.name} ({local[:1]}***@{domain})"
