"""Product repository interface.

Extends ``IRepository[Product]`` with the atomic stock decrement used
after a payment is approved.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Optional

from django.db import models

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.products.models import Product


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product aggregate."""

    @abstractmethod
    def list(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> "models.QuerySet[Product]":
        """List products with optional filters."""

    @abstractmethod
    def decrement_stock(self, id: str, quantity: int) -> bool:
        """Subtract ``quantity`` from stock only if enough remains.

        Compare-and-decrement in a single statement.  Returns ``False`` when
        no row was updated (product missing or stock below ``quantity``).
        """
