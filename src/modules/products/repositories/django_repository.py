"""Django ORM implementation of the Product repository.

Satisfies ``IProductRepository`` using Django's QuerySet API.
Look-ups return ``None`` for missing or malformed IDs; the Service
Layer turns that into a ``NotFoundError``.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import models, transaction
from django.db.models import F
from django.utils import timezone

from modules.products.models import Product
from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductDjangoRepository(IProductRepository):
    """Concrete Product repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[Product]:
        """Retrieve a product by primary key.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return Product.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> "models.QuerySet[Product]":
        """List products with optional Django ORM look-ups.

        Examples of valid filters::

            {"stock__gt": 0}
            {"name__icontains": "keyboard"}
        """
        queryset = Product.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    @transaction.atomic
    def save(self, entity: Product) -> Product:
        """Persist (create or update) a product."""
        entity.save()
        logger.info("product.saved", product_id=str(entity.id))
        return entity

    def decrement_stock(self, id: str, quantity: int) -> bool:
        """``UPDATE products SET stock = stock - q WHERE id = :id AND stock >= q``.

        Two concurrent decrements can never jointly overdraw stock: the
        second one matches zero rows once the first has committed.
        """
        try:
            updated = Product.objects.filter(id=id, stock__gte=quantity).update(
                stock=F("stock") - quantity,
                updated_at=timezone.now(),
            )
        except (ValueError, ValidationError):
            return False
        logger.info(
            "product.stock_decremented" if updated else "product.stock_decrement_rejected",
            product_id=str(id),
            quantity=quantity,
        )
        return updated == 1
