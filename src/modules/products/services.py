"""Product service layer (Use Cases).

- ``InventoryGate``: stock availability check before an order is
  persisted, and the atomic decrement after its payment is approved.
- ``ProductService``: read queries for the products API.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Iterable, Optional, Protocol

import structlog

from modules.core.exceptions import InsufficientStockError, NotFoundError

if TYPE_CHECKING:
    from django.db import models

    from modules.products.models import Product
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class LineItem(Protocol):
    product_id: Any
    quantity: int


def requested_quantities(items: Iterable[LineItem]) -> Dict[str, int]:
    """Total quantity per product id, in first-seen order.

    A cart listing the same product twice is checked (and decremented)
    against the combined quantity.
    """
    totals: Dict[str, int] = {}
    for item in items:
        key = str(item.product_id)
        totals[key] = totals.get(key, 0) + item.quantity
    return totals


class InventoryGate:
    """Gate-keeps orders on current product stock."""

    def __init__(self, repository: IProductRepository) -> None:
        self._repo = repository

    def check_availability(self, items: Iterable[LineItem]) -> Dict[str, Product]:
        """Verify every product exists and has enough stock.

        Products are checked in cart order and the first failure wins.
        Returns the loaded products keyed by id so the caller can price
        the order with the same catalog snapshot.

        Raises:
            NotFoundError: a product does not exist.
            InsufficientStockError: a product's stock is below the request.
        """
        products: Dict[str, Product] = {}
        for product_id, quantity in requested_quantities(items).items():
            product = self._repo.get_by_id(product_id)
            if product is None:
                logger.warning("inventory.product_not_found", product_id=product_id)
                raise NotFoundError("product", product_id)
            if product.stock < quantity:
                logger.warning(
                    "inventory.insufficient_stock",
                    product_id=product_id,
                    requested=quantity,
                    available=product.stock,
                )
                raise InsufficientStockError(product_id, quantity, product.stock)
            products[product_id] = product
        return products

    def decrement(self, items: Iterable[LineItem]) -> None:
        """Atomically decrement stock for every product in the cart.

        Products are processed in id order so concurrent settlements lock
        rows in the same sequence.  Must run inside the caller's
        transaction: a failure part-way leaves earlier decrements to be
        rolled back by it.

        Raises:
            NotFoundError: a product vanished since the order was placed.
            InsufficientStockError: stock dropped below the ordered quantity.
        """
        for product_id, quantity in sorted(requested_quantities(items).items()):
            if self._repo.decrement_stock(product_id, quantity):
                continue
            product = self._repo.get_by_id(product_id)
            if product is None:
                raise NotFoundError("product", product_id)
            raise InsufficientStockError(product_id, quantity, product.stock)


class ProductService:
    """Application service for Product read use-cases.

    Receives an ``IProductRepository`` via constructor injection (DIP).
    """

    def __init__(self, repository: IProductRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_products(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> "models.QuerySet[Product]":
        """Return products, optionally filtered."""
        return self._repo.list(filters)

    def get_product(self, id: str) -> Product:
        """Retrieve a single product by ID.

        Raises:
            NotFoundError: if the product does not exist.
        """
        product = self._repo.get_by_id(id)
        if not product:
            raise NotFoundError("product", id)
        return product
