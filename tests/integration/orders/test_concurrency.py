"""Concurrency integration tests.

Two races must not corrupt data:

- Settlements decrementing the same product: with **stock = 5** and 10
  workers each taking 1 unit, exactly 5 succeed, 5 raise
  ``InsufficientStockError`` and the final stock is 0.
- First orders from the same email: concurrent resolution yields a single
  ``Customer`` row shared by every worker.

Uses ``TransactionTestCase`` so each thread sees committed data on its own
connection.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from decimal import Decimal

import pytest
from django.db import connections, transaction
from django.test import TransactionTestCase

from modules.core.exceptions import InsufficientStockError
from modules.customers.models import Customer
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.customers.services import CustomerResolver
from modules.orders.dtos import OrderItemDTO
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.services import InventoryGate

pytestmark = pytest.mark.integration

logger = logging.getLogger(__name__)

INITIAL_STOCK = 5
NUM_WORKERS = 10


class TestStockDecrementConcurrency(TransactionTestCase):
    """Conditional stock decrement under concurrent settlements."""

    def setUp(self):
        self.product = Product.objects.create(
            name="Gaming Laptop",
            price=Decimal("2500.00"),
            stock=INITIAL_STOCK,
        )

    def _decrement_in_thread(self, worker_id: int) -> str:
        gate = InventoryGate(ProductDjangoRepository())
        try:
            with transaction.atomic():
                gate.decrement([OrderItemDTO(product_id=str(self.product.id), quantity=1)])
            logger.warning("Worker %d: stock decremented", worker_id)
            return "success"
        except InsufficientStockError:
            logger.warning("Worker %d: InsufficientStockError (expected)", worker_id)
            return "insufficient"
        finally:
            connections.close_all()

    def _run_workers(self) -> list[str]:
        with ThreadPoolExecutor(max_workers=NUM_WORKERS) as pool:
            futures = [
                pool.submit(self._decrement_in_thread, i) for i in range(NUM_WORKERS)
            ]
            return [future.result() for future in as_completed(futures)]

    def test_concurrent_decrements_exhaust_stock(self):
        """10 workers take 1 unit from stock=5: exactly 5 succeed."""
        results = self._run_workers()

        self.assertEqual(results.count("success"), INITIAL_STOCK)
        self.assertEqual(results.count("insufficient"), NUM_WORKERS - INITIAL_STOCK)

        self.product.refresh_from_db()
        self.assertEqual(self.product.stock, 0)

    def test_stock_never_negative(self):
        results = self._run_workers()

        self.product.refresh_from_db()
        self.assertGreaterEqual(self.product.stock, 0)
        self.assertEqual(INITIAL_STOCK, results.count("success") + self.product.stock)


class TestCustomerResolutionConcurrency(TransactionTestCase):
    """Find-or-create by email under concurrent first orders."""

    EMAIL = "Race@Example.com"

    def _resolve_in_thread(self, worker_id: int) -> str:
        resolver = CustomerResolver(CustomerDjangoRepository())
        try:
            customer = resolver.resolve(
                f"Worker {worker_id}", self.EMAIL, "Calle 1 # 2-3, Bogota"
            )
            return str(customer.id)
        finally:
            connections.close_all()

    def test_single_customer_row_per_email(self):
        with ThreadPoolExecutor(max_workers=NUM_WORKERS) as pool:
            futures = [
                pool.submit(self._resolve_in_thread, i) for i in range(NUM_WORKERS)
            ]
            customer_ids = {future.result() for future in as_completed(futures)}

        self.assertEqual(Customer.objects.filter(email="race@example.com").count(), 1)
        self.assertEqual(len(customer_ids), 1)
