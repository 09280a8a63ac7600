"""Unit tests for InventoryGate.

Covers:
- Availability check in cart order, first failure wins.
- Duplicate products are checked against the combined quantity.
- Decrement in product-id order; a rejected decrement is explained.
"""

from __future__ import annotations

from dataclasses import dataclass
from unittest.mock import MagicMock, call

import pytest

from modules.core.exceptions import InsufficientStockError, NotFoundError
from modules.orders.dtos import OrderItemDTO
from modules.products.services import InventoryGate, requested_quantities

pytestmark = pytest.mark.unit


@dataclass
class StubProduct:
    id: str
    stock: int


def _repo(**stock) -> MagicMock:
    repo = MagicMock()
    repo.get_by_id.side_effect = lambda pid: (
        StubProduct(id=pid, stock=stock[pid]) if pid in stock else None
    )
    return repo


def _items(*pairs):
    return [OrderItemDTO(product_id=pid, quantity=qty) for pid, qty in pairs]


def test_requested_quantities_merges_duplicates():
    assert requested_quantities(_items(("b", 1), ("a", 2), ("b", 3))) == {"b": 4, "a": 2}


class TestCheckAvailability:
    def test_returns_products_by_id(self):
        gate = InventoryGate(_repo(a=5, b=1))

        products = gate.check_availability(_items(("a", 5), ("b", 1)))

        assert list(products) == ["a", "b"]
        assert products["a"].stock == 5

    def test_missing_product(self):
        gate = InventoryGate(_repo(a=5))

        with pytest.raises(NotFoundError) as exc_info:
            gate.check_availability(_items(("a", 1), ("zzz", 1)))

        assert exc_info.value.ref == "zzz"

    def test_insufficient_stock_reports_available(self):
        gate = InventoryGate(_repo(a=3))

        with pytest.raises(InsufficientStockError) as exc_info:
            gate.check_availability(_items(("a", 5)))

        assert exc_info.value.requested == 5
        assert exc_info.value.available == 3

    def test_duplicates_checked_against_combined_quantity(self):
        gate = InventoryGate(_repo(a=3))

        with pytest.raises(InsufficientStockError):
            gate.check_availability(_items(("a", 2), ("a", 2)))

    def test_first_failure_wins(self):
        gate = InventoryGate(_repo(b=0))

        with pytest.raises(NotFoundError):
            gate.check_availability(_items(("a", 1), ("b", 1)))


class TestDecrement:
    def test_decrements_in_product_id_order(self):
        repo = MagicMock()
        repo.decrement_stock.return_value = True

        InventoryGate(repo).decrement(_items(("b", 1), ("a", 2), ("b", 1)))

        assert repo.decrement_stock.call_args_list == [call("a", 2), call("b", 2)]

    def test_rejected_decrement_raises_insufficient_stock(self):
        repo = _repo(a=0)
        repo.decrement_stock.return_value = False

        with pytest.raises(InsufficientStockError):
            InventoryGate(repo).decrement(_items(("a", 1)))

    def test_vanished_product_raises_not_found(self):
        repo = _repo()
        repo.decrement_stock.return_value = False

        with pytest.raises(NotFoundError):
            InventoryGate(repo).decrement(_items(("a", 1)))
