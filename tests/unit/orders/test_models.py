"""Unit tests for the Order model: identifiers, amount and state helpers."""

from __future__ import annotations

import re
from decimal import Decimal
from unittest.mock import patch

import pytest
from freezegun import freeze_time

from modules.orders.constants import OrderStatus
from modules.orders.models import Order, OrderStatusHistory

pytestmark = pytest.mark.unit


def _order(customer, **overrides) -> Order:
    values = {
        "customer": customer,
        "delivery_first_name": "Ana",
        "delivery_last_name": "Gomez",
        "delivery_address": "Calle 1 # 2-3",
        "delivery_city": "Bogota",
        "delivery_state": "Cundinamarca",
        "delivery_postal_code": "110111",
        "delivery_phone": "3001234567",
        "subtotal": Decimal("1000.00"),
        "base_fee": Decimal("50.00"),
        "delivery_fee": Decimal("100.00"),
    }
    values.update(overrides)
    order = Order(**values)
    order.save()
    return order


class TestIdentifiers:
    @freeze_time("2026-03-09 14:05:07")
    def test_identifiers_carry_creation_timestamp(self, customer):
        order = _order(customer)

        assert order.transaction_id.startswith("TXN-20260309140507-")
        assert order.order_id.startswith("ORD-20260309140507-")

    def test_generated_on_first_save_with_shared_suffix(self, customer):
        order = _order(customer)

        assert re.fullmatch(r"TXN-\d{14}-\d{4}", order.transaction_id)
        assert order.order_id == "ORD-" + order.transaction_id[4:]

    def test_not_regenerated_on_update(self, customer):
        order = _order(customer)
        transaction_id = order.transaction_id

        order.status = OrderStatus.APPROVED
        order.save(update_fields=["status"])

        assert order.transaction_id == transaction_id

    def test_collision_retries_with_new_identifiers(self, customer):
        first = _order(customer)
        taken = (first.transaction_id, first.order_id)
        fresh = ("TXN-20260101000000-0001", "ORD-20260101000000-0001")

        with patch.object(Order, "generate_identifiers", side_effect=[taken, fresh]):
            second = _order(customer)

        assert second.transaction_id == fresh[0]

    def test_gives_up_after_max_retries(self, customer):
        first = _order(customer)
        taken = (first.transaction_id, first.order_id)

        with patch.object(Order, "generate_identifiers", return_value=taken):
            with pytest.raises(RuntimeError):
                _order(customer)


class TestAmount:
    def test_amount_is_sum_of_parts(self, customer):
        order = _order(customer)
        order.refresh_from_db()

        assert order.amount == Decimal("1150.00")

    def test_amount_recomputed_on_partial_update(self, customer):
        order = _order(customer)

        order.delivery_fee = Decimal("0.00")
        order.save(update_fields=["delivery_fee"])
        order.refresh_from_db()

        assert order.amount == Decimal("1050.00")


class TestStateHelpers:
    @pytest.mark.parametrize(
        "status, terminal",
        [
            (OrderStatus.PENDING, False),
            (OrderStatus.APPROVED, True),
            (OrderStatus.DECLINED, True),
        ],
    )
    def test_is_terminal(self, status, terminal):
        assert Order(status=status).is_terminal is terminal

    def test_pending_may_move_anywhere(self):
        order = Order(status=OrderStatus.PENDING)

        assert order.can_transition_to(OrderStatus.APPROVED)
        assert order.can_transition_to(OrderStatus.DECLINED)
        assert order.can_transition_to(OrderStatus.PENDING)

    @pytest.mark.parametrize("status", [OrderStatus.APPROVED, OrderStatus.DECLINED])
    def test_terminal_states_have_no_exit(self, status):
        order = Order(status=status)

        assert not any(order.can_transition_to(s) for s in OrderStatus.values)


def test_delivery_info_property(customer):
    order = _order(customer)

    assert order.delivery_info["city"] == "Bogota"
    assert set(order.delivery_info) == {
        "first_name",
        "last_name",
        "address",
        "city",
        "state",
        "postal_code",
        "phone",
    }


def test_history_ordered_oldest_first(customer):
    order = _order(customer)
    OrderStatusHistory.objects.create(order=order, new_status=OrderStatus.PENDING)
    OrderStatusHistory.objects.create(
        order=order, old_status=OrderStatus.PENDING, new_status=OrderStatus.APPROVED
    )

    statuses = [h.new_status for h in order.status_history.all()]

    assert statuses == [OrderStatus.PENDING, OrderStatus.APPROVED]
