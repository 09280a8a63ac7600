"""Unit tests for DeliveryAssigner."""

from __future__ import annotations

from decimal import Decimal

import pytest
from django.db import IntegrityError, transaction

from modules.deliveries.models import Delivery, DeliveryStatus
from modules.deliveries.repositories.django_repository import DeliveryDjangoRepository
from modules.deliveries.services import DeliveryAssigner
from modules.orders.models import Order

pytestmark = pytest.mark.unit


@pytest.fixture()
def order(customer):
    order = Order(
        customer=customer,
        delivery_first_name="Ana",
        delivery_last_name="Gomez",
        delivery_address="Calle 1 # 2-3",
        delivery_city="Bogota",
        delivery_state="Cundinamarca",
        delivery_postal_code="110111",
        delivery_phone="3001234567",
        subtotal=Decimal("1000.00"),
    )
    order.save()
    return order


@pytest.fixture()
def assigner():
    return DeliveryAssigner(DeliveryDjangoRepository())


def test_assign_creates_pending_delivery(assigner, order, customer):
    delivery = assigner.assign(order.id, customer.id)

    assert delivery.status == DeliveryStatus.PENDING
    assert delivery.order_id == order.id
    assert delivery.customer_id == customer.id


def test_second_delivery_for_same_order_is_rejected(assigner, order, customer):
    assigner.assign(order.id, customer.id)

    with pytest.raises(IntegrityError):
        with transaction.atomic():
            assigner.assign(order.id, customer.id)

    assert Delivery.objects.filter(order=order).count() == 1


def test_repository_looks_up_by_order(assigner, order, customer):
    delivery = assigner.assign(order.id, customer.id)

    assert DeliveryDjangoRepository().get_by_order_id(order.id) == delivery
