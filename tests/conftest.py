from datetime import date
from decimal import Decimal

import pytest

from django.contrib.auth import get_user_model

from rest_framework.test import APIClient

from modules.customers.models import Customer
from modules.products.models import Product

User = get_user_model()

VISA_TEST_NUMBER = "4242424242424242"


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


@pytest.fixture()
def auth_client():
    """APIClient with a force-authenticated Django user."""
    client = APIClient()
    user = User.objects.create_user(username="storefront", password="testpass123")
    client.force_authenticate(user=user)
    return client


@pytest.fixture()
def card_payload():
    """Valid card body for process-payment / tokenize-card."""
    return {
        "card_number": VISA_TEST_NUMBER,
        "expiration_month": 12,
        "expiration_year": date.today().year + 2,
        "cvv": "123",
        "cardholder_name": "Ana Gomez",
    }


@pytest.fixture()
def delivery_info():
    return {
        "first_name": "Ana",
        "last_name": "Gomez",
        "address": "Calle 1 # 2-3",
        "city": "Bogota",
        "state": "Cundinamarca",
        "postal_code": "110111",
        "phone": "3001234567",
    }


@pytest.fixture()
def product():
    return Product.objects.create(
        name="Mechanical Keyboard",
        description="Tenkeyless, brown switches",
        price=Decimal("1000.00"),
        stock=10,
    )


@pytest.fixture()
def second_product():
    return Product.objects.create(
        name="USB-C Cable",
        price=Decimal("25.50"),
        stock=50,
    )


@pytest.fixture()
def customer():
    return Customer.objects.create(
        name="Ana Gomez",
        email="ana@example.com",
        address="Calle 1 # 2-3, Bogota",
    )
