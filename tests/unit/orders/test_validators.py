"""Unit tests for OrderValidator.

Checks run in a fixed order and the first failing field is reported.
"""

from __future__ import annotations

import pytest

from modules.core.exceptions import ValidationError
from modules.orders.dtos import CreateOrderDTO
from modules.orders.validators import OrderValidator

pytestmark = pytest.mark.unit


@pytest.fixture()
def validator():
    return OrderValidator(max_item_quantity=100)


@pytest.fixture()
def payload(delivery_info):
    return {
        "items": [{"product_id": "p-1", "quantity": 2}],
        "customer_name": "Ana Gomez",
        "customer_email": "ana@example.com",
        "customer_address": "Calle 1 # 2-3",
        "delivery_info": delivery_info,
    }


def _field_of(validator, payload) -> str:
    with pytest.raises(ValidationError) as exc_info:
        validator.validate(payload)
    return exc_info.value.field


class TestValidPayload:
    def test_returns_trimmed_dto(self, validator, payload):
        payload["customer_name"] = "  Ana Gomez  "

        dto = validator.validate(payload)

        assert isinstance(dto, CreateOrderDTO)
        assert dto.customer_name == "Ana Gomez"
        assert dto.items[0].product_id == "p-1"
        assert dto.items[0].quantity == 2
        assert dto.delivery_info.city == "Bogota"

    def test_integral_float_quantity_is_accepted(self, validator, payload):
        payload["items"] = [{"product_id": "p-1", "quantity": 3.0}]

        assert validator.validate(payload).items[0].quantity == 3

    def test_quantity_at_cap_is_accepted(self, validator, payload):
        payload["items"] = [{"product_id": "p-1", "quantity": 100}]

        assert validator.validate(payload).items[0].quantity == 100


class TestItems:
    @pytest.mark.parametrize("items", [None, [], "p-1", {"product_id": "p-1"}])
    def test_missing_or_empty_items(self, validator, payload, items):
        payload["items"] = items
        assert _field_of(validator, payload) == "items"

    def test_non_object_item(self, validator, payload):
        payload["items"] = [{"product_id": "p-1", "quantity": 1}, "p-2"]
        assert _field_of(validator, payload) == "items[1]"

    @pytest.mark.parametrize("product_id", [None, "", "   "])
    def test_missing_product_id(self, validator, payload, product_id):
        payload["items"] = [{"product_id": product_id, "quantity": 1}]
        assert _field_of(validator, payload) == "items[0].product_id"

    @pytest.mark.parametrize("quantity", [0, -1, None, "2", 2.5, True])
    def test_invalid_quantity(self, validator, payload, quantity):
        payload["items"] = [{"product_id": "p-1", "quantity": quantity}]
        assert _field_of(validator, payload) == "items[0].quantity"

    def test_quantity_above_cap(self, validator, payload):
        payload["items"] = [{"product_id": "p-1", "quantity": 101}]

        with pytest.raises(ValidationError) as exc_info:
            validator.validate(payload)

        assert exc_info.value.message == "Quantity must not exceed 100."


class TestCustomerFields:
    def test_short_name(self, validator, payload):
        payload["customer_name"] = " A "
        assert _field_of(validator, payload) == "customer_name"

    @pytest.mark.parametrize("email", ["", "ana.example.com", None])
    def test_invalid_email(self, validator, payload, email):
        payload["customer_email"] = email
        assert _field_of(validator, payload) == "customer_email"

    def test_short_address(self, validator, payload):
        payload["customer_address"] = "abc"
        assert _field_of(validator, payload) == "customer_address"


class TestDeliveryInfo:
    def test_missing_delivery_info(self, validator, payload):
        del payload["delivery_info"]
        assert _field_of(validator, payload) == "delivery_info"

    @pytest.mark.parametrize("name", ["first_name", "postal_code", "phone"])
    def test_blank_sub_field(self, validator, payload, name):
        payload["delivery_info"][name] = "  "
        assert _field_of(validator, payload) == f"delivery_info.{name}"

    def test_numeric_postal_code_and_phone_are_accepted(self, validator, payload):
        payload["delivery_info"]["postal_code"] = 110111
        payload["delivery_info"]["phone"] = 3001234567

        dto = validator.validate(payload)

        assert dto.delivery_info.postal_code == "110111"
        assert dto.delivery_info.phone == "3001234567"

    @pytest.mark.parametrize("value", [True, 12.5, ["110111"], {"code": 1}])
    def test_non_text_sub_field(self, validator, payload, value):
        payload["delivery_info"]["postal_code"] = value

        with pytest.raises(ValidationError) as exc_info:
            validator.validate(payload)

        assert exc_info.value.field == "delivery_info.postal_code"
        assert exc_info.value.message == "postal_code must be a string."


class TestLengthLimits:
    @pytest.mark.parametrize(
        "name, limit",
        [("phone", 30), ("postal_code", 20), ("first_name", 100), ("address", 255)],
    )
    def test_delivery_field_at_column_length(self, validator, payload, name, limit):
        payload["delivery_info"][name] = "9" * limit

        assert getattr(validator.validate(payload).delivery_info, name) == "9" * limit

    @pytest.mark.parametrize(
        "name, limit",
        [("phone", 30), ("postal_code", 20), ("first_name", 100), ("address", 255)],
    )
    def test_delivery_field_over_column_length(self, validator, payload, name, limit):
        payload["delivery_info"][name] = "9" * (limit + 1)
        assert _field_of(validator, payload) == f"delivery_info.{name}"

    def test_email_at_254_is_accepted(self, validator, payload):
        email = "a" * 242 + "@example.com"
        payload["customer_email"] = email

        assert validator.validate(payload).customer_email == email

    def test_email_over_254(self, validator, payload):
        payload["customer_email"] = "a" * 243 + "@example.com"
        assert _field_of(validator, payload) == "customer_email"

    def test_name_over_255(self, validator, payload):
        payload["customer_name"] = "A" * 256
        assert _field_of(validator, payload) == "customer_name"


@pytest.mark.parametrize("body", [[[1, 2, 3]], "hello", None])
def test_non_object_body(validator, body):
    with pytest.raises(ValidationError) as exc_info:
        validator.validate(body)

    assert exc_info.value.field == "body"


def test_first_failure_wins(validator, payload):
    payload["items"] = [{"product_id": "p-1", "quantity": 0}]
    payload["customer_email"] = "invalid"

    assert _field_of(validator, payload) == "items[0].quantity"
