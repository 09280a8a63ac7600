"""Unit tests for CardDataDTO validation."""

from __future__ import annotations

from datetime import date

import pytest
from freezegun import freeze_time
from pydantic import ValidationError

from modules.payments.dtos import CardDataDTO

pytestmark = pytest.mark.unit


def test_valid_card_is_normalized(card_payload):
    card_payload["card_number"] = " 4242-4242-4242-4242 "

    card = CardDataDTO(**card_payload)

    assert card.card_number == "4242424242424242"
    assert card.last_four == "4242"
    assert card.brand == "VISA"


def test_repr_hides_number_and_cvv(card_payload):
    text = repr(CardDataDTO(**card_payload))

    assert "4242424242424242" not in text
    assert "123" not in text


def test_two_digit_year_is_expanded(card_payload):
    card_payload["expiration_year"] = (date.today().year + 1) % 100

    assert CardDataDTO(**card_payload).expiration_year == date.today().year + 1


@pytest.mark.parametrize(
    "field, value",
    [
        ("card_number", "4242424242424241"),
        ("card_number", "4242abcd42424242"),
        ("expiration_month", 13),
        ("expiration_month", 0),
        ("cvv", "12"),
        ("cvv", "12a"),
        ("cardholder_name", "A"),
        ("cardholder_name", "Ana 123"),
    ],
)
def test_invalid_fields_rejected(card_payload, field, value):
    card_payload[field] = value

    with pytest.raises(ValidationError) as exc_info:
        CardDataDTO(**card_payload)

    assert exc_info.value.errors()[0]["loc"] == (field,)


def test_expired_card_rejected(card_payload):
    card_payload["expiration_year"] = date.today().year - 1

    with pytest.raises(ValidationError, match="Card is expired"):
        CardDataDTO(**card_payload)


@freeze_time("2026-06-15")
def test_card_expiring_this_month_is_accepted(card_payload):
    card_payload["expiration_month"] = 6
    card_payload["expiration_year"] = 2026

    assert CardDataDTO(**card_payload).expiration_year == 2026


@freeze_time("2026-06-15")
def test_card_expired_last_month_rejected(card_payload):
    card_payload["expiration_month"] = 5
    card_payload["expiration_year"] = 26

    with pytest.raises(ValidationError, match="Card is expired"):
        CardDataDTO(**card_payload)


def test_far_future_expiration_rejected(card_payload):
    card_payload["expiration_year"] = date.today().year + 31

    with pytest.raises(ValidationError, match="too far in the future"):
        CardDataDTO(**card_payload)


def test_dto_is_frozen(card_payload):
    card = CardDataDTO(**card_payload)

    with pytest.raises(ValidationError):
        card.cvv = "999"
