"""Unit tests for the Luhn checksum and brand detection."""

from __future__ import annotations

import pytest

from modules.payments.cards import card_brand, digits_only, luhn_is_valid

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    "number",
    ["4242424242424242", "4242 4242 4242 4242", "5555555555554444", "378282246310005"],
)
def test_valid_numbers_pass_luhn(number):
    assert luhn_is_valid(number)


@pytest.mark.parametrize("number", ["4242424242424241", "424242424242", "0" * 20, ""])
def test_invalid_numbers_fail_luhn(number):
    assert not luhn_is_valid(number)


@pytest.mark.parametrize(
    "number, brand",
    [
        ("4242424242424242", "VISA"),
        ("5555555555554444", "MASTERCARD"),
        ("378282246310005", "AMEX"),
        ("6011111111111117", "DISCOVER"),
        ("3530111333300000", "UNKNOWN"),
    ],
)
def test_card_brand(number, brand):
    assert card_brand(number) == brand


def test_digits_only():
    assert digits_only("4242-4242 4242") == "424242424242"
