"""Card number helpers: Luhn checksum and brand detection."""

from __future__ import annotations

import re

CARD_BRAND_PATTERNS = (
    ("VISA", re.compile(r"^4\d{12}(?:\d{3})?$")),
    ("MASTERCARD", re.compile(r"^5[1-5]\d{14}$")),
    ("AMEX", re.compile(r"^3[47]\d{13}$")),
    ("DISCOVER", re.compile(r"^6(?:011|5\d{2})\d{12}$")),
)

UNKNOWN_BRAND = "UNKNOWN"


def digits_only(value: str) -> str:
    return re.sub(r"\D", "", value)


def luhn_is_valid(number: str) -> bool:
    """Luhn checksum over a 13 to 19 digit card number."""
    digits = digits_only(number)
    if not 13 <= len(digits) <= 19:
        return False
    total = 0
    for position, char in enumerate(reversed(digits)):
        digit = int(char)
        if position % 2:
            digit *= 2
            if digit > 9:
                digit -= 9
        total += digit
    return total % 10 == 0


def card_brand(number: str) -> str:
    digits = digits_only(number)
    for brand, pattern in CARD_BRAND_PATTERNS:
        if pattern.match(digits):
            return brand
    return UNKNOWN_BRAND
