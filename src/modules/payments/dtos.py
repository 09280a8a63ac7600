"""Payment DTOs.

``CardDataDTO`` is forwarded to the gateway and never persisted.  The
card number and CVV are excluded from ``repr`` so an accidental log of
the DTO cannot leak them.
"""

from __future__ import annotations

import re
from datetime import date

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from modules.payments.cards import card_brand, digits_only, luhn_is_valid

CARDHOLDER_NAME_PATTERN = re.compile(r"^[a-zA-Z\s\-']+$")
MAX_EXPIRATION_YEARS_AHEAD = 30


class CardDataDTO(BaseModel):
    """Card details submitted for settlement or tokenization."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    card_number: str = Field(repr=False)
    expiration_month: int
    expiration_year: int
    cvv: str = Field(repr=False)
    cardholder_name: str

    @field_validator("card_number")
    @classmethod
    def card_number_must_pass_luhn(cls, v: str) -> str:
        if re.search(r"[^\d\s-]", v):
            raise ValueError("Card number may only contain digits, spaces and hyphens.")
        if not luhn_is_valid(v):
            raise ValueError("Card number is invalid.")
        return digits_only(v)

    @field_validator("expiration_month")
    @classmethod
    def month_in_range(cls, v: int) -> int:
        if not 1 <= v <= 12:
            raise ValueError("Expiration month must be between 1 and 12.")
        return v

    @field_validator("expiration_year")
    @classmethod
    def expand_two_digit_year(cls, v: int) -> int:
        return 2000 + v if 0 <= v < 100 else v

    @field_validator("cvv")
    @classmethod
    def cvv_must_be_digits(cls, v: str) -> str:
        if not re.fullmatch(r"\d{3,4}", v):
            raise ValueError("CVV must be 3 or 4 digits.")
        return v

    @field_validator("cardholder_name")
    @classmethod
    def cardholder_name_must_be_letters(cls, v: str) -> str:
        if len(v) < 2 or not CARDHOLDER_NAME_PATTERN.match(v):
            raise ValueError("Cardholder name is invalid.")
        return v

    @model_validator(mode="after")
    def card_must_not_be_expired(self) -> CardDataDTO:
        today = date.today()
        if (self.expiration_year, self.expiration_month) < (today.year, today.month):
            raise ValueError("Card is expired.")
        if self.expiration_year > today.year + MAX_EXPIRATION_YEARS_AHEAD:
            raise ValueError("Card expiration year is too far in the future.")
        return self

    @property
    def last_four(self) -> str:
        return self.card_number[-4:]

    @property
    def brand(self) -> str:
        return card_brand(self.card_number)


class TokenizedCardDTO(BaseModel):
    """Gateway token for a card plus the non-sensitive card facts."""

    model_config = ConfigDict(frozen=True)

    token: str
    brand: str
    last_four: str
    expiration_month: int
    expiration_year: int
