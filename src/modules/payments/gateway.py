"""Payment gateway port.

The settlement flow depends on ``PaymentGateway`` only; the concrete
backend (``mock`` or ``http``) is chosen from settings by
``build_payment_gateway``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal
from enum import StrEnum
from typing import TYPE_CHECKING

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

if TYPE_CHECKING:
    from modules.payments.dtos import CardDataDTO, TokenizedCardDTO


class GatewayVerdict(StrEnum):
    APPROVED = "APPROVED"
    DECLINED = "DECLINED"
    PENDING = "PENDING"

    @classmethod
    def from_gateway_status(cls, value: object) -> GatewayVerdict:
        """Map a processor status; anything unrecognised is PENDING."""
        if value == cls.APPROVED:
            return cls.APPROVED
        if value == cls.DECLINED:
            return cls.DECLINED
        return cls.PENDING


class PaymentGateway(ABC):
    """Card-processing capability used by settlement and tokenization.

    Implementations raise ``PaymentGatewayError`` (or its
    ``PaymentGatewayTimeout`` subtype) for transport, protocol and
    unexpected-response failures; a decline is a verdict, not an error.
    """

    @abstractmethod
    def tokenize_card(self, card: CardDataDTO) -> TokenizedCardDTO:
        """Exchange raw card data for a gateway token."""

    @abstractmethod
    def charge(
        self,
        reference: str,
        amount: Decimal,
        card: CardDataDTO,
        customer_email: str,
    ) -> GatewayVerdict:
        """Submit a single charge.  No retry is performed."""


def build_payment_gateway() -> PaymentGateway:
    """Instantiate the backend named by ``PAYMENT_GATEWAY_BACKEND``."""
    backend = settings.PAYMENT_GATEWAY_BACKEND
    if backend == "mock":
        from modules.payments.mock_gateway import MockPaymentGateway

        return MockPaymentGateway(decline_threshold=settings.PAYMENT_MOCK_DECLINE_THRESHOLD)
    if backend == "http":
        from modules.payments.http_gateway import HttpPaymentGateway

        if not settings.PAYMENT_API_URL:
            raise ImproperlyConfigured("PAYMENT_API_URL is required for the http gateway.")
        return HttpPaymentGateway(
            api_url=settings.PAYMENT_API_URL,
            public_key=settings.PAYMENT_PUBLIC_KEY,
            private_key=settings.PAYMENT_PRIVATE_KEY,
            currency=settings.PAYMENT_CURRENCY,
            timeout=settings.PAYMENT_TIMEOUT_SECONDS,
        )
    raise ImproperlyConfigured(f"Unknown PAYMENT_GATEWAY_BACKEND {backend!r}.")
