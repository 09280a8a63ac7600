"""Domain exception taxonomy shared by every bounded context.

Raised by the Service Layer when a business rule is violated.  Each
exception carries an ``ErrorCode`` so the API layer (Views) can render a
machine-readable ``code`` next to the human ``detail`` message without
inspecting the exception type twice.

Services raise; they never catch and downgrade.  ``ConsistencyError`` is
never translated into a 4xx response.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any, Dict


class ErrorCode(StrEnum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    ORDER_NOT_FOUND = "ORDER_NOT_FOUND"
    PRODUCT_NOT_FOUND = "PRODUCT_NOT_FOUND"
    CUSTOMER_NOT_FOUND = "CUSTOMER_NOT_FOUND"
    DELIVERY_NOT_FOUND = "DELIVERY_NOT_FOUND"
    INSUFFICIENT_STOCK = "INSUFFICIENT_STOCK"
    PAYMENT_FAILED = "PAYMENT_FAILED"
    PAYMENT_TIMEOUT = "PAYMENT_TIMEOUT"
    ORDER_ALREADY_SETTLED = "ORDER_ALREADY_SETTLED"
    CONSISTENCY_ERROR = "CONSISTENCY_ERROR"


class DomainError(Exception):
    """Base class for every business error raised by a service."""

    code: ErrorCode

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def as_dict(self) -> Dict[str, Any]:
        """Response body used by the views: ``{"detail", "code"}``."""
        return {"detail": self.message, "code": str(self.code)}


class ValidationError(DomainError):
    """The request is malformed; ``field`` names the first failing field."""

    code = ErrorCode.VALIDATION_ERROR

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field

    def as_dict(self) -> Dict[str, Any]:
        return {**super().as_dict(), "field": self.field}


class NotFoundError(DomainError):
    """A referenced order, product, customer or delivery does not exist."""

    def __init__(self, resource: str, ref: Any = None) -> None:
        self.resource = resource
        self.ref = None if ref is None else str(ref)
        label = resource.capitalize()
        message = f"{label} {self.ref} not found." if self.ref else f"{label} not found."
        super().__init__(message)
        self.code = ErrorCode(f"{resource.upper()}_NOT_FOUND")


class InsufficientStockError(DomainError):
    """Requested quantity exceeds the product's available stock."""

    code = ErrorCode.INSUFFICIENT_STOCK

    def __init__(self, product_id: Any, requested: int, available: int | None = None):
        self.product_id = str(product_id)
        self.requested = requested
        self.available = available
        message = f"Insufficient stock for product {self.product_id}: requested {requested}"
        if available is not None:
            message += f", available {available}"
        super().__init__(message + ".")


class PaymentGatewayError(DomainError):
    """The card processor could not be reached or answered unexpectedly."""

    code = ErrorCode.PAYMENT_FAILED


class PaymentGatewayTimeout(PaymentGatewayError):
    """The card processor did not answer in time; the charge outcome is unknown."""

    code = ErrorCode.PAYMENT_TIMEOUT


class ConflictError(DomainError):
    """The order has already reached a terminal status."""

    code = ErrorCode.ORDER_ALREADY_SETTLED


class ConsistencyError(DomainError):
    """An internal invariant broke (e.g. a just-written row vanished)."""

    code = ErrorCode.CONSISTENCY_ERROR
