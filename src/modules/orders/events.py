"""Domain events for the Orders bounded context."""

from __future__ import annotations

from dataclasses import dataclass

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class OrderCreated(DomainEvent):
    """Raised when a PENDING order is persisted."""

    transaction_id: str = ""
    amount: str = ""


@dataclass(frozen=True)
class OrderApproved(DomainEvent):
    """Raised when the gateway approves an order's payment."""

    transaction_id: str = ""
    delivery_id: str = ""


@dataclass(frozen=True)
class OrderDeclined(DomainEvent):
    """Raised when the gateway declines an order's payment."""

    transaction_id: str = ""
