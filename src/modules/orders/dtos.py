"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.  They are the
contract between ``OrderValidator`` (which builds them from the raw
request) and ``OrderService``.  DTOs are immutable (``frozen=True``).
"""

from __future__ import annotations

from typing import Tuple

from pydantic import BaseModel, ConfigDict


class OrderItemDTO(BaseModel):
    """One validated cart line."""

    model_config = ConfigDict(frozen=True)

    product_id: str
    quantity: int


class DeliveryInfoDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    first_name: str
    last_name: str
    address: str
    city: str
    state: str
    postal_code: str
    phone: str


class CreateOrderDTO(BaseModel):
    """Validated order creation request (cart shape)."""

    model_config = ConfigDict(frozen=True)

    items: Tuple[OrderItemDTO, ...]
    customer_name: str
    customer_email: str
    customer_address: str
    delivery_info: DeliveryInfoDTO
