"""Order request validation.

``OrderValidator.validate`` runs its checks in a fixed order and stops at
the first failure, raising ``ValidationError`` with the offending field:

1. ``items``: non-empty list; each item has a non-empty ``product_id`` and
   a positive integer ``quantity`` no larger than the configured cap.
2. ``customer_name``: at least 2 characters after trimming.
3. ``customer_email``: non-empty and contains ``@``.
4. ``customer_address``: at least 5 characters after trimming.
5. ``delivery_info``: all seven sub-fields present and non-empty.  Integer
   values (a numeric postal code or phone) are accepted as text.

Text fields are also capped at the column lengths of the models they are
stored in.  The validator writes nothing.
"""

from __future__ import annotations

from typing import Any, Mapping

from modules.core.exceptions import ValidationError
from modules.customers.models import Customer
from modules.orders.constants import DELIVERY_INFO_FIELDS
from modules.orders.dtos import CreateOrderDTO, DeliveryInfoDTO, OrderItemDTO
from modules.orders.models import Order

MIN_CUSTOMER_NAME_LENGTH = 2
MIN_CUSTOMER_ADDRESS_LENGTH = 5


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _max_length(model, field_name: str) -> int:
    return model._meta.get_field(field_name).max_length


def _check_length(field: str, value: str, limit: int) -> None:
    if len(value) > limit:
        raise ValidationError(field, f"{field} must be at most {limit} characters.")


class OrderValidator:
    def __init__(self, max_item_quantity: int) -> None:
        self.max_item_quantity = max_item_quantity

    def validate(self, payload: Any) -> CreateOrderDTO:
        if not isinstance(payload, Mapping):
            raise ValidationError("body", "Request body must be a JSON object.")

        items = self._validate_items(payload.get("items"))

        customer_name = _text(payload.get("customer_name"))
        if len(customer_name) < MIN_CUSTOMER_NAME_LENGTH:
            raise ValidationError(
                "customer_name", "Customer name must be at least 2 characters."
            )
        _check_length("customer_name", customer_name, _max_length(Customer, "name"))

        customer_email = _text(payload.get("customer_email"))
        if not customer_email or "@" not in customer_email:
            raise ValidationError("customer_email", "A valid email address is required.")
        _check_length("customer_email", customer_email, _max_length(Customer, "email"))

        customer_address = _text(payload.get("customer_address"))
        if len(customer_address) < MIN_CUSTOMER_ADDRESS_LENGTH:
            raise ValidationError(
                "customer_address", "Customer address must be at least 5 characters."
            )

        return CreateOrderDTO(
            items=items,
            customer_name=customer_name,
            customer_email=customer_email,
            customer_address=customer_address,
            delivery_info=self._validate_delivery_info(payload.get("delivery_info")),
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _validate_items(self, raw_items: Any) -> tuple[OrderItemDTO, ...]:
        if not isinstance(raw_items, (list, tuple)) or not raw_items:
            raise ValidationError("items", "Order must contain at least one item.")

        items = []
        for index, raw in enumerate(raw_items):
            prefix = f"items[{index}]"
            if not isinstance(raw, Mapping):
                raise ValidationError(prefix, "Each item must be an object.")

            product_id = raw.get("product_id")
            product_id = str(product_id).strip() if product_id is not None else ""
            if not product_id:
                raise ValidationError(f"{prefix}.product_id", "Product id is required.")

            quantity = self._coerce_quantity(raw.get("quantity"))
            if quantity is None or quantity < 1:
                raise ValidationError(
                    f"{prefix}.quantity", "Quantity must be a positive integer."
                )
            if quantity > self.max_item_quantity:
                raise ValidationError(
                    f"{prefix}.quantity",
                    f"Quantity must not exceed {self.max_item_quantity}.",
                )
            items.append(OrderItemDTO(product_id=product_id, quantity=quantity))
        return tuple(items)

    @staticmethod
    def _coerce_quantity(value: Any) -> int | None:
        """Integral numbers only; ``True`` and ``2.5`` are rejected."""
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value
        if isinstance(value, float) and value.is_integer():
            return int(value)
        return None

    @staticmethod
    def _validate_delivery_info(raw: Any) -> DeliveryInfoDTO:
        if not isinstance(raw, Mapping):
            raise ValidationError("delivery_info", "Delivery information is required.")
        values = {}
        for name in DELIVERY_INFO_FIELDS:
            field = f"delivery_info.{name}"
            value = raw.get(name)
            if isinstance(value, int) and not isinstance(value, bool):
                value = str(value)
            elif value is not None and not isinstance(value, str):
                raise ValidationError(field, f"{name} must be a string.")
            value = (value or "").strip()
            if not value:
                raise ValidationError(field, f"{name} is required.")
            _check_length(field, value, _max_length(Order, f"delivery_{name}"))
            values[name] = value
        return DeliveryInfoDTO(**values)
