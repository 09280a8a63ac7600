"""Order DRF serializers and request adapters (Interface layer).

Input validation is done by ``OrderValidator``; these serializers render
responses only.  ``adapt_legacy_payload`` normalises the single-item
request shape into the cart shape before validation.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping

from django.core.exceptions import ObjectDoesNotExist
from rest_framework import serializers

from modules.deliveries.serializers import DeliverySummarySerializer
from modules.orders.models import Order, OrderItem, OrderStatusHistory

# ---------------------------------------------------------------------------
# Request adapters
# ---------------------------------------------------------------------------


def adapt_legacy_payload(payload: Any) -> Any:
    """Turn a single ``product_id``/``quantity`` body into a one-item cart.

    Bodies that already carry ``items`` (or no ``product_id``) are returned
    unchanged apart from being copied into a plain dict.  A body that is not
    a JSON object is returned as is for ``OrderValidator`` to reject.
    """
    if not isinstance(payload, Mapping):
        return payload
    data: Dict[str, Any] = dict(payload)
    if "items" not in data and "product_id" in data:
        data["items"] = [
            {"product_id": data.pop("product_id"), "quantity": data.pop("quantity", None)}
        ]
    return data


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class OrderItemSerializer(serializers.ModelSerializer):
    """Line item with the current catalog name and unit price."""

    product_name = serializers.CharField(source="product.name", read_only=True)
    unit_price = serializers.DecimalField(
        source="product.price", max_digits=12, decimal_places=2, read_only=True
    )

    class Meta:
        model = OrderItem
        fields = ["product_id", "product_name", "unit_price", "quantity"]
        read_only_fields = fields


class StatusHistorySerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderStatusHistory
        fields = ["old_status", "new_status", "notes", "created_at"]
        read_only_fields = fields


class CustomerSummarySerializer(serializers.Serializer):
    id = serializers.UUIDField(read_only=True)
    name = serializers.CharField(read_only=True)
    email = serializers.EmailField(read_only=True)


class TransactionSerializer(serializers.ModelSerializer):
    """Full order representation returned by create, retrieve and settle."""

    customer = CustomerSummarySerializer(read_only=True)
    items = OrderItemSerializer(many=True, read_only=True)
    delivery_info = serializers.DictField(child=serializers.CharField(), read_only=True)
    delivery = serializers.SerializerMethodField()
    status_history = StatusHistorySerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "transaction_id",
            "order_id",
            "status",
            "subtotal",
            "base_fee",
            "delivery_fee",
            "amount",
            "customer",
            "items",
            "delivery_info",
            "delivery",
            "status_history",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_delivery(self, obj: Order) -> Dict[str, Any] | None:
        try:
            delivery = obj.delivery
        except ObjectDoesNotExist:
            return None
        return DeliverySummarySerializer(delivery).data


class TransactionListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for the order list (no nested relations)."""

    class Meta:
        model = Order
        fields = [
            "id",
            "transaction_id",
            "order_id",
            "customer_id",
            "status",
            "amount",
            "created_at",
        ]
        read_only_fields = fields
