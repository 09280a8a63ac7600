"""Delivery DRF serializers (output only)."""

from __future__ import annotations

from rest_framework import serializers

from modules.deliveries.models import Delivery


class DeliverySerializer(serializers.ModelSerializer):
    transaction_id = serializers.CharField(source="order.transaction_id", read_only=True)

    class Meta:
        model = Delivery
        fields = [
            "id",
            "order_id",
            "transaction_id",
            "customer_id",
            "status",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class DeliverySummarySerializer(serializers.ModelSerializer):
    """Compact form embedded in order responses."""

    class Meta:
        model = Delivery
        fields = ["id", "status", "created_at"]
        read_only_fields = fields
