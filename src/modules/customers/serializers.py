"""Customer DRF serializers (output only).

Customers are created by order intake, never through this resource.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.customers.models import Customer


class CustomerSerializer(serializers.ModelSerializer):
    """Read serializer for the Customer resource."""

    class Meta:
        model = Customer
        fields = [
            "id",
            "name",
            "email",
            "address",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
