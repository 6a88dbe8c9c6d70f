"""Product DRF serializers for API output.

The serializer operates at the Interface layer (API Views).  Products
are read-only through the API: stock only changes through orders.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.products.models import Product


class ProductSerializer(serializers.ModelSerializer):
    """Read serializer for the Product resource."""

    available = serializers.BooleanField(source="is_available", read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "title",
            "description",
            "price_czk",
            "quantity",
            "available",
            "created_at",
        ]
        read_only_fields = fields
