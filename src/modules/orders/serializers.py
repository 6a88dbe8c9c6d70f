"""Order DRF serializers for API input.

The serializer operates at the Interface layer (API Views).
Business logic lives in the Service Layer, which receives
Pydantic DTOs from ``dtos.py``.  Responses are rendered from the
output DTOs, so there are no read serializers here.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.orders.constants import (
    CUSTOMER_ADDRESS_MAX_LENGTH,
    CUSTOMER_CITY_MAX_LENGTH,
    CUSTOMER_COUNTRY_MAX_LENGTH,
    CUSTOMER_EMAIL_MAX_LENGTH,
    CUSTOMER_NAME_MAX_LENGTH,
    CUSTOMER_PHONE_MAX_LENGTH,
    CUSTOMER_ZIP_CODE_MAX_LENGTH,
    MAX_ORDER_QUANTITY,
)


class CustomerSerializer(serializers.Serializer):
    """Validates the buyer's contact and delivery details."""

    name = serializers.CharField(max_length=CUSTOMER_NAME_MAX_LENGTH)
    email = serializers.EmailField(max_length=CUSTOMER_EMAIL_MAX_LENGTH)
    phone = serializers.CharField(max_length=CUSTOMER_PHONE_MAX_LENGTH)
    address_line1 = serializers.CharField(max_length=CUSTOMER_ADDRESS_MAX_LENGTH)
    address_line2 = serializers.CharField(
        max_length=CUSTOMER_ADDRESS_MAX_LENGTH,
        required=False,
        allow_blank=True,
        allow_null=True,
        default=None,
    )
    city = serializers.CharField(max_length=CUSTOMER_CITY_MAX_LENGTH)
    country = serializers.CharField(max_length=CUSTOMER_COUNTRY_MAX_LENGTH)
    zip_code = serializers.CharField(max_length=CUSTOMER_ZIP_CODE_MAX_LENGTH)

    def validate_address_line2(self, value):
        return value or None


class CreateOrderSerializer(serializers.Serializer):
    """Validates the order creation request payload."""

    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1, max_value=MAX_ORDER_QUANTITY)
    customer = CustomerSerializer()
