"""Order model.

Business rules implemented:
- One order buys ``quantity`` units of a single product.
- ``unit_price_czk`` and ``vat_rate`` are **snapshots** taken when the
  order is placed; later product price changes never touch them.
- ``subtotal_czk``, ``vat_amount_czk`` and ``total_price_czk`` are the
  frozen VAT breakdown computed at creation and are never recomputed.
- Product FK uses PROTECT to preserve financial history.
- Orders are written once by the creating transaction and are read-only
  afterwards.
"""

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import BaseModel
from modules.orders.constants import (
    CUSTOMER_ADDRESS_MAX_LENGTH,
    CUSTOMER_CITY_MAX_LENGTH,
    CUSTOMER_COUNTRY_MAX_LENGTH,
    CUSTOMER_EMAIL_MAX_LENGTH,
    CUSTOMER_NAME_MAX_LENGTH,
    CUSTOMER_PHONE_MAX_LENGTH,
    CUSTOMER_ZIP_CODE_MAX_LENGTH,
)


def _money_field() -> models.DecimalField:
    return models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )


class Order(BaseModel):
    """A placed order with its frozen CZK price breakdown."""

    product: models.ForeignKey = models.ForeignKey(
        "products.Product",
        on_delete=models.PROTECT,
        related_name="orders",
    )

    customer_name = models.CharField(max_length=CUSTOMER_NAME_MAX_LENGTH)
    customer_email = models.EmailField(max_length=CUSTOMER_EMAIL_MAX_LENGTH)
    customer_phone = models.CharField(max_length=CUSTOMER_PHONE_MAX_LENGTH)
    customer_address_line1 = models.CharField(max_length=CUSTOMER_ADDRESS_MAX_LENGTH)
    customer_address_line2 = models.CharField(  # noqa: DJ01
        max_length=CUSTOMER_ADDRESS_MAX_LENGTH, null=True, blank=True
    )
    customer_city = models.CharField(max_length=CUSTOMER_CITY_MAX_LENGTH)
    customer_country = models.CharField(max_length=CUSTOMER_COUNTRY_MAX_LENGTH)
    customer_zip_code = models.CharField(max_length=CUSTOMER_ZIP_CODE_MAX_LENGTH)

    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    unit_price_czk = _money_field()
    vat_rate = models.DecimalField(max_digits=5, decimal_places=4)
    subtotal_czk = _money_field()
    vat_amount_czk = _money_field()
    total_price_czk = _money_field()

    class Meta:
        db_table = "orders"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["-created_at"], name="orders_created_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="orders_quantity_positive",
            ),
        ]

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def clean(self) -> None:
        super().clean()
        if self.quantity is not None and self.quantity < 1:
            raise ValidationError({"quantity": "Quantity must be at least 1."})

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return f"Order {self.id} ({self.quantity}x, {self.total_price_czk} CZK)"
