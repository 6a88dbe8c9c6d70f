"""Product model with stock control.

Business rules implemented:
- ``price_czk`` is tax-exclusive; VAT is added when an order is placed.
- ``quantity`` can never be negative (DB check constraint).  The only
  code path that lowers it is the conditional decrement performed by
  order creation (see ``ProductDjangoRepository.decrement_quantity``).
"""

from __future__ import annotations

from decimal import Decimal

import structlog
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import BaseModel

logger = structlog.get_logger(__name__)


class Product(BaseModel):
    """Sellable product, priced in CZK without VAT."""

    title = models.CharField(max_length=255)
    description = models.TextField(null=True, blank=True, default=None)  # noqa: DJ01
    price_czk = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    quantity = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = "products"
        ordering = ["title"]
        indexes = [
            models.Index(fields=["quantity"], name="products_quantity_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=0),
                name="products_quantity_non_negative",
            ),
            models.CheckConstraint(
                condition=models.Q(price_czk__gte=0),
                name="products_price_non_negative",
            ),
        ]

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def clean(self) -> None:
        super().clean()
        if self.price_czk is not None and self.price_czk < 0:
            raise ValidationError({"price_czk": "Price cannot be negative."})
        if self.quantity is not None and self.quantity < 0:
            raise ValidationError({"quantity": "Quantity cannot be negative."})

    @property
    def is_available(self) -> bool:
        return self.quantity > 0

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, *args, **kwargs) -> None:
        is_new = self._state.adding
        super().save(*args, **kwargs)
        if is_new:
            logger.info(
                "product_created",
                product_id=str(self.id),
                title=self.title,
            )

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return f"{self.title} ({self.price_czk} CZK)"
