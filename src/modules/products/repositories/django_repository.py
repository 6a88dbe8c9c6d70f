"""Django ORM implementation of the Product repository.

Satisfies ``IProductRepository`` using Django's QuerySet API.
Error handling follows the Null Object pattern: look-ups return ``None``
instead of raising HTTP-level exceptions — the Service Layer decides
how to translate a missing entity into an API response.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import F
from django.utils import timezone

from modules.products.models import Product
from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductDjangoRepository(IProductRepository):
    """Concrete Product repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[Product]:
        """Retrieve a product by primary key.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return Product.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> "models.QuerySet[Product]":
        """List products with optional Django ORM look-ups.

        Examples of valid filters::

            {"quantity__gt": 0}
            {"title__icontains": "kit"}
        """
        queryset = Product.objects.all().order_by("title")
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    def get_for_update(self, id: str) -> Optional[Product]:
        """Retrieve a product with a row-level lock (SELECT FOR UPDATE).

        Backends without row locks (SQLite) ignore ``select_for_update``;
        ``decrement_quantity`` still guards the stock there.
        """
        try:
            return Product.objects.select_for_update().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def decrement_quantity(self, id: str, amount: int) -> bool:
        """``UPDATE products SET quantity = quantity - n WHERE id = ? AND quantity >= n``."""
        updated = Product.objects.filter(id=id, quantity__gte=amount).update(
            quantity=F("quantity") - amount, updated_at=timezone.now()
        )
        if not updated:
            logger.warning(
                "product.decrement_rejected", product_id=str(id), amount=amount
            )
            return False
        return True
