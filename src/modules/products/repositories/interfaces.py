"""Product repository interface.

Extends ``IRepository[Product]`` with the row lock and the conditional
stock decrement used by order creation.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Optional

from django.db import models

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.products.models import Product


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product aggregate."""

    @abstractmethod
    def list(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> "models.QuerySet[Product]":
        """List products with optional filters."""

    @abstractmethod
    def get_for_update(self, id: str) -> Optional["Product"]:
        """Retrieve a product with a row-level lock (SELECT FOR UPDATE).

        Must be called inside a transaction.  Returns ``None`` if the
        product does not exist.
        """

    @abstractmethod
    def decrement_quantity(self, id: str, amount: int) -> bool:
        """Atomically lower stock by ``amount`` if enough is available.

        Returns ``False`` (and changes nothing) when the product holds
        fewer than ``amount`` units.
        """
