"""Product service layer (Use Cases).

Read-only catalogue queries.  Stock is never written here: the only
writer is order creation, through the conditional decrement in the
product repository.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from modules.products.exceptions import ProductNotFound

if TYPE_CHECKING:
    from django.db import models

    from modules.products.models import Product
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductService:
    """Application service for Product use-cases.

    Receives an ``IProductRepository`` via constructor injection (DIP).
    """

    def __init__(self, repository: IProductRepository) -> None:
        self._repo = repository

    def list_products(
        self, include_out_of_stock: bool = False
    ) -> "models.QuerySet[Product]":
        """Return products ordered by title, hiding sold-out ones by default."""
        filters = None if include_out_of_stock else {"quantity__gt": 0}
        products = self._repo.list(filters)
        logger.info(
            "product.listed",
            include_out_of_stock=include_out_of_stock,
        )
        return products

    def get_product(self, id: str) -> Product:
        """Retrieve a single product by ID.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")
        logger.info("product.retrieved", product_id=str(id))
        return product
