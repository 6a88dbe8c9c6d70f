"""Django ORM implementations of the Order repository and unit of work.

``DjangoOrderUnitOfWork`` wraps ``transaction.atomic()``: the product
row lock, the order insert and the conditional stock decrement all run
inside one database transaction.  Any ``DatabaseError`` raised while
working or while committing surfaces as ``StorageFailure``; the
transaction is rolled back by ``atomic`` before it propagates.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction

from modules.orders.exceptions import StorageFailure
from modules.orders.models import Order
from modules.orders.repositories.interfaces import IOrderRepository, IOrderUnitOfWork
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[Order]:
        """Retrieve an order with its product (single JOIN).

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return Order.objects.select_related("product").filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        queryset = Order.objects.select_related("product")
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)


class DjangoOrderUnitOfWork(IOrderUnitOfWork):
    """One order-creation transaction on the default database."""

    def __init__(self, product_repository: Optional[IProductRepository] = None) -> None:
        self._products = product_repository or ProductDjangoRepository()
        self._atomic: Optional[transaction.Atomic] = None

    def __enter__(self) -> DjangoOrderUnitOfWork:
        self._atomic = transaction.atomic()
        try:
            self._atomic.__enter__()
        except DatabaseError as exc:
            raise StorageFailure(f"Could not open transaction: {exc}") from exc
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        atomic, self._atomic = self._atomic, None
        try:
            atomic.__exit__(exc_type, exc, tb)
        except DatabaseError as commit_exc:
            if exc is not None:
                # rollback failed too; the original error is what matters
                logger.warning("order.rollback_failed", error=str(commit_exc))
                return False
            raise StorageFailure(f"Commit failed: {commit_exc}") from commit_exc
        if isinstance(exc, DatabaseError):
            raise StorageFailure(str(exc)) from exc
        return False

    def get_product_for_update(self, product_id: str) -> Optional[Product]:
        return self._products.get_for_update(product_id)

    def insert_order(self, data: Dict[str, Any]) -> Order:
        order = Order(**data)
        order.save()
        return order

    def decrement_product_quantity(self, product_id: str, amount: int) -> bool:
        return self._products.decrement_quantity(product_id, amount)
