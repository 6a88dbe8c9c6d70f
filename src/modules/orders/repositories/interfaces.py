"""Order repository and unit-of-work interfaces.

The Service Layer depends exclusively on these contracts (DIP).

- ``IOrderRepository``: read side, used by views and the summary.
- ``IOrderUnitOfWork``: the storage port of order creation.  One
  instance is one transaction: entering it opens the transaction,
  leaving it normally commits, leaving it with an exception rolls
  everything back.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.orders.models import Order
    from modules.products.models import Product


class IOrderRepository(IRepository["Order"]):
    """Repository contract for placed orders (read-only after creation)."""

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[Order]:
        """Retrieve an order with its product eager-loaded.

        Returns ``None`` for non-existent or malformed IDs.
        """


class IOrderUnitOfWork(ABC):
    """Transactional storage port used by ``OrderService.create_order``.

    Implementations raise ``StorageFailure`` for infrastructure errors,
    including a failed commit on exit.
    """

    @abstractmethod
    def __enter__(self) -> IOrderUnitOfWork: ...

    @abstractmethod
    def __exit__(self, exc_type, exc, tb) -> bool: ...

    @abstractmethod
    def get_product_for_update(self, product_id: str) -> Optional[Product]:
        """Read a product and lock its row until the transaction ends."""

    @abstractmethod
    def insert_order(self, data: Dict[str, Any]) -> Order:
        """Insert one order row built from ``data`` field values."""

    @abstractmethod
    def decrement_product_quantity(self, product_id: str, amount: int) -> bool:
        """Conditionally lower stock; ``False`` when fewer than ``amount`` remain."""
