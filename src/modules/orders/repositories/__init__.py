"""Order repositories package."""

from modules.orders.repositories.django_repository import (
    DjangoOrderUnitOfWork,
    OrderDjangoRepository,
)
from modules.orders.repositories.interfaces import IOrderRepository, IOrderUnitOfWork

__all__ = [
    "DjangoOrderUnitOfWork",
    "IOrderRepository",
    "IOrderUnitOfWork",
    "OrderDjangoRepository",
]
