"""Order domain exceptions.

Raised by the Service Layer when business rules are violated.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.
"""

from __future__ import annotations

from modules.products.exceptions import ProductNotFound

__all__ = [
    "InsufficientStock",
    "OrderNotFound",
    "ProductNotFound",
    "StorageFailure",
]


class OrderNotFound(Exception):
    """The requested order does not exist."""


class InsufficientStock(Exception):
    """Not enough stock to fulfil the order (HTTP 409)."""

    def __init__(self, message: str, available: int | None = None, requested: int | None = None):
        super().__init__(message)
        self.available = available
        self.requested = requested


class StorageFailure(Exception):
    """The order transaction could not be committed for infrastructure reasons.

    Constraint violations, lost connections and commit failures all end
    up here.  Never retried by the service.
    """
