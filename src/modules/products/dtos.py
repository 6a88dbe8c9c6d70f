"""Product DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.  DTOs are
immutable (``frozen=True``).

- ``ProductOutputDTO``: product snapshot embedded in order responses.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:
    from modules.products.models import Product


class ProductOutputDTO(BaseModel):
    """Immutable DTO for product API responses."""

    model_config = ConfigDict(frozen=True)

    id: UUID
    title: str
    description: Optional[str]
    price_czk: Decimal
    quantity: int
    available: bool
    created_at: datetime

    @classmethod
    def from_entity(cls, product: Product) -> ProductOutputDTO:
        """Build an output DTO from a Product model instance."""
        return cls(
            id=product.id,
            title=product.title,
            description=product.description,
            price_czk=product.price_czk,
            quantity=product.quantity,
            available=product.quantity > 0,
            created_at=product.created_at,
        )
