"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF Serializers)
and the Service layer.  DTOs are immutable (``frozen=True``).

- ``CustomerDTO`` / ``CreateOrderDTO``: validated order creation input.
- ``CreatedOrder``: result of the order transaction (order + product
  snapshot).
- ``OrderDetailDTO``: full order with product and FX conversions.
- ``OrderSummaryDTO``: summary with CZK totals and an FX section that
  may be unavailable.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator

from modules.exchange.dtos import ConversionResult, CurrencyConversion
from modules.orders.constants import MAX_ORDER_QUANTITY
from modules.products.dtos import ProductOutputDTO

if TYPE_CHECKING:
    from modules.orders.models import Order


# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CustomerDTO(BaseModel):
    """Customer contact and delivery details (opaque to the core)."""

    model_config = ConfigDict(frozen=True)

    name: str
    email: str
    phone: str
    address_line1: str
    address_line2: Optional[str] = None
    city: str
    country: str
    zip_code: str


class CreateOrderDTO(BaseModel):
    """Immutable DTO for order creation requests."""

    model_config = ConfigDict(frozen=True)

    product_id: UUID
    quantity: int
    customer: CustomerDTO

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_in_range(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Quantity must be at least 1.")
        if v > MAX_ORDER_QUANTITY:
            raise ValueError(f"Quantity cannot exceed {MAX_ORDER_QUANTITY}.")
        return v


# ---------------------------------------------------------------------------
# Transaction result
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CreatedOrder:
    """Persisted order plus the product as left by the transaction."""

    order: Order
    product: ProductOutputDTO


# ---------------------------------------------------------------------------
# Output DTOs
# ---------------------------------------------------------------------------


class OrderDetailDTO(BaseModel):
    """Immutable DTO for full order API responses."""

    model_config = ConfigDict(frozen=True)

    id: UUID
    product_id: UUID
    customer_name: str
    customer_email: str
    customer_phone: str
    customer_address_line1: str
    customer_address_line2: Optional[str]
    customer_city: str
    customer_country: str
    customer_zip_code: str
    quantity: int
    unit_price_czk: Decimal
    subtotal_czk: Decimal
    vat_rate: Decimal
    vat_amount_czk: Decimal
    total_price_czk: Decimal
    created_at: datetime
    product: ProductOutputDTO
    fx_available: bool
    conversions: List[CurrencyConversion]

    @classmethod
    def from_entity(
        cls,
        order: Order,
        product: ProductOutputDTO,
        conversions: ConversionResult,
    ) -> OrderDetailDTO:
        return cls(
            id=order.id,
            product_id=order.product_id,
            customer_name=order.customer_name,
            customer_email=order.customer_email,
            customer_phone=order.customer_phone,
            customer_address_line1=order.customer_address_line1,
            customer_address_line2=order.customer_address_line2,
            customer_city=order.customer_city,
            customer_country=order.customer_country,
            customer_zip_code=order.customer_zip_code,
            quantity=order.quantity,
            unit_price_czk=order.unit_price_czk,
            subtotal_czk=order.subtotal_czk,
            vat_rate=order.vat_rate,
            vat_amount_czk=order.vat_amount_czk,
            total_price_czk=order.total_price_czk,
            created_at=order.created_at,
            product=product,
            fx_available=conversions.any_available,
            conversions=conversions.conversions,
        )


class SummaryOrderDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: UUID
    created_at: datetime
    product_id: UUID
    product_title: str
    quantity: int
    customer_name: str
    customer_email: str


class CzkTotalsDTO(BaseModel):
    """Frozen base-currency totals, read straight from the order row."""

    model_config = ConfigDict(frozen=True)

    subtotal: Decimal
    vat_amount: Decimal
    vat_rate: Decimal
    total: Decimal


class FxTotalsDTO(BaseModel):
    """Foreign-currency section; ``error`` explains why it is unavailable."""

    model_config = ConfigDict(frozen=True)

    available: bool
    error: Optional[str] = None
    rates_fetched_at: Optional[datetime] = None
    conversions: List[CurrencyConversion]


class SummaryTotalsDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    czk: CzkTotalsDTO
    fx: FxTotalsDTO


class OrderSummaryDTO(BaseModel):
    """Immutable DTO for the order summary (thank-you page) response."""

    model_config = ConfigDict(frozen=True)

    order: SummaryOrderDTO
    totals: SummaryTotalsDTO
