"""Order summary assembly.

Combines a stored order with foreign-currency conversions of its total.
CZK amounts are read straight from the order row (frozen at creation)
and never recomputed.  The rate source can only degrade the FX section:
when rates are unavailable the summary still renders, with every
conversion marked unavailable and the fetch error attached.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

import structlog

from modules.orders.dtos import (
    CzkTotalsDTO,
    FxTotalsDTO,
    OrderDetailDTO,
    OrderSummaryDTO,
    SummaryOrderDTO,
    SummaryTotalsDTO,
)
from modules.orders.exceptions import OrderNotFound
from modules.products.dtos import ProductOutputDTO

if TYPE_CHECKING:
    from modules.exchange.services import RateCache
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


class OrderSummaryAssembler:
    """Builds order read models enriched with CNB conversions."""

    def __init__(self, order_repository: IOrderRepository, rate_cache: RateCache) -> None:
        self._order_repo = order_repository
        self._rates = rate_cache

    def build_summary(self, order_id: str) -> OrderSummaryDTO:
        """Summary for the order confirmation page.

        Raises:
            OrderNotFound: unknown or malformed ``order_id``.
        """
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise OrderNotFound(f"Order {order_id} not found.")

        fetched = self._rates.fetch_rates()
        conversions = self._rates.convert(order.total_price_czk, fetched.rates)
        if not fetched.success:
            logger.warning(
                "order.summary_without_rates",
                order_id=str(order.id),
                error=fetched.error,
            )

        return OrderSummaryDTO(
            order=SummaryOrderDTO(
                id=order.id,
                created_at=order.created_at,
                product_id=order.product_id,
                product_title=order.product.title,
                quantity=order.quantity,
                customer_name=order.customer_name,
                customer_email=order.customer_email,
            ),
            totals=SummaryTotalsDTO(
                czk=CzkTotalsDTO(
                    subtotal=order.subtotal_czk,
                    vat_amount=order.vat_amount_czk,
                    vat_rate=order.vat_rate,
                    total=order.total_price_czk,
                ),
                fx=FxTotalsDTO(
                    available=conversions.any_available,
                    error=None if fetched.success else fetched.error,
                    rates_fetched_at=fetched.fetched_at,
                    conversions=conversions.conversions,
                ),
            ),
        )

    def build_detail(
        self, order: Order, product: Optional[ProductOutputDTO] = None
    ) -> OrderDetailDTO:
        """Full order with product and conversions of its total.

        ``product`` overrides the snapshot read from ``order.product``,
        e.g. with the post-decrement stock returned by order creation.
        """
        if product is None:
            product = ProductOutputDTO.from_entity(order.product)
        conversions = self._rates.fetch_and_convert(order.total_price_czk)
        return OrderDetailDTO.from_entity(order, product, conversions)
