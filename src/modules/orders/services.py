"""Order service layer (Use Cases).

Orchestrates order creation as one all-or-nothing transaction:

1. Open a unit of work (one database transaction).
2. Lock the product row and read its price and stock.
3. Reject when the product is missing or holds too little stock.
4. Compute the VAT breakdown from the locked price.
5. Insert the order with the frozen price snapshot.
6. Decrement stock with a conditional update; a rejected decrement
   aborts the whole transaction, so the order row never survives it.
7. Commit.

Nothing is written on any failure path and nothing is retried.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Callable, Optional

import structlog
from django.conf import settings

from modules.orders.exceptions import (
    InsufficientStock,
    OrderNotFound,
    ProductNotFound,
    StorageFailure,
)
from modules.orders.dtos import CreatedOrder
from modules.products.dtos import ProductOutputDTO
from shared.domain.vat import compute_breakdown

if TYPE_CHECKING:
    from modules.orders.dtos import CreateOrderDTO
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository, IOrderUnitOfWork

logger = structlog.get_logger(__name__)


class OrderService:
    """Application service for Order use-cases.

    Receives a unit-of-work factory and the order repository via
    constructor injection (DIP).  Each ``create_order`` call gets a
    fresh unit of work, so calls never share transaction state.
    """

    def __init__(
        self,
        uow_factory: Callable[[], IOrderUnitOfWork],
        order_repository: IOrderRepository,
        tax_rate: Optional[Decimal] = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._order_repo = order_repository
        self._tax_rate = tax_rate if tax_rate is not None else settings.DEFAULT_VAT_RATE

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_order(self, dto: CreateOrderDTO) -> CreatedOrder:
        """Create an order and reserve its stock atomically.

        Raises:
            ProductNotFound: product does not exist.
            InsufficientStock: requested quantity exceeds stock, also
                when stock dropped between the read and the decrement.
            StorageFailure: the database failed or the commit did.
        """
        product_id = str(dto.product_id)
        log = logger.bind(product_id=product_id, quantity=dto.quantity)
        log.info("order.creation_started")

        try:
            with self._uow_factory() as uow:
                product = uow.get_product_for_update(product_id)
                if product is None:
                    raise ProductNotFound(f"Product {product_id} not found.")

                if dto.quantity > product.quantity:
                    log.info("order.insufficient_stock", available=product.quantity)
                    raise InsufficientStock(
                        f"Insufficient stock: requested {dto.quantity}, "
                        f"available {product.quantity}.",
                        available=product.quantity,
                        requested=dto.quantity,
                    )

                breakdown = compute_breakdown(
                    product.price_czk, dto.quantity, self._tax_rate
                )
                customer = dto.customer
                order = uow.insert_order(
                    {
                        "product_id": product.id,
                        "customer_name": customer.name,
                        "customer_email": customer.email,
                        "customer_phone": customer.phone,
                        "customer_address_line1": customer.address_line1,
                        "customer_address_line2": customer.address_line2,
                        "customer_city": customer.city,
                        "customer_country": customer.country,
                        "customer_zip_code": customer.zip_code,
                        "quantity": dto.quantity,
                        "unit_price_czk": product.price_czk,
                        "vat_rate": breakdown.tax_rate,
                        "subtotal_czk": breakdown.subtotal,
                        "vat_amount_czk": breakdown.tax_amount,
                        "total_price_czk": breakdown.total,
                    }
                )

                if not uow.decrement_product_quantity(product_id, dto.quantity):
                    log.warning("order.stock_changed_concurrently")
                    raise InsufficientStock(
                        "Insufficient stock: stock changed while the order was placed.",
                        requested=dto.quantity,
                    )

                product.quantity -= dto.quantity
                log.info(
                    "order.stock_reserved",
                    order_id=str(order.id),
                    remaining=product.quantity,
                )
        except StorageFailure:
            log.exception("order.storage_failed")
            raise

        log.info(
            "order.created",
            order_id=str(order.id),
            total_czk=str(order.total_price_czk),
        )
        return CreatedOrder(order=order, product=ProductOutputDTO.from_entity(product))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: str) -> Order:
        """Retrieve a single order by ID.

        Raises:
            OrderNotFound: if the order does not exist.
        """
        order = self._order_repo.get_by_id(order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order
