"""Unit tests for OrderService with a mocked unit of work.

Covers:
- Happy path: VAT breakdown, snapshot fields, remaining stock.
- Missing product and insufficient stock abort before any write.
- Rejected conditional decrement aborts the transaction.
- StorageFailure propagates unchanged.
- get_order: found / not found.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import MagicMock
from uuid import UUID, uuid4

import pytest

from modules.orders.dtos import CreateOrderDTO, CustomerDTO
from modules.orders.exceptions import (
    InsufficientStock,
    OrderNotFound,
    ProductNotFound,
    StorageFailure,
)
from modules.orders.services import OrderService

pytestmark = pytest.mark.unit


@dataclass
class StubProduct:
    id: UUID
    title: str
    price_czk: Decimal
    quantity: int
    description: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class StubOrder:
    id: UUID
    total_price_czk: Decimal


def _customer() -> CustomerDTO:
    return CustomerDTO(
        name="Jana Nováková",
        email="jana@example.cz",
        phone="+420 777 123 456",
        address_line1="Vinohradská 12",
        city="Praha",
        country="CZ",
        zip_code="120 00",
    )


def _dto(product_id: UUID, quantity: int) -> CreateOrderDTO:
    return CreateOrderDTO(product_id=product_id, quantity=quantity, customer=_customer())


@pytest.fixture()
def uow():
    mock = MagicMock()
    mock.__enter__.return_value = mock
    mock.__exit__.return_value = False
    mock.decrement_product_quantity.return_value = True
    mock.insert_order.side_effect = lambda data: StubOrder(
        id=uuid4(), total_price_czk=data["total_price_czk"]
    )
    return mock


@pytest.fixture()
def order_repo():
    return MagicMock()


@pytest.fixture()
def service(uow, order_repo):
    return OrderService(
        uow_factory=lambda: uow,
        order_repository=order_repo,
        tax_rate=Decimal("0.21"),
    )


@pytest.fixture()
def product():
    return StubProduct(
        id=uuid4(), title="Espresso grinder", price_czk=Decimal("1990.00"), quantity=5
    )


# ===========================================================================
# create_order
# ===========================================================================


class TestCreateOrder:
    def test_success_inserts_frozen_breakdown(self, service, uow, product):
        uow.get_product_for_update.return_value = product

        created = service.create_order(_dto(product.id, 2))

        data = uow.insert_order.call_args.args[0]
        assert data["product_id"] == product.id
        assert data["quantity"] == 2
        assert data["unit_price_czk"] == Decimal("1990.00")
        assert data["vat_rate"] == Decimal("0.21")
        assert data["subtotal_czk"] == Decimal("3980.00")
        assert data["vat_amount_czk"] == Decimal("835.80")
        assert data["total_price_czk"] == Decimal("4815.80")
        assert data["customer_email"] == "jana@example.cz"
        assert data["customer_address_line2"] is None
        assert created.order.total_price_czk == Decimal("4815.80")

    def test_success_decrements_and_reports_remaining_stock(self, service, uow, product):
        uow.get_product_for_update.return_value = product

        created = service.create_order(_dto(product.id, 2))

        uow.decrement_product_quantity.assert_called_once_with(str(product.id), 2)
        assert created.product.quantity == 3
        assert created.product.available is True

    def test_buying_the_last_units(self, service, uow, product):
        uow.get_product_for_update.return_value = product

        created = service.create_order(_dto(product.id, 5))

        assert created.product.quantity == 0
        assert created.product.available is False

    def test_locks_product_inside_unit_of_work(self, service, uow, product):
        uow.get_product_for_update.return_value = product
        service.create_order(_dto(product.id, 1))

        uow.__enter__.assert_called_once()
        uow.get_product_for_update.assert_called_once_with(str(product.id))
        uow.__exit__.assert_called_once()
        assert uow.__exit__.call_args.args[0] is None

    def test_missing_product_raises_without_writes(self, service, uow):
        uow.get_product_for_update.return_value = None

        with pytest.raises(ProductNotFound):
            service.create_order(_dto(uuid4(), 1))

        uow.insert_order.assert_not_called()
        uow.decrement_product_quantity.assert_not_called()

    def test_insufficient_stock_raises_without_writes(self, service, uow, product):
        uow.get_product_for_update.return_value = product

        with pytest.raises(InsufficientStock) as exc_info:
            service.create_order(_dto(product.id, 6))

        assert exc_info.value.available == 5
        assert exc_info.value.requested == 6
        uow.insert_order.assert_not_called()
        uow.decrement_product_quantity.assert_not_called()

    def test_rejected_decrement_aborts_transaction(self, service, uow, product):
        uow.get_product_for_update.return_value = product
        uow.decrement_product_quantity.return_value = False

        with pytest.raises(InsufficientStock):
            service.create_order(_dto(product.id, 2))

        exc_type = uow.__exit__.call_args.args[0]
        assert exc_type is InsufficientStock

    def test_storage_failure_propagates(self, service, uow, product):
        uow.get_product_for_update.return_value = product
        uow.insert_order.side_effect = StorageFailure("disk full")

        with pytest.raises(StorageFailure, match="disk full"):
            service.create_order(_dto(product.id, 1))

    def test_commit_failure_propagates(self, service, uow, product):
        uow.get_product_for_update.return_value = product
        uow.__exit__.side_effect = StorageFailure("Commit failed: connection lost")

        with pytest.raises(StorageFailure, match="Commit failed"):
            service.create_order(_dto(product.id, 1))

    def test_fresh_unit_of_work_per_call(self, order_repo, product):
        first, second = MagicMock(), MagicMock()
        for uow in (first, second):
            uow.__enter__.return_value = uow
            uow.__exit__.return_value = False
            uow.get_product_for_update.return_value = product
            uow.insert_order.return_value = StubOrder(
                id=uuid4(), total_price_czk=Decimal("2407.90")
            )
            uow.decrement_product_quantity.return_value = True
        factory = MagicMock(side_effect=[first, second])
        service = OrderService(uow_factory=factory, order_repository=order_repo)

        service.create_order(_dto(product.id, 1))
        service.create_order(_dto(product.id, 1))

        assert factory.call_count == 2
        first.insert_order.assert_called_once()
        second.insert_order.assert_called_once()

    def test_tax_rate_defaults_to_setting(self, settings, uow, order_repo, product):
        settings.DEFAULT_VAT_RATE = Decimal("0.12")
        uow.get_product_for_update.return_value = product
        service = OrderService(uow_factory=lambda: uow, order_repository=order_repo)

        service.create_order(_dto(product.id, 1))

        data = uow.insert_order.call_args.args[0]
        assert data["vat_rate"] == Decimal("0.12")
        assert data["vat_amount_czk"] == Decimal("238.80")


# ===========================================================================
# get_order
# ===========================================================================


class TestGetOrder:
    def test_returns_order(self, service, order_repo):
        order = StubOrder(id=uuid4(), total_price_czk=Decimal("10.00"))
        order_repo.get_by_id.return_value = order
        assert service.get_order(str(order.id)) is order

    def test_missing_raises(self, service, order_repo):
        order_repo.get_by_id.return_value = None
        with pytest.raises(OrderNotFound):
            service.get_order(str(uuid4()))
