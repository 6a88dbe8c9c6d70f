"""Integration tests for the order creation endpoint.

Covers:
- 201: order persisted with frozen VAT breakdown, stock decremented,
  conversions attached (or marked unavailable when CNB is down).
- 400: payload validation with the ``Validation failed`` envelope.
- 404: unknown product.
- 409: insufficient stock, nothing written.
- 500: storage failure, generic message.
"""

from __future__ import annotations

from decimal import Decimal

import pytest
from django.db import DatabaseError

from modules.orders.models import Order
from modules.products.models import Product

pytestmark = pytest.mark.integration

URL = "/api/v1/orders/"


@pytest.fixture()
def product(make_product):
    return make_product(price_czk=Decimal("1990.00"), quantity=5)


@pytest.fixture()
def payload(product, customer_payload):
    return {
        "product_id": str(product.id),
        "quantity": 2,
        "customer": customer_payload,
    }


class TestCreateOrderSuccess:
    def test_returns_201_with_breakdown(self, api_client, payload, cnb_ok):
        response = api_client.post(URL, payload, format="json")

        assert response.status_code == 201
        data = response.json()
        assert data["quantity"] == 2
        assert data["unit_price_czk"] == "1990.00"
        assert Decimal(data["subtotal_czk"]) == Decimal("3980.00")
        assert Decimal(data["vat_amount_czk"]) == Decimal("835.80")
        assert Decimal(data["total_price_czk"]) == Decimal("4815.80")
        assert data["customer_email"] == "jana@example.cz"

    def test_persists_order_and_decrements_stock(self, api_client, payload, product, cnb_ok):
        response = api_client.post(URL, payload, format="json")

        order = Order.objects.get(id=response.json()["id"])
        assert order.total_price_czk == Decimal("4815.80")
        assert order.vat_rate == Decimal("0.2100")
        product.refresh_from_db()
        assert product.quantity == 3

    def test_response_shows_remaining_stock(self, api_client, payload, cnb_ok):
        response = api_client.post(URL, payload, format="json")
        assert response.json()["product"]["quantity"] == 3

    def test_conversions_attached(self, api_client, payload, cnb_ok):
        response = api_client.post(URL, payload, format="json")

        data = response.json()
        assert data["fx_available"] is True
        eur = next(c for c in data["conversions"] if c["code"] == "EUR")
        assert Decimal(eur["amount"]) == Decimal("194.77")

    def test_succeeds_when_rates_are_down(self, api_client, payload, cnb_down):
        response = api_client.post(URL, payload, format="json")

        assert response.status_code == 201
        data = response.json()
        assert data["fx_available"] is False
        assert all(c["amount"] is None for c in data["conversions"])

    def test_buying_entire_stock(self, api_client, payload, product, cnb_ok):
        payload["quantity"] = 5
        response = api_client.post(URL, payload, format="json")

        assert response.status_code == 201
        assert response.json()["product"]["available"] is False
        product.refresh_from_db()
        assert product.quantity == 0

    def test_price_snapshot_survives_price_change(self, api_client, payload, product, cnb_ok):
        response = api_client.post(URL, payload, format="json")
        Product.objects.filter(id=product.id).update(price_czk=Decimal("2500.00"))

        order = Order.objects.get(id=response.json()["id"])
        assert order.unit_price_czk == Decimal("1990.00")


class TestCreateOrderValidation:
    def test_zero_quantity(self, api_client, payload):
        payload["quantity"] = 0
        response = api_client.post(URL, payload, format="json")

        assert response.status_code == 400
        data = response.json()
        assert data["detail"] == "Validation failed"
        assert "quantity" in data["errors"]

    def test_quantity_above_limit(self, api_client, payload):
        payload["quantity"] = 1001
        response = api_client.post(URL, payload, format="json")
        assert response.status_code == 400

    def test_invalid_email(self, api_client, payload):
        payload["customer"]["email"] = "nope"
        response = api_client.post(URL, payload, format="json")

        assert response.status_code == 400
        assert "email" in response.json()["errors"]["customer"]

    def test_malformed_product_id(self, api_client, payload):
        payload["product_id"] = "123"
        response = api_client.post(URL, payload, format="json")
        assert response.status_code == 400
        assert "product_id" in response.json()["errors"]

    def test_nothing_written_on_validation_error(self, api_client, payload, product):
        payload["quantity"] = -1
        api_client.post(URL, payload, format="json")
        assert Order.objects.count() == 0
        product.refresh_from_db()
        assert product.quantity == 5


class TestCreateOrderBusinessErrors:
    def test_unknown_product_returns_404(self, api_client, payload):
        payload["product_id"] = "00000000-0000-0000-0000-000000000000"
        response = api_client.post(URL, payload, format="json")

        assert response.status_code == 404
        assert response.json()["detail"] == "Product not found."
        assert Order.objects.count() == 0

    def test_insufficient_stock_returns_409(self, api_client, payload, product):
        payload["quantity"] = 6
        response = api_client.post(URL, payload, format="json")

        assert response.status_code == 409
        data = response.json()
        assert data["available"] == 5
        assert "Insufficient stock" in data["detail"]
        assert Order.objects.count() == 0
        product.refresh_from_db()
        assert product.quantity == 5

    def test_sold_out_product_returns_409(self, api_client, payload, make_product):
        sold_out = make_product(quantity=0)
        payload["product_id"] = str(sold_out.id)
        payload["quantity"] = 1
        response = api_client.post(URL, payload, format="json")
        assert response.status_code == 409

    def test_storage_failure_returns_500(self, api_client, payload, product, mocker):
        mocker.patch(
            "modules.orders.models.Order.save",
            side_effect=DatabaseError("disk I/O error"),
        )

        response = api_client.post(URL, payload, format="json")

        assert response.status_code == 500
        assert response.json() == {"detail": "An unexpected error occurred."}
        product.refresh_from_db()
        assert product.quantity == 5
