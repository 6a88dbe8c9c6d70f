from decimal import Decimal

import pytest
from django.core.cache import cache
from rest_framework.test import APIClient

from modules.products.models import Product

# Trimmed copy of the CNB daily fixing (denni_kurz.txt).
CNB_SAMPLE = """17.10.2026 #201
země|měna|množství|kód|kurz
Austrálie|dolar|1|AUD|15,324
EMU|euro|1|EUR|24,725
Japonsko|jen|100|JPY|15,872
Polsko|zlotý|1|PLN|5,780
USA|dolar|1|USD|22,861
"""


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture(autouse=True)
def _clear_cache():
    """The process-wide rate cache lives in the cache backend; isolate tests."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


@pytest.fixture()
def make_product():
    """Factory for persisted products."""

    def _make(**overrides) -> Product:
        defaults = {
            "title": "Espresso grinder",
            "description": "Conical burr grinder",
            "price_czk": Decimal("1990.00"),
            "quantity": 10,
        }
        defaults.update(overrides)
        product = Product(**defaults)
        product.save()
        return product

    return _make


@pytest.fixture()
def customer_payload():
    return {
        "name": "Jana Nováková",
        "email": "jana@example.cz",
        "phone": "+420 777 123 456",
        "address_line1": "Vinohradská 12",
        "city": "Praha",
        "country": "CZ",
        "zip_code": "120 00",
    }


@pytest.fixture()
def cnb_ok(mocker):
    """Patch ``requests.get`` to serve ``CNB_SAMPLE``."""
    response = mocker.Mock(ok=True, status_code=200, text=CNB_SAMPLE, encoding="utf-8")
    return mocker.patch("requests.get", return_value=response)


@pytest.fixture()
def cnb_down(mocker):
    """Patch ``requests.get`` to answer 503."""
    response = mocker.Mock(ok=False, status_code=503, text="", encoding="utf-8")
    return mocker.patch("requests.get", return_value=response)
