"""Unit tests for ProductDjangoRepository.

Covers:
- get_by_id: found, missing, malformed id.
- list: title ordering, filters.
- decrement_quantity: conditional update semantics.
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.repositories.interfaces import IProductRepository

pytestmark = pytest.mark.unit


@pytest.fixture()
def repo():
    return ProductDjangoRepository()


class TestRepositoryInstantiation:
    def test_is_instance_of_interface(self, repo):
        assert isinstance(repo, IProductRepository)


class TestGetById:
    def test_returns_product_when_found(self, repo, make_product):
        product = make_product()
        assert repo.get_by_id(str(product.id)).id == product.id

    def test_returns_none_when_not_found(self, repo):
        assert repo.get_by_id("00000000-0000-0000-0000-000000000000") is None

    def test_returns_none_for_invalid_uuid(self, repo):
        assert repo.get_by_id("not-a-uuid") is None

    def test_get_for_update_returns_none_for_invalid_uuid(self, repo):
        assert repo.get_for_update("not-a-uuid") is None


class TestList:
    def test_ordered_by_title(self, repo, make_product):
        make_product(title="Zebra mug")
        make_product(title="Aeropress")
        assert [p.title for p in repo.list()] == ["Aeropress", "Zebra mug"]

    def test_filters(self, repo, make_product):
        make_product(title="Sold out", quantity=0)
        make_product(title="In stock", quantity=1)
        assert [p.title for p in repo.list({"quantity__gt": 0})] == ["In stock"]


class TestDecrementQuantity:
    def test_decrements_when_enough_stock(self, repo, make_product):
        product = make_product(quantity=5)
        assert repo.decrement_quantity(str(product.id), 3) is True
        product.refresh_from_db()
        assert product.quantity == 2

    def test_can_reach_zero(self, repo, make_product):
        product = make_product(quantity=2)
        assert repo.decrement_quantity(str(product.id), 2) is True
        product.refresh_from_db()
        assert product.quantity == 0

    def test_rejects_when_short_and_changes_nothing(self, repo, make_product):
        product = make_product(quantity=2)
        assert repo.decrement_quantity(str(product.id), 3) is False
        product.refresh_from_db()
        assert product.quantity == 2

    def test_unknown_product(self, repo):
        assert repo.decrement_quantity("00000000-0000-0000-0000-000000000000", 1) is False
