"""Integration tests for the GetProduct use case."""

import pytest

from catalog.application.cache_keys import product_key
from catalog.application.get_product import GetProductHandler
from catalog.domain.exceptions import (
    EntityNotFoundError,
    InternalError,
    StorageConnectionError,
)
from catalog.domain.model.product import Product
from tests.fakes import FakeCacheRepository, FakeProductRepository


def _product() -> Product:
    return Product.create(name="Widget", reference_number="W-1", category="Tools", stock=3)


class _BrokenRepository(FakeProductRepository):

    def find_by_id(self, product_id):
        raise RuntimeError("driver exploded")


class TestGetProduct:

    def test_cache_hit_skips_store(self):
        product = _product()
        repo = FakeProductRepository()
        cache = FakeCacheRepository()
        cache.entries[product_key(product.id)] = product
        assert GetProductHandler(repo, cache).handle(product.id) == product
        assert repo.find_calls == 0

    def test_cache_miss_reads_store(self):
        product = _product()
        repo = FakeProductRepository([product])
        result = GetProductHandler(repo, FakeCacheRepository()).handle(product.id)
        assert result == product
        assert repo.find_calls == 1

    def test_cache_miss_does_not_repopulate_cache(self):
        product = _product()
        cache = FakeCacheRepository()
        GetProductHandler(FakeProductRepository([product]), cache).handle(product.id)
        assert cache.entries == {}

    def test_cache_failure_falls_back_to_store(self):
        product = _product()
        cache = FakeCacheRepository()
        cache.down = True
        result = GetProductHandler(FakeProductRepository([product]), cache).handle(product.id)
        assert result == product

    def test_not_found(self):
        handler = GetProductHandler(FakeProductRepository(), FakeCacheRepository())
        with pytest.raises(EntityNotFoundError, match="not found"):
            handler.handle("missing")

    def test_store_outage_surfaces_as_internal(self):
        repo = FakeProductRepository()
        repo.down = True
        with pytest.raises(InternalError) as excinfo:
            GetProductHandler(repo, FakeCacheRepository()).handle("any")
        assert isinstance(excinfo.value, StorageConnectionError)

    def test_unexpected_store_error_wrapped(self):
        handler = GetProductHandler(_BrokenRepository(), FakeCacheRepository())
        with pytest.raises(InternalError) as excinfo:
            handler.handle("any")
        assert isinstance(excinfo.value.__cause__, RuntimeError)
