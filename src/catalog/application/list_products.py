"""Application service: List Products use case (query)."""

from __future__ import annotations

from catalog.application.cache_keys import ALL_PRODUCTS_KEY
from catalog.application.dto import PageRequest
from catalog.application.indexed_read import read_through_index
from catalog.application.safe_cache import SafeCache
from catalog.domain.model.product import Product, sort_newest_first
from catalog.domain.repository.cache_repository import CacheRepository
from catalog.domain.repository.product_repository import ProductRepository


class ListProductsHandler:

    def __init__(self, product_repo: ProductRepository, cache: CacheRepository) -> None:
        self._product_repo = product_repo
        self._cache = SafeCache(cache)

    def handle(self, page: PageRequest | None = None) -> list[Product]:
        """Return a page of products, newest first."""
        return read_through_index(
            self._cache,
            ALL_PRODUCTS_KEY,
            page or PageRequest(),
            sort_newest_first,
            self._product_repo.find_all,
        )
