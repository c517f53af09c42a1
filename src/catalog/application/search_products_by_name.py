"""Application service: Search Products by Name use case (query).

The cache index is keyed by the exact normalized name, while the store
matches substrings. A query that hits the index therefore returns the
exact-name matches; a miss returns every product whose name contains
the query.
"""

from __future__ import annotations

from catalog.application.cache_keys import name_key
from catalog.application.dto import PageRequest
from catalog.application.indexed_read import read_through_index
from catalog.application.safe_cache import SafeCache
from catalog.domain.exceptions import ValidationError
from catalog.domain.model.product import Product, sort_by_name
from catalog.domain.repository.cache_repository import CacheRepository
from catalog.domain.repository.product_repository import ProductRepository


class SearchProductsByNameHandler:

    def __init__(self, product_repo: ProductRepository, cache: CacheRepository) -> None:
        self._product_repo = product_repo
        self._cache = SafeCache(cache)

    def handle(self, name: str, page: PageRequest | None = None) -> list[Product]:
        if not name or not name.strip():
            raise ValidationError("Search name is required")
        return read_through_index(
            self._cache,
            name_key(name),
            page or PageRequest(),
            sort_by_name,
            lambda limit, offset: self._product_repo.find_by_name(name.strip(), limit, offset),
        )
