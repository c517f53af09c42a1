"""Application service: Search Products by Category use case (query)."""

from __future__ import annotations

from catalog.application.cache_keys import category_key
from catalog.application.dto import PageRequest
from catalog.application.indexed_read import read_through_index
from catalog.application.safe_cache import SafeCache
from catalog.domain.exceptions import ValidationError
from catalog.domain.model.product import Product, sort_newest_first
from catalog.domain.repository.cache_repository import CacheRepository
from catalog.domain.repository.product_repository import ProductRepository


class SearchProductsByCategoryHandler:

    def __init__(self, product_repo: ProductRepository, cache: CacheRepository) -> None:
        self._product_repo = product_repo
        self._cache = SafeCache(cache)

    def handle(self, category: str, page: PageRequest | None = None) -> list[Product]:
        if not category or not category.strip():
            raise ValidationError("Search category is required")
        return read_through_index(
            self._cache,
            category_key(category),
            page or PageRequest(),
            sort_newest_first,
            lambda limit, offset: self._product_repo.find_by_category(
                category.strip(), limit, offset
            ),
        )
