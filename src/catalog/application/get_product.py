"""Application service: Get Product use case (query)."""

from __future__ import annotations

from loguru import logger

from catalog.application.cache_keys import product_key
from catalog.application.safe_cache import SafeCache
from catalog.domain.exceptions import DomainException, EntityNotFoundError, InternalError
from catalog.domain.model.product import Product
from catalog.domain.repository.cache_repository import CacheRepository
from catalog.domain.repository.product_repository import ProductRepository


class GetProductHandler:

    def __init__(self, product_repo: ProductRepository, cache: CacheRepository) -> None:
        self._product_repo = product_repo
        self._cache = SafeCache(cache)

    def handle(self, product_id: str) -> Product:
        """Return a product, preferring the cache.

        A cache miss reads the store but does not repopulate the cache;
        only create and update write entries.
        """
        log = logger.bind(product_id=product_id[:8])

        cached = self._cache.get(product_key(product_id))
        if cached is not None:
            log.debug("Cache hit")
            return cached

        log.debug("Cache miss, reading the store")
        try:
            product = self._product_repo.find_by_id(product_id)
        except DomainException:
            log.exception("Failed to read product")
            raise
        except Exception as exc:
            log.exception("Failed to read product")
            raise InternalError(f"Could not read product '{product_id}'") from exc

        if product is None:
            raise EntityNotFoundError(f"Product with ID '{product_id}' not found")
        return product
