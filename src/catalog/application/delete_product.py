"""Application service: Delete Product use case.

The store delete is synchronous and authoritative. Cache cleanup is
handed to the CacheCleanupScheduler and may lag behind the response.
"""

from __future__ import annotations

from loguru import logger

from catalog.application.cache_cleanup import CacheCleanupScheduler
from catalog.application.cache_keys import product_key
from catalog.application.safe_cache import SafeCache
from catalog.domain.exceptions import EntityNotFoundError
from catalog.domain.repository.cache_repository import CacheRepository
from catalog.domain.repository.product_repository import ProductRepository


class DeleteProductHandler:

    def __init__(
        self,
        product_repo: ProductRepository,
        cache: CacheRepository,
        cleanup: CacheCleanupScheduler,
    ) -> None:
        self._product_repo = product_repo
        self._cache = SafeCache(cache)
        self._cleanup = cleanup

    def handle(self, product_id: str) -> None:
        log = logger.bind(product_id=product_id[:8])

        # Name and category are only needed to find the index sets.
        cached = self._cache.get(product_key(product_id))

        try:
            self._product_repo.delete(product_id)
        except EntityNotFoundError:
            log.info("Product not found, nothing deleted")
            raise
        except Exception:
            log.exception("Failed to delete product")
            raise

        log.info("Product deleted from the store")
        self._cleanup.schedule(
            product_id,
            name=cached.name if cached is not None else None,
            category=cached.category if cached is not None else None,
        )
