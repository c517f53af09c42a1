"""Application service: Update Product use case.

Uses optimistic concurrency: the store only accepts the write if the
version it holds is the one this update started from.
"""

from __future__ import annotations

from loguru import logger

from catalog.application.cache_keys import category_key, name_key, product_key
from catalog.application.dto import UpdateProductInput
from catalog.application.safe_cache import SafeCache
from catalog.domain.exceptions import EntityNotFoundError, VersionConflictError
from catalog.domain.model.identity import normalize
from catalog.domain.model.product import Product
from catalog.domain.repository.cache_repository import CacheRepository
from catalog.domain.repository.product_repository import ProductRepository


class UpdateProductHandler:

    def __init__(self, product_repo: ProductRepository, cache: CacheRepository) -> None:
        self._product_repo = product_repo
        self._cache = SafeCache(cache)

    def handle(self, product_id: str, changes: UpdateProductInput) -> Product:
        """Apply ``changes`` to a product.

        An update that changes nothing returns the current product
        without writing or bumping the version.
        """
        log = logger.bind(product_id=product_id[:8])
        current = self._current(product_id)

        updated = current.with_changes(
            name=changes.name,
            category=changes.category,
            description=changes.description,
            sku=changes.sku,
            brand=changes.brand,
            stock=changes.stock,
            images=changes.images,
            specifications=changes.specifications,
        )

        if updated.same_business_data(current):
            log.info("No changes detected, ignoring update")
            return current

        try:
            self._product_repo.update(updated, expected_version=current.version)
        except VersionConflictError:
            log.warning("Version conflict, expected version {}", current.version)
            raise
        except EntityNotFoundError:
            log.info("Product disappeared during update")
            raise
        except Exception:
            log.exception("Failed to update product")
            raise

        log.info("Product updated to version {}", updated.version)
        self._propagate(current, updated)
        return updated

    def _current(self, product_id: str) -> Product:
        cached = self._cache.get(product_key(product_id))
        if cached is not None:
            return cached
        product = self._product_repo.find_by_id(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product with ID '{product_id}' not found")
        return product

    def _propagate(self, previous: Product, product: Product) -> None:
        self._cache.set(product_key(product.id), product)

        if normalize(previous.category) != normalize(product.category):
            self._cache.remove_from_set(category_key(previous.category), product.id)
            self._cache.add_to_set(category_key(product.category), product.id)

        if normalize(previous.name) != normalize(product.name):
            self._cache.remove_from_set(name_key(previous.name), product.id)
            self._cache.add_to_set(name_key(product.name), product.id)
