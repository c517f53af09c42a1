"""Application service: Create Product use case.

Creation is idempotent on the business key: resubmitting identical data
returns the existing product without touching the store, while the same
business key with different data is rejected.
"""

from __future__ import annotations

from loguru import logger

from catalog.application.cache_keys import (
    ALL_PRODUCTS_KEY,
    category_key,
    name_key,
    product_key,
)
from catalog.application.dto import CreateProductInput
from catalog.application.safe_cache import SafeCache
from catalog.domain.exceptions import AlreadyExistsError
from catalog.domain.model.product import Product
from catalog.domain.repository.cache_repository import CacheRepository
from catalog.domain.repository.product_repository import ProductRepository


class CreateProductHandler:

    def __init__(self, product_repo: ProductRepository, cache: CacheRepository) -> None:
        self._product_repo = product_repo
        self._cache = SafeCache(cache)

    def handle(self, data: CreateProductInput) -> Product:
        """Register a new product.

        Steps:
        1. Build and validate the Product (derives the id).
        2. Probe the cache: identical data -> return it; different data ->
           AlreadyExistsError. A miss or cache failure continues.
        3. Insert into the store (a racing writer surfaces as AlreadyExistsError).
        4. Propagate to the cache entry and the three indices, best effort.
        """
        product = Product.create(
            name=data.name,
            reference_number=data.reference_number,
            category=data.category,
            description=data.description,
            sku=data.sku,
            brand=data.brand,
            stock=data.stock,
            images=data.images,
            specifications=data.specifications,
        )
        log = logger.bind(product_id=product.short_id)
        log.info("Creating product '{}' ({})", product.name, product.reference_number)

        cached = self._cache.get(product_key(product.id))
        if cached is not None:
            if product.same_business_data(cached):
                log.info("Identical product already exists, nothing to do")
                return cached
            log.warning("Product exists with different data")
            raise AlreadyExistsError(
                f"Product '{product.name}' with reference "
                f"'{product.reference_number}' already exists"
            )

        try:
            self._product_repo.create(product)
        except AlreadyExistsError:
            log.info("Product already exists in the store")
            raise
        except Exception:
            log.exception("Failed to save product")
            raise

        log.info("Product created")
        self._propagate(product)
        return product

    def _propagate(self, product: Product) -> None:
        # Each step is independent; a failure in one never skips the others.
        self._cache.set(product_key(product.id), product)
        self._cache.add_to_set(ALL_PRODUCTS_KEY, product.id)
        self._cache.add_to_set(name_key(product.name), product.id)
        self._cache.add_to_set(category_key(product.category), product.id)
