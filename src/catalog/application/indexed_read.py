"""Shared read path for list and search queries.

Steps:
1. Resolve candidate ids from an index set.
2. Empty or failed index -> ask the authoritative store.
3. Batch-fetch the candidates from the cache.
4. Fewer products than ids (partial hit) -> discard them and ask the
   store, so a caller never sees a silently truncated result.
5. Full hit -> order with the same contract the store uses, then slice.
"""

from __future__ import annotations

from typing import Callable

from loguru import logger

from catalog.application.cache_keys import product_key
from catalog.application.dto import PageRequest
from catalog.application.pagination import paginate
from catalog.application.safe_cache import SafeCache
from catalog.domain.model.product import Product

Ordering = Callable[[list[Product]], list[Product]]
StoreQuery = Callable[[int, int], list[Product]]


def read_through_index(
    cache: SafeCache,
    index_key: str,
    page: PageRequest,
    order: Ordering,
    store_query: StoreQuery,
) -> list[Product]:
    log = logger.bind(index=index_key, limit=page.limit, offset=page.offset)

    cached = _from_cache(cache, index_key, log)
    if cached is not None:
        log.debug("Serving {} products from cache", len(cached))
        return paginate(order(cached), page.limit, page.offset)

    log.debug("Falling back to the authoritative store")
    return store_query(page.limit, page.offset)


def _from_cache(cache: SafeCache, index_key: str, log) -> list[Product] | None:
    product_ids = cache.get_set(index_key)
    if not product_ids:
        return None

    products = cache.get_multiple([product_key(pid) for pid in product_ids])
    if products is None:
        return None

    if len(products) < len(product_ids):
        log.debug(
            "Partial cache hit: expected {} products, got {}",
            len(product_ids),
            len(products),
        )
        return None

    return products
