"""Detached cache cleanup after a product is deleted.

The delete handler returns as soon as the authoritative store has
removed the row. Removing the cache entry and the index memberships
happens on a worker thread, bounded by its own deadline rather than by
the caller's lifetime. Failures are logged only; nothing is retried.
"""

from __future__ import annotations

import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import wait as wait_futures
from typing import Callable

from loguru import logger

from catalog.application.cache_keys import (
    ALL_PRODUCTS_KEY,
    category_key,
    name_key,
    product_key,
)
from catalog.application.safe_cache import SafeCache
from catalog.domain.repository.cache_repository import CacheRepository

DEFAULT_CLEANUP_TIMEOUT = 5.0


class CacheCleanupScheduler:

    def __init__(
        self,
        cache: CacheRepository,
        timeout: float = DEFAULT_CLEANUP_TIMEOUT,
        max_workers: int = 2,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._cache = SafeCache(cache)
        self._timeout = timeout
        self._clock = clock
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="cache-cleanup"
        )
        self._pending: set[Future] = set()
        self._lock = threading.Lock()

    def schedule(
        self,
        product_id: str,
        name: str | None = None,
        category: str | None = None,
    ) -> Future:
        """Queue removal of a product's cache entry and index memberships.

        ``name`` and ``category`` are optional: without them only the
        entry and the all-products index can be cleaned.
        """
        deadline = self._clock() + self._timeout
        future = self._executor.submit(self._run, product_id, name, category, deadline)
        with self._lock:
            self._pending.add(future)
        future.add_done_callback(self._forget)
        return future

    def wait(self, timeout: float | None = None) -> bool:
        """Block until every scheduled cleanup has finished.

        Returns False if some were still running when ``timeout`` elapsed.
        """
        with self._lock:
            pending = list(self._pending)
        _, not_done = wait_futures(pending, timeout=timeout)
        return not not_done

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    # --- Worker ---------------------------------------------------------------

    def _run(
        self,
        product_id: str,
        name: str | None,
        category: str | None,
        deadline: float,
    ) -> bool:
        """Return True if every step ran before the deadline."""
        log = logger.bind(product_id=product_id[:8])
        steps: list[tuple[str, Callable[[], bool]]] = [
            ("entry", lambda: self._cache.delete(product_key(product_id))),
            ("all index", lambda: self._cache.remove_from_set(ALL_PRODUCTS_KEY, product_id)),
        ]
        if name is not None:
            steps.append(
                ("name index", lambda: self._cache.remove_from_set(name_key(name), product_id))
            )
        if category is not None:
            steps.append(
                (
                    "category index",
                    lambda: self._cache.remove_from_set(category_key(category), product_id),
                )
            )

        for label, step in steps:
            if self._clock() > deadline:
                log.warning("Cache cleanup timed out before removing {}", label)
                return False
            if not step():
                log.debug("Cache cleanup could not remove {}", label)

        log.info("Cache cleanup completed")
        return True

    def _forget(self, future: Future) -> None:
        with self._lock:
            self._pending.discard(future)
