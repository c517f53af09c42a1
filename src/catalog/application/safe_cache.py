"""Degrade-on-failure wrapper around a CacheRepository.

The cache is never a hard dependency: any failure is logged here and
turned into a neutral result (a miss, an empty set, ``False``), so the
handlers can fall back to the authoritative store without repeating the
same try/except around every call.
"""

from __future__ import annotations

from typing import Callable, TypeVar

from loguru import logger

from catalog.domain.model.product import Product
from catalog.domain.repository.cache_repository import CacheRepository

T = TypeVar("T")


class SafeCache:

    def __init__(self, cache: CacheRepository) -> None:
        self._cache = cache

    # --- Reads ----------------------------------------------------------------

    def get(self, key: str) -> Product | None:
        """Return the cached product; None on a miss *or* a failure."""
        return self._attempt(lambda: self._cache.get(key), None, "get", key=key)

    def get_set(self, set_key: str) -> list[str] | None:
        """Return the set members, or None if the cache failed."""
        return self._attempt(
            lambda: self._cache.get_set(set_key), None, "get_set", key=set_key
        )

    def get_multiple(self, keys: list[str]) -> list[Product] | None:
        """Return whatever entries were found, or None if the cache failed."""
        return self._attempt(
            lambda: self._cache.get_multiple(keys), None, "get_multiple", count=len(keys)
        )

    # --- Writes ---------------------------------------------------------------

    def set(self, key: str, product: Product) -> bool:
        return self._attempt(
            lambda: self._run(self._cache.set, key, product), False, "set", key=key
        )

    def delete(self, key: str) -> bool:
        return self._attempt(
            lambda: self._run(self._cache.delete, key), False, "delete", key=key
        )

    def add_to_set(self, set_key: str, member: str) -> bool:
        return self._attempt(
            lambda: self._run(self._cache.add_to_set, set_key, member),
            False,
            "add_to_set",
            key=set_key,
            member=member,
        )

    def remove_from_set(self, set_key: str, member: str) -> bool:
        return self._attempt(
            lambda: self._run(self._cache.remove_from_set, set_key, member),
            False,
            "remove_from_set",
            key=set_key,
            member=member,
        )

    # --- Health ---------------------------------------------------------------

    def is_healthy(self) -> bool:
        return self._attempt(
            lambda: self._run(self._cache.health_check), False, "health_check"
        )

    # --- Internal helpers -----------------------------------------------------

    @staticmethod
    def _run(operation: Callable[..., None], *args) -> bool:
        operation(*args)
        return True

    @staticmethod
    def _attempt(call: Callable[[], T], fallback: T, operation: str, **context) -> T:
        try:
            return call()
        except Exception as exc:
            logger.bind(operation=operation, **context).warning(
                "Cache {} failed, continuing without cache: {}: {}",
                operation,
                type(exc).__name__,
                exc,
            )
            return fallback
