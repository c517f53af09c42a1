"""Process-local implementation of CacheRepository.

Entries are kept encoded, so readers always get their own copy and
never share mutable state with writers.
"""

from __future__ import annotations

import threading

from catalog.domain.model.product import Product
from catalog.domain.repository.cache_repository import CacheRepository
from catalog.infrastructure.cache.codec import JsonProductCodec, ProductCodec


class InMemoryCacheRepository(CacheRepository):

    def __init__(self, codec: ProductCodec | None = None) -> None:
        self._codec = codec or JsonProductCodec()
        self._entries: dict[str, bytes] = {}
        self._sets: dict[str, set[str]] = {}
        self._lock = threading.Lock()

    # --- Entries --------------------------------------------------------------

    def get(self, key: str) -> Product | None:
        with self._lock:
            data = self._entries.get(key)
        return None if data is None else self._codec.unmarshal(data)

    def set(self, key: str, product: Product) -> None:
        data = self._codec.marshal(product)
        with self._lock:
            self._entries[key] = data

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def get_multiple(self, keys: list[str]) -> list[Product]:
        with self._lock:
            found = [self._entries[key] for key in keys if key in self._entries]
        return [self._codec.unmarshal(data) for data in found]

    def exists(self, key: str) -> bool:
        with self._lock:
            return key in self._entries or key in self._sets

    # --- Sets -----------------------------------------------------------------

    def add_to_set(self, set_key: str, member: str) -> None:
        with self._lock:
            self._sets.setdefault(set_key, set()).add(member)

    def remove_from_set(self, set_key: str, member: str) -> None:
        with self._lock:
            members = self._sets.get(set_key)
            if members is None:
                return
            members.discard(member)
            if not members:
                del self._sets[set_key]

    def get_set(self, set_key: str) -> list[str]:
        with self._lock:
            return sorted(self._sets.get(set_key, ()))

    def delete_set(self, set_key: str) -> None:
        with self._lock:
            self._sets.pop(set_key, None)

    def health_check(self) -> None:
        return None
