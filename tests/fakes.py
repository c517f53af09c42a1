"""In-memory fake repositories for testing.

These implement the same abstract interfaces as the real stores but keep
everything in dicts. No file I/O, no network. Both fakes hand out copies
so tests can't accidentally share state with the store.
"""

from __future__ import annotations

import copy

from catalog.domain.exceptions import (
    AlreadyExistsError,
    CacheError,
    EntityNotFoundError,
    StorageConnectionError,
    VersionConflictError,
)
from catalog.domain.model.product import Product, sort_by_name, sort_newest_first
from catalog.domain.repository.cache_repository import CacheRepository
from catalog.domain.repository.product_repository import ProductRepository


class FakeProductRepository(ProductRepository):

    def __init__(self, products: list[Product] | None = None) -> None:
        self._store: dict[str, Product] = {}
        for p in products or []:
            self._store[p.id] = copy.deepcopy(p)
        self.create_calls = 0
        self.update_calls = 0
        self.delete_calls = 0
        self.find_calls = 0
        self.down = False

    def create(self, product: Product) -> None:
        self._check()
        self.create_calls += 1
        if product.id in self._store:
            raise AlreadyExistsError(f"Product with ID '{product.id}' already exists")
        self._store[product.id] = copy.deepcopy(product)

    def update(self, product: Product, expected_version: int) -> None:
        self._check()
        self.update_calls += 1
        stored = self._store.get(product.id)
        if stored is None:
            raise EntityNotFoundError(f"Product with ID '{product.id}' not found")
        if stored.version != expected_version:
            raise VersionConflictError("version mismatch")
        self._store[product.id] = copy.deepcopy(product)

    def delete(self, product_id: str) -> None:
        self._check()
        self.delete_calls += 1
        if self._store.pop(product_id, None) is None:
            raise EntityNotFoundError(f"Product with ID '{product_id}' not found")

    def find_by_id(self, product_id: str) -> Product | None:
        self._check()
        self.find_calls += 1
        product = self._store.get(product_id)
        return copy.deepcopy(product) if product is not None else None

    def find_all(self, limit: int, offset: int) -> list[Product]:
        self._check()
        self.find_calls += 1
        return self._page(sort_newest_first(list(self._store.values())), limit, offset)

    def find_by_category(self, category: str, limit: int, offset: int) -> list[Product]:
        self._check()
        self.find_calls += 1
        matches = [
            p for p in self._store.values()
            if p.category.lower() == category.strip().lower()
        ]
        return self._page(sort_newest_first(matches), limit, offset)

    def find_by_name(self, name: str, limit: int, offset: int) -> list[Product]:
        self._check()
        self.find_calls += 1
        matches = [p for p in self._store.values() if name.lower() in p.name.lower()]
        return self._page(sort_by_name(matches), limit, offset)

    def exists(self, product_id: str) -> bool:
        self._check()
        return product_id in self._store

    def health_check(self) -> None:
        self._check()

    @property
    def write_calls(self) -> int:
        return self.create_calls + self.update_calls + self.delete_calls

    def _check(self) -> None:
        if self.down:
            raise StorageConnectionError("store is down")

    @staticmethod
    def _page(products: list[Product], limit: int, offset: int) -> list[Product]:
        return [copy.deepcopy(p) for p in products[offset:offset + limit]]


class FakeCacheRepository(CacheRepository):
    """Cache fake with failure injection.

    Put method names into ``failing`` to make them raise CacheError, or
    set ``down`` to make every call fail.
    """

    def __init__(self) -> None:
        self.entries: dict[str, Product] = {}
        self.sets: dict[str, set[str]] = {}
        self.failing: set[str] = set()
        self.down = False

    def get(self, key: str) -> Product | None:
        self._check("get")
        product = self.entries.get(key)
        return copy.deepcopy(product) if product is not None else None

    def set(self, key: str, product: Product) -> None:
        self._check("set")
        self.entries[key] = copy.deepcopy(product)

    def delete(self, key: str) -> None:
        self._check("delete")
        self.entries.pop(key, None)

    def add_to_set(self, set_key: str, member: str) -> None:
        self._check("add_to_set")
        self.sets.setdefault(set_key, set()).add(member)

    def remove_from_set(self, set_key: str, member: str) -> None:
        self._check("remove_from_set")
        self.sets.get(set_key, set()).discard(member)

    def get_set(self, set_key: str) -> list[str]:
        self._check("get_set")
        return sorted(self.sets.get(set_key, set()))

    def get_multiple(self, keys: list[str]) -> list[Product]:
        self._check("get_multiple")
        return [copy.deepcopy(self.entries[k]) for k in keys if k in self.entries]

    def exists(self, key: str) -> bool:
        self._check("exists")
        return key in self.entries

    def delete_set(self, set_key: str) -> None:
        self._check("delete_set")
        self.sets.pop(set_key, None)

    def health_check(self) -> None:
        self._check("health_check")

    # --- Test helpers ---------------------------------------------------------

    def members(self, set_key: str) -> set[str]:
        return set(self.sets.get(set_key, set()))

    def _check(self, operation: str) -> None:
        if self.down or operation in self.failing:
            raise CacheError(f"cache {operation} failed")
