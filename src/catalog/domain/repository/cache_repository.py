"""Abstract repository for the product cache and its secondary indices.

Entries never expire; they are only replaced or deleted explicitly.
Every failure is raised as CacheError and is advisory: callers are
expected to fall back to the authoritative store.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from catalog.domain.model.product import Product


class CacheRepository(ABC):

    @abstractmethod
    def get(self, key: str) -> Product | None:
        """Return the cached product, or None on a miss."""

    @abstractmethod
    def set(self, key: str, product: Product) -> None:
        """Store a product permanently under ``key``."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove an entry; deleting a missing key is not an error."""

    @abstractmethod
    def add_to_set(self, set_key: str, member: str) -> None:
        """Add a member to a named set."""

    @abstractmethod
    def remove_from_set(self, set_key: str, member: str) -> None:
        """Remove a member from a named set."""

    @abstractmethod
    def get_set(self, set_key: str) -> list[str]:
        """Return every member of a named set (empty if the set is missing)."""

    @abstractmethod
    def get_multiple(self, keys: list[str]) -> list[Product]:
        """Fetch several entries in one round trip.

        Missing keys are skipped silently, so the result may be shorter
        than ``keys``; callers compare lengths to detect partial coverage.
        """

    @abstractmethod
    def exists(self, key: str) -> bool:
        """Return True if an entry is stored under ``key``."""

    @abstractmethod
    def delete_set(self, set_key: str) -> None:
        """Remove a named set entirely."""

    @abstractmethod
    def health_check(self) -> None:
        """Raise CacheError if the cache is unreachable."""
