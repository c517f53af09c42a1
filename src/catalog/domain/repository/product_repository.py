"""Abstract repository for the Product aggregate (the authoritative store).

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (JSON, SQL) live in the
infrastructure layer.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from catalog.domain.model.product import Product


class ProductRepository(ABC):

    @abstractmethod
    def create(self, product: Product) -> None:
        """Insert a new product.

        Raises AlreadyExistsError if the id is already taken.
        """

    @abstractmethod
    def update(self, product: Product, expected_version: int) -> None:
        """Overwrite a product only if its stored version is ``expected_version``.

        Raises EntityNotFoundError if the row is gone and
        VersionConflictError if it exists with another version.
        """

    @abstractmethod
    def delete(self, product_id: str) -> None:
        """Remove a product. Raises EntityNotFoundError if absent."""

    @abstractmethod
    def find_by_id(self, product_id: str) -> Product | None:
        """Return a product by its ID, or None if not found."""

    @abstractmethod
    def find_all(self, limit: int, offset: int) -> list[Product]:
        """Return a page of products, newest first."""

    @abstractmethod
    def find_by_category(self, category: str, limit: int, offset: int) -> list[Product]:
        """Return a page of products whose category matches, ignoring case."""

    @abstractmethod
    def find_by_name(self, name: str, limit: int, offset: int) -> list[Product]:
        """Return a page of products whose name contains ``name``, alphabetically."""

    @abstractmethod
    def exists(self, product_id: str) -> bool:
        """Return True if a product with this id is stored."""

    @abstractmethod
    def health_check(self) -> None:
        """Raise StorageConnectionError if the store is unreachable."""
