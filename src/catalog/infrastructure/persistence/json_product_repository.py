"""JSON-file-backed implementation of ProductRepository.

Every read-modify-write holds a thread lock and an OS-level lock on a
sidecar ``.lock`` file, so the version compare-and-swap stays atomic
across threads and across processes sharing the data directory. The
file is replaced atomically so readers never see a half-written
document.
"""

from __future__ import annotations

import json
import os
import tempfile
import threading
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterator

from filelock import FileLock, Timeout

from catalog.domain.exceptions import (
    AlreadyExistsError,
    EntityNotFoundError,
    InternalError,
    StorageConnectionError,
    VersionConflictError,
)
from catalog.domain.model.product import Product, sort_by_name, sort_newest_first
from catalog.domain.repository.product_repository import ProductRepository


class JsonProductRepository(ProductRepository):

    def __init__(self, file_path: Path, lock_timeout: float = 10.0) -> None:
        self._file_path = file_path
        self._lock = threading.RLock()
        self._lock_path = file_path.with_name(file_path.name + ".lock")
        with _translate_errors():
            file_path.parent.mkdir(parents=True, exist_ok=True)
        self._file_lock = FileLock(str(self._lock_path), timeout=lock_timeout)
        with self._write_lock(), _translate_errors():
            self._ensure_file()

    # --- ProductRepository interface ------------------------------------------

    def create(self, product: Product) -> None:
        with self._write_lock():
            products = self._load()
            if product.id in products:
                raise AlreadyExistsError(f"Product with ID '{product.id}' already exists")
            products[product.id] = product
            self._persist(products)

    def update(self, product: Product, expected_version: int) -> None:
        with self._write_lock():
            products = self._load()
            stored = products.get(product.id)
            if stored is None:
                raise EntityNotFoundError(f"Product with ID '{product.id}' not found")
            if stored.version != expected_version:
                raise VersionConflictError(
                    f"Product '{product.id}' is at version {stored.version}, "
                    f"expected {expected_version}"
                )
            products[product.id] = product
            self._persist(products)

    def delete(self, product_id: str) -> None:
        with self._write_lock():
            products = self._load()
            if products.pop(product_id, None) is None:
                raise EntityNotFoundError(f"Product with ID '{product_id}' not found")
            self._persist(products)

    def find_by_id(self, product_id: str) -> Product | None:
        return self._load().get(product_id)

    def find_all(self, limit: int, offset: int) -> list[Product]:
        products = sort_newest_first(list(self._load().values()))
        return products[offset:offset + limit]

    def find_by_category(self, category: str, limit: int, offset: int) -> list[Product]:
        wanted = category.strip().lower()
        matches = [p for p in self._load().values() if p.category.lower() == wanted]
        return sort_newest_first(matches)[offset:offset + limit]

    def find_by_name(self, name: str, limit: int, offset: int) -> list[Product]:
        fragment = name.lower()
        matches = [p for p in self._load().values() if fragment in p.name.lower()]
        return sort_by_name(matches)[offset:offset + limit]

    def exists(self, product_id: str) -> bool:
        return product_id in self._load()

    def health_check(self) -> None:
        with _translate_errors():
            if not self._file_path.is_file():
                raise StorageConnectionError(f"Data file {self._file_path} is missing")
            if not os.access(self._file_path, os.R_OK | os.W_OK):
                raise StorageConnectionError(f"Data file {self._file_path} is not accessible")

    # --- Serialization helpers ------------------------------------------------

    def _load(self) -> dict[str, Product]:
        with self._lock, _translate_errors():
            raw = json.loads(self._file_path.read_text(encoding="utf-8"))
            return {item["id"]: self._to_domain(item) for item in raw}

    def _persist(self, products: dict[str, Product]) -> None:
        raw = [self._to_raw(p) for p in products.values()]
        with _translate_errors():
            fd, tmp_name = tempfile.mkstemp(
                dir=self._file_path.parent, prefix=self._file_path.name, suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(json.dumps(raw, indent=2) + "\n")
                os.replace(tmp_name, self._file_path)
            except OSError:
                Path(tmp_name).unlink(missing_ok=True)
                raise

    @staticmethod
    def _to_raw(product: Product) -> dict:
        return {
            "id": product.id,
            "name": product.name,
            "reference_number": product.reference_number,
            "category": product.category,
            "description": product.description,
            "sku": product.sku,
            "brand": product.brand,
            "stock": product.stock,
            # Opaque attributes are stored as serialized blobs.
            "images": json.dumps(product.images),
            "specifications": json.dumps(product.specifications),
            "version": product.version,
            "created_at": product.created_at.isoformat(),
            "updated_at": product.updated_at.isoformat(),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Product:
        return Product(
            id=raw["id"],
            name=raw["name"],
            reference_number=raw["reference_number"],
            category=raw["category"],
            description=raw.get("description", ""),
            sku=raw.get("sku", ""),
            brand=raw.get("brand", ""),
            stock=raw["stock"],
            images=json.loads(raw["images"]) if raw.get("images") else [],
            specifications=json.loads(raw["specifications"]) if raw.get("specifications") else {},
            version=raw["version"],
            created_at=datetime.fromisoformat(raw["created_at"]),
            updated_at=datetime.fromisoformat(raw["updated_at"]),
        )

    # --- File helpers ---------------------------------------------------------

    @contextmanager
    def _write_lock(self) -> Iterator[None]:
        with self._lock:
            try:
                self._file_lock.acquire()
            except Timeout as exc:
                raise StorageConnectionError(
                    f"Timed out waiting for lock {self._lock_path}"
                ) from exc
            except OSError as exc:
                raise StorageConnectionError(f"Cannot lock {self._lock_path}: {exc}") from exc
            try:
                yield
            finally:
                self._file_lock.release()

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._persist({})


@contextmanager
def _translate_errors() -> Iterator[None]:
    try:
        yield
    except OSError as exc:
        raise StorageConnectionError(f"Product file unavailable: {exc}") from exc
    except (KeyError, TypeError, ValueError) as exc:
        raise InternalError(f"Product file is corrupt: {exc}") from exc
