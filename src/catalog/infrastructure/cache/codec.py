"""Wire encoding for products stored in the cache."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from datetime import datetime

from catalog.domain.exceptions import CacheError
from catalog.domain.model.product import Product


class ProductCodec(ABC):

    name: str

    @abstractmethod
    def marshal(self, product: Product) -> bytes:
        """Encode a product for storage."""

    @abstractmethod
    def unmarshal(self, data: bytes) -> Product:
        """Decode a stored product. Raises CacheError on bad data."""


class JsonProductCodec(ProductCodec):

    name = "json"

    def marshal(self, product: Product) -> bytes:
        try:
            return json.dumps(self._to_raw(product), separators=(",", ":")).encode("utf-8")
        except (TypeError, ValueError) as exc:
            raise CacheError(f"Failed to encode product {product.id}: {exc}") from exc

    def unmarshal(self, data: bytes) -> Product:
        try:
            return self._to_domain(json.loads(data))
        except (KeyError, TypeError, ValueError) as exc:
            raise CacheError(f"Failed to decode cached product: {exc}") from exc

    # --- Serialization --------------------------------------------------------

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
            "images": product.images,
            "specifications": product.specifications,
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
            images=list(raw.get("images") or []),
            specifications=dict(raw.get("specifications") or {}),
            version=raw["version"],
            created_at=datetime.fromisoformat(raw["created_at"]),
            updated_at=datetime.fromisoformat(raw["updated_at"]),
        )
