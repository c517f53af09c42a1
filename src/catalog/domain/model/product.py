"""Product aggregate.

A product's identity is derived once, at creation, from its business key
and never recomputed. Every persisted mutation bumps ``version`` by
exactly one; the version is the only concurrency token the stores use.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Mapping, Union

from catalog.domain.exceptions import ValidationError
from catalog.domain.model.identity import generate_product_id

# Schema-less attribute values: scalars, lists, or nested mappings.
SpecValue = Union[str, int, float, bool, None, list, dict]
Specifications = dict[str, SpecValue]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Product:
    """A product in the catalog.

    Use ``Product.create()`` for new products; it trims, validates and
    derives the id. The ``__init__`` is kept simple so stores and codecs
    can reconstitute persisted products without re-deriving anything.
    """

    id: str
    name: str
    reference_number: str
    category: str
    description: str = ""
    sku: str = ""
    brand: str = ""
    stock: int = 0
    images: list[str] = field(default_factory=list)
    specifications: Specifications = field(default_factory=dict)
    version: int = 1
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    # --- Factory (used for NEW products only) ---------------------------------

    @staticmethod
    def create(
        name: str,
        reference_number: str,
        category: str,
        description: str = "",
        sku: str = "",
        brand: str = "",
        stock: int = 0,
        images: list[str] | None = None,
        specifications: Mapping[str, Any] | None = None,
    ) -> Product:
        """Create a new product, enforcing all invariants."""
        now = _utcnow()
        product = Product(
            id="",
            name=_clean(name),
            reference_number=_clean(reference_number),
            category=_clean(category),
            description=_clean(description),
            sku=_clean(sku),
            brand=_clean(brand),
            stock=stock,
            images=list(images or []),
            specifications=dict(specifications or {}),
            version=1,
            created_at=now,
            updated_at=now,
        )
        product.validate()
        product.id = generate_product_id(product.name, product.reference_number)
        return product

    # --- Mutation -------------------------------------------------------------

    def with_changes(
        self,
        name: str | None = None,
        category: str | None = None,
        description: str | None = None,
        sku: str | None = None,
        brand: str | None = None,
        stock: int | None = None,
        images: list[str] | None = None,
        specifications: Mapping[str, Any] | None = None,
    ) -> Product:
        """Return a validated copy with the given fields replaced.

        Fields left as ``None`` keep their current value. The copy carries
        the next version number; ``self`` is never modified.
        """
        updated = replace(
            self,
            name=self.name if name is None else _clean(name),
            category=self.category if category is None else _clean(category),
            description=self.description if description is None else _clean(description),
            sku=self.sku if sku is None else _clean(sku),
            brand=self.brand if brand is None else _clean(brand),
            stock=self.stock if stock is None else stock,
            images=list(self.images if images is None else images),
            specifications=copy.deepcopy(
                self.specifications if specifications is None else dict(specifications)
            ),
            version=self.version + 1,
            updated_at=_utcnow(),
        )
        updated.validate()
        return updated

    # --- Invariants -----------------------------------------------------------

    def validate(self) -> None:
        if not self.name:
            raise ValidationError("Product name is required")
        if not self.reference_number:
            raise ValidationError("Product reference number is required")
        if not self.category:
            raise ValidationError("Product category is required")
        if isinstance(self.stock, bool) or not isinstance(self.stock, int):
            raise ValidationError(
                f"Product stock must be an integer, got {type(self.stock).__name__}"
            )
        if self.stock < 0:
            raise ValidationError("Product stock cannot be negative")
        if not all(isinstance(image, str) for image in self.images):
            raise ValidationError("Product images must be strings")
        _validate_specifications(self.specifications)

    # --- Comparison -----------------------------------------------------------

    def same_business_data(self, other: Product | None) -> bool:
        """Compare everything except id, version and timestamps."""
        if other is None:
            return False
        return (
            self.name == other.name
            and self.reference_number == other.reference_number
            and self.category == other.category
            and self.description == other.description
            and self.sku == other.sku
            and self.brand == other.brand
            and self.stock == other.stock
            and self.images == other.images
            and _same_spec_value(self.specifications, other.specifications)
        )

    @property
    def short_id(self) -> str:
        return self.id[:8]


# ---------------------------------------------------------------------------
# Ordering contract shared by every store and by the cache read path
# ---------------------------------------------------------------------------


def sort_newest_first(products: list[Product]) -> list[Product]:
    """Creation time descending, id ascending as tie-breaker."""
    by_id = sorted(products, key=lambda p: p.id)
    return sorted(by_id, key=lambda p: p.created_at, reverse=True)


def sort_by_name(products: list[Product]) -> list[Product]:
    return sorted(products, key=lambda p: (p.name.lower(), p.id))


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _clean(value: str | None) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(f"Expected text, got {type(value).__name__}")
    return value.strip()


def _validate_specifications(specs: Any) -> None:
    if not isinstance(specs, dict):
        raise ValidationError("Product specifications must be a mapping")
    for key, value in specs.items():
        if not isinstance(key, str):
            raise ValidationError(f"Specification keys must be strings, got {key!r}")
        _validate_spec_value(key, value)


def _validate_spec_value(key: str, value: Any) -> None:
    if value is None or isinstance(value, (str, bool, int, float)):
        return
    if isinstance(value, list):
        for item in value:
            _validate_spec_value(key, item)
        return
    if isinstance(value, dict):
        _validate_specifications(value)
        return
    raise ValidationError(
        f"Unsupported value for specification '{key}': {type(value).__name__}"
    )


def _same_spec_value(left: Any, right: Any) -> bool:
    """Structural equality where a boolean never equals a number.

    ``1 == 1.0`` still holds: both decode from the same JSON number.
    """
    if isinstance(left, bool) or isinstance(right, bool):
        return type(left) is type(right) and left == right
    if isinstance(left, dict) and isinstance(right, dict):
        return left.keys() == right.keys() and all(
            _same_spec_value(value, right[key]) for key, value in left.items()
        )
    if isinstance(left, list) and isinstance(right, list):
        return len(left) == len(right) and all(
            _same_spec_value(a, b) for a, b in zip(left, right)
        )
    if isinstance(left, (dict, list)) or isinstance(right, (dict, list)):
        return False
    return left == right
