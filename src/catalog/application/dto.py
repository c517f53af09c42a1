"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from catalog.domain.exceptions import ValidationError

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 100


@dataclass(frozen=True)
class CreateProductInput:
    """Input: everything needed to register a new product."""

    name: str
    reference_number: str
    category: str
    description: str = ""
    sku: str = ""
    brand: str = ""
    stock: int = 0
    images: list[str] = field(default_factory=list)
    specifications: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class UpdateProductInput:
    """Input: fields to change on an existing product.

    ``None`` means "leave unchanged". The reference number is part of the
    product's identity and cannot be changed.
    """

    name: str | None = None
    category: str | None = None
    description: str | None = None
    sku: str | None = None
    brand: str | None = None
    stock: int | None = None
    images: list[str] | None = None
    specifications: dict[str, Any] | None = None


@dataclass(frozen=True)
class PageRequest:
    """Input: a window over an ordered result set."""

    limit: int = DEFAULT_PAGE_SIZE
    offset: int = 0

    def __post_init__(self) -> None:
        if isinstance(self.limit, bool) or not isinstance(self.limit, int):
            raise ValidationError("Page limit must be an integer")
        if isinstance(self.offset, bool) or not isinstance(self.offset, int):
            raise ValidationError("Page offset must be an integer")
        if not 1 <= self.limit <= MAX_PAGE_SIZE:
            raise ValidationError(f"Page limit must be between 1 and {MAX_PAGE_SIZE}")
        if self.offset < 0:
            raise ValidationError("Page offset cannot be negative")
