"""Textual key conventions for cache entries and index sets.

Indexed attribute values are normalized (trimmed, lowercased); product
ids are used verbatim.
"""

from __future__ import annotations

from catalog.domain.model.identity import normalize

ALL_PRODUCTS_KEY = "all_products"


def product_key(product_id: str) -> str:
    return f"product_{product_id}"


def name_key(name: str) -> str:
    return f"product_by_name_{normalize(name)}"


def category_key(category: str) -> str:
    return f"product_by_category_{normalize(category)}"
