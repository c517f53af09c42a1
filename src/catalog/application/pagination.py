"""In-memory pagination over an already-ordered result set."""

from __future__ import annotations

from typing import TypeVar

T = TypeVar("T")


def paginate(items: list[T], limit: int, offset: int) -> list[T]:
    """Return ``items[offset:offset + limit]``, clamped to the list bounds."""
    if offset >= len(items) or limit <= 0:
        return []
    end = min(offset + limit, len(items))
    return items[max(offset, 0):end]
