"""Deterministic product identifiers.

A product's id is derived from its business key (name + reference number)
so the same product always maps to the same id, regardless of casing or
surrounding whitespace. The id is a ULID whose 48-bit time component is
always zero and whose 80 random bits are taken from a SHA-256 digest of
the normalized business key.
"""

from __future__ import annotations

import hashlib

from ulid import ULID

_TIME_BYTES = 6
_ENTROPY_BYTES = 10


def normalize(value: str) -> str:
    """Trim surrounding whitespace and fold case."""
    return value.strip().lower()


def generate_product_id(name: str, reference_number: str) -> str:
    seed = f"{normalize(name)}|{normalize(reference_number)}"
    digest = hashlib.sha256(seed.encode("utf-8")).digest()
    return str(ULID.from_bytes(bytes(_TIME_BYTES) + digest[:_ENTROPY_BYTES]))
