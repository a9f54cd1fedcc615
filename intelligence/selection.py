"""
intelligence/selection.py

Deterministic template selection.

The index is the first 32 bits of the SHA-256 hex digest of the seed,
reduced modulo the pool size. The same seed always selects the same
template, so a competitor keeps its phrasing while its signals hold.
"""

from __future__ import annotations

import hashlib
from typing import Sequence, TypeVar

T = TypeVar("T")


def stable_index(seed: str, modulo: int) -> int:
    if modulo <= 0:
        return 0
    digest = hashlib.sha256(seed.encode("utf-8")).hexdigest()
    return int(digest[:8], 16) % modulo


def select(seed: str, pool: Sequence[T]) -> T:
    """Pick one entry of `pool` for `seed`.

    Raises:
        ValueError: If `pool` is empty.
    """
    if not pool:
        raise ValueError("Template pool must not be empty.")
    return pool[stable_index(seed, len(pool))]


def stable_key(value: str) -> str:
    return hashlib.sha256(value.encode("utf-8")).hexdigest()
