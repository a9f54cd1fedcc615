"""
baseline/text.py

Text helpers shared by the baseline classifiers.
"""

from __future__ import annotations

import re
from typing import Iterable

_WHITESPACE = re.compile(r"\s+")


def collapse(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def combine(parts: Iterable[str | None]) -> str:
    """Join non-empty parts, collapse whitespace and lowercase."""
    return collapse(" ".join(part for part in parts if part)).lower()


def count_keywords(text: str, keywords: Iterable[str]) -> int:
    """Count whole-word, case-insensitive occurrences of every keyword."""
    total = 0
    for keyword in keywords:
        if not keyword:
            continue
        pattern = re.compile(rf"\b{re.escape(keyword)}\b", re.IGNORECASE)
        total += len(pattern.findall(text))
    return total


def contains_word(text: str, phrase: str) -> bool:
    return re.search(rf"\b{re.escape(phrase)}\b", text, re.IGNORECASE) is not None
