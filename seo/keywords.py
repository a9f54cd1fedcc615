"""
seo/keywords.py

1-3 gram keyword frequencies over headings, titles and anchor text.
"""

from __future__ import annotations

import re
from collections import Counter
from typing import Iterable
from urllib.parse import urlparse

from seo.types import KeywordCount, SeoPage

STOP_WORDS = frozenset(
    {
        "the", "and", "or", "for", "with", "a", "an", "to", "of", "in", "on", "at", "by", "from",
        "is", "are", "this", "that", "these", "those", "it", "as", "be", "we", "you", "your",
        "our", "their",
    }
)

CONTENT_PATH_PATTERN = re.compile(r"/(blog|resources|insights|knowledge|case-stud(?:y|ies)|guides)(/|$)", re.IGNORECASE)
_TOKEN_SPLIT = re.compile(r"[^a-z0-9]+")


def is_seo_content_path(url: str) -> bool:
    path = urlparse(url).path if "://" in url else url
    return bool(CONTENT_PATH_PATTERN.search(path))


def tokenize(text: str) -> list[str]:
    return [token for token in _TOKEN_SPLIT.split(text.lower()) if len(token) > 1 and token not in STOP_WORDS]


def build_ngrams(tokens: list[str], min_n: int = 1, max_n: int = 3) -> list[str]:
    grams: list[str] = []
    for n in range(min_n, max_n + 1):
        for i in range(len(tokens) - n + 1):
            grams.append(" ".join(tokens[i : i + n]))
    return grams


def build_keyword_profile(pages: Iterable[SeoPage]) -> list[KeywordCount]:
    counts: Counter[str] = Counter()
    for page in pages:
        source = " ".join(
            part for part in (page.h1, page.meta_title, *page.h2, *page.h3, *page.anchor_text) if part
        )
        tokens = tokenize(source)
        if not tokens:
            continue
        counts.update(build_ngrams(tokens))

    # Counter.most_common keeps first-seen order among equal counts.
    return [KeywordCount(keyword=keyword, frequency=frequency) for keyword, frequency in counts.most_common()]
