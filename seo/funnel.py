"""
seo/funnel.py

Funnel-stage classification of content pages.
"""

from __future__ import annotations

import re
from typing import Iterable

from seo.types import FunnelDistribution, SeoPage

TOFU_PATTERNS = tuple(re.compile(p, re.IGNORECASE) for p in (r"what is", r"guide", r"how to", r"introduction"))
MOFU_PATTERNS = tuple(re.compile(p, re.IGNORECASE) for p in (r"compare", r"\bvs\b", r"best", r"alternatives?"))
BOFU_PATTERNS = tuple(
    re.compile(p, re.IGNORECASE) for p in (r"pricing", r"demo", r"contact sales", r"case stud(y|ies)")
)


class FunnelStage:
    TOP = "top"
    MID = "mid"
    BOTTOM = "bottom"
    UNKNOWN = "unknown"


def classify_page_funnel(page: SeoPage) -> str:
    """Bottom-funnel patterns win over mid, mid over top."""
    text = " ".join(part for part in (page.h1, page.meta_title, *page.h2, page.url) if part).lower()
    if any(pattern.search(text) for pattern in BOFU_PATTERNS):
        return FunnelStage.BOTTOM
    if any(pattern.search(text) for pattern in MOFU_PATTERNS):
        return FunnelStage.MID
    if any(pattern.search(text) for pattern in TOFU_PATTERNS):
        return FunnelStage.TOP
    return FunnelStage.UNKNOWN


def compute_funnel_distribution(pages: Iterable[SeoPage]) -> FunnelDistribution:
    stages = [classify_page_funnel(page) for page in pages]
    return FunnelDistribution(
        top_of_funnel=stages.count(FunnelStage.TOP),
        mid_of_funnel=stages.count(FunnelStage.MID),
        bottom_of_funnel=stages.count(FunnelStage.BOTTOM),
    )
