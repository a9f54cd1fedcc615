"""
seo/onsite.py

Weighted on-site keyword profiles, weighted topic clusters and content-gap
analysis between two domains.

Profiles are memoised in a `KeywordProfileCache` owned by the caller and
scoped to one pipeline run. Its key is a SHA-256 over the domain id and
the sorted page URLs.
"""

from __future__ import annotations

import re
from collections import Counter
from typing import Iterable
from urllib.parse import urlparse

from intelligence.rounding import round_half_up
from intelligence.selection import stable_key
from seo.types import ClusterScore, ContentGapResult, DomainKeyword, SeoPage

STOP_WORDS = frozenset(
    {
        "the", "and", "for", "with", "that", "this", "from", "into", "your", "their", "have",
        "will", "about", "are", "our", "you", "to", "of", "in", "on", "at", "as", "an", "a",
        "or", "be", "is", "it",
    }
)

TOPIC_MAP: dict[str, tuple[str, ...]] = {
    "CLOUD": ("cloud", "migration", "aws", "azure"),
    "TRANSFORMATION": ("transformation", "modernization", "digital"),
    "ENTERPRISE": ("enterprise", "governance", "scale"),
    "SECURITY": ("security", "compliance", "risk"),
    "FINTECH": ("banking", "payments", "finance"),
}

TOFU_PHRASES = ("what is", "guide", "how to")
MOFU_PHRASES = ("compare", "best", "vs")
BOFU_PHRASES = ("pricing", "demo", "buy")

MAX_PROFILE_KEYWORDS = 100
MAX_WEIGHTED_CLUSTERS = 5
FUNNEL_IMBALANCE_THRESHOLD = 8


class KeywordProfileCache:
    """Run-scoped memo of domain keyword profiles."""

    def __init__(self) -> None:
        self._profiles: dict[str, list[DomainKeyword]] = {}

    @staticmethod
    def key_for(domain_id: str, pages: Iterable[SeoPage]) -> str:
        urls = "|".join(sorted(page.url for page in pages))
        return stable_key(f"{domain_id}:{urls}")

    def get(self, key: str) -> list[DomainKeyword] | None:
        return self._profiles.get(key)

    def put(self, key: str, profile: list[DomainKeyword]) -> None:
        self._profiles[key] = profile

    def __len__(self) -> int:
        return len(self._profiles)


def tokenize(text: str) -> list[str]:
    text = re.sub(r"\d+", " ", text.lower())
    text = re.sub(r"[^a-z\s-]", " ", text)
    return [token for token in text.split() if len(token) >= 3 and token not in STOP_WORDS]


def build_ngrams(tokens: list[str]) -> list[str]:
    grams: list[str] = []
    for n in range(1, 4):
        for i in range(len(tokens) - n + 1):
            grams.append(" ".join(tokens[i : i + n]))
    return grams


def parse_slug(url: str) -> str:
    segments = [segment for segment in urlparse(url).path.split("/") if segment]
    if not segments:
        return ""
    return re.sub(r"[-_]+", " ", segments[-1]).strip()


def _page_text(page: SeoPage) -> str:
    parts = (page.h1, *page.h2, *page.h3, page.meta_title, *page.anchor_text, parse_slug(page.url))
    return " ".join(part for part in parts if part)


def _compute_profile(pages: list[SeoPage]) -> list[DomainKeyword]:
    frequency: Counter[str] = Counter()
    page_count: Counter[str] = Counter()
    h1_appearance: Counter[str] = Counter()

    for page in pages:
        grams = build_ngrams(tokenize(_page_text(page)))
        frequency.update(grams)
        page_count.update(set(grams))
        h1_appearance.update(set(build_ngrams(tokenize(page.h1))))

    profile = [
        DomainKeyword(
            keyword=keyword,
            frequency=count,
            page_count=page_count[keyword],
            appearance_in_h1=h1_appearance[keyword],
            keyword_weight=round_half_up(count * 1.5 + page_count[keyword] * 2 + h1_appearance[keyword] * 3, 2),
        )
        for keyword, count in frequency.items()
    ]
    profile.sort(key=lambda kw: kw.keyword_weight, reverse=True)
    return profile[:MAX_PROFILE_KEYWORDS]


def extract_domain_keyword_profile(
    *,
    domain_id: str,
    pages: list[SeoPage],
    cache: KeywordProfileCache | None = None,
) -> list[DomainKeyword]:
    if cache is None:
        return _compute_profile(pages)

    key = KeywordProfileCache.key_for(domain_id, pages)
    cached = cache.get(key)
    if cached is not None:
        return cached
    profile = _compute_profile(pages)
    cache.put(key, profile)
    return profile


def map_keyword_clusters(profile: list[DomainKeyword]) -> list[ClusterScore]:
    scores: list[ClusterScore] = []
    for name, terms in TOPIC_MAP.items():
        score = sum(kw.keyword_weight for kw in profile if any(term in kw.keyword for term in terms))
        score = round_half_up(score, 2)
        if score > 0:
            scores.append(ClusterScore(cluster_name=name, cluster_score=score))
    scores.sort(key=lambda cluster: cluster.cluster_score, reverse=True)
    return scores[:MAX_WEIGHTED_CLUSTERS]


def _funnel_counts(profile: list[DomainKeyword]) -> tuple[int, int, int]:
    tofu = sum(kw.frequency for kw in profile if any(p in kw.keyword for p in TOFU_PHRASES))
    mofu = sum(kw.frequency for kw in profile if any(p in kw.keyword for p in MOFU_PHRASES))
    bofu = sum(kw.frequency for kw in profile if any(p in kw.keyword for p in BOFU_PHRASES))
    return tofu, mofu, bofu


def summarize_funnel_imbalance(target: tuple[int, int, int], competitor: tuple[int, int, int]) -> str | None:
    delta_tofu, delta_mofu, delta_bofu = (c - t for c, t in zip(competitor, target))
    if delta_mofu > FUNNEL_IMBALANCE_THRESHOLD:
        return "Mid-funnel comparison content appears stronger in competitor coverage."
    if delta_bofu > FUNNEL_IMBALANCE_THRESHOLD:
        return "Bottom-funnel conversion-oriented content appears stronger in competitor coverage."
    if delta_tofu > FUNNEL_IMBALANCE_THRESHOLD:
        return "Top-funnel educational content appears stronger in competitor coverage."
    return None


def find_content_gaps(
    *,
    target_profile: list[DomainKeyword],
    competitor_profile: list[DomainKeyword],
    target_clusters: list[ClusterScore],
    competitor_clusters: list[ClusterScore],
) -> ContentGapResult:
    """Keywords and clusters the competitor weights heavily that the target barely covers."""
    target_weights = {kw.keyword: kw.keyword_weight for kw in target_profile}
    competitor_sorted = sorted(competitor_profile, key=lambda kw: kw.keyword_weight, reverse=True)

    keyword_gaps = [
        kw.keyword
        for kw in competitor_sorted
        if kw.keyword_weight >= 18 and target_weights.get(kw.keyword, 0) <= kw.keyword_weight * 0.35
    ][:5]

    target_cluster_scores = {c.cluster_name: c.cluster_score for c in target_clusters}
    cluster_gaps = [
        c.cluster_name
        for c in competitor_clusters
        if c.cluster_score >= 20 and target_cluster_scores.get(c.cluster_name, 0) <= c.cluster_score * 0.45
    ][:3]

    dominant = [kw.keyword for kw in competitor_sorted[:5]]
    funnel_imbalance = summarize_funnel_imbalance(_funnel_counts(target_profile), _funnel_counts(competitor_profile))

    weighted_gap = len(keyword_gaps) + len(cluster_gaps) * 2 + (1 if funnel_imbalance else 0)
    if weighted_gap >= 6:
        severity = "High"
    elif weighted_gap >= 3:
        severity = "Moderate"
    else:
        severity = "Low"

    top_cluster = competitor_clusters[0].cluster_name if competitor_clusters else "key strategic topics"
    top_keywords = dominant[:2]
    lines = [
        f"Competitor demonstrates stronger emphasis on {top_cluster.lower()} content themes.",
        f"Dominant keyword concentration includes {', '.join(top_keywords)}."
        if top_keywords
        else "Dominant keyword concentration is present but still stabilizing from current crawl data.",
        f"Funnel distribution indicates {funnel_imbalance.lower()}"
        if funnel_imbalance
        else "Funnel distribution appears broadly balanced relative to current comparison inputs.",
        f"Topic exposure gap is most visible in {', '.join(cluster_gaps)}."
        if cluster_gaps
        else "No major topic exposure gap is currently visible across the tracked cluster set.",
        "Consider evaluating strategic coverage in these areas.",
    ]

    return ContentGapResult(
        gap_severity=severity,
        keyword_gaps=keyword_gaps,
        cluster_gaps=cluster_gaps,
        dominant_competitor_keywords=dominant,
        funnel_imbalance=funnel_imbalance,
        executive_summary_lines=lines,
    )
