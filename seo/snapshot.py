"""
seo/snapshot.py

Composes the full search-intelligence view for one competitor: keyword
profile, clusters, funnel, content depth, dimensions, evolution, gap
analysis against a reference page set, and a short executive snapshot.
"""

from __future__ import annotations

from datetime import datetime

from intelligence.selection import select
from seo.clusters import build_topic_clusters
from seo.content_depth import compute_content_depth_metrics
from seo.dimensions import compute_seo_dimensions
from seo.evolution import analyze_seo_evolution
from seo.funnel import compute_funnel_distribution
from seo.keywords import build_keyword_profile
from seo.onsite import (
    KeywordProfileCache,
    extract_domain_keyword_profile,
    find_content_gaps,
    map_keyword_clusters,
)
from seo.types import (
    ContentDepthMetrics,
    FunnelDistribution,
    SeoDimensions,
    SeoEvolution,
    SeoIntelligence,
    SeoPage,
    SeoSnapshotRecord,
    SeoSnapshotSummary,
    TopicCluster,
)

DOMINANT_KEYWORD_LIMIT = 30


def level(score: float) -> str:
    if score >= 75:
        return "High"
    if score >= 40:
        return "Moderate"
    return "Low"


def _share_label(share: float) -> str:
    if share >= 0.45:
        return "Strong"
    if share >= 0.2:
        return "Moderate"
    return "Limited"


def describe_funnel(funnel: FunnelDistribution) -> str:
    total = funnel.total
    if total == 0:
        return "Funnel coverage not yet observable from captured content."
    top = _share_label(funnel.top_of_funnel / total)
    mid = _share_label(funnel.mid_of_funnel / total)
    bottom = _share_label(funnel.bottom_of_funnel / total)
    return f"Top-of-Funnel: {top} · Mid-Funnel: {mid} · Bottom-of-Funnel: {bottom}"


def describe_content_intensity(content: ContentDepthMetrics) -> str:
    if content.total_blog_pages == 0:
        return "Limited visible content investment captured so far."
    avg_words = f"{content.avg_word_count:,} words" if content.avg_word_count > 0 else "n/a"
    cadence = (
        f"{content.publishing_frequency_per_month:g}/month"
        if content.publishing_frequency_per_month > 0
        else "low / irregular cadence"
    )
    return (
        f"Blog Pages: {content.total_blog_pages} · Avg Depth: {avg_words} · "
        f"Publishing Frequency: {cadence} ({level(content.content_investment_score)} investment)."
    )


def enterprise_signal(dimensions: SeoDimensions) -> str:
    if dimensions.enterprise_seo_orientation == 0:
        return "No strong enterprise-specific SEO emphasis detected yet."
    return f"Enterprise Orientation: {level(dimensions.enterprise_seo_orientation)} emphasis in SEO content."


def detect_seo_risk_flags(dimensions: SeoDimensions) -> list[str]:
    flags: list[str] = []
    if dimensions.topic_concentration > 80 and dimensions.vertical_seo_focus < 30:
        flags.append("Narrow topic diversity with limited vertical depth.")
    if dimensions.funnel_coverage_balance < 40:
        flags.append("Imbalanced funnel coverage across awareness, consideration, and decision content.")
    if dimensions.content_investment_intensity < 30:
        flags.append("Low visible content investment relative to typical enterprise programs.")
    if dimensions.seo_momentum < 30 and dimensions.content_investment_intensity > 40:
        flags.append("Content library exists but recent publishing momentum appears muted.")
    return flags[:3]


def trajectory_label(evolution: SeoEvolution) -> str:
    if evolution.acceleration_level == "Stable":
        return "Stable"
    if evolution.acceleration_level == "Increasing":
        return "Expanding"
    return "Aggressive Expansion"


def executive_summary(
    competitor_id: str,
    clusters: list[TopicCluster],
    dimensions: SeoDimensions,
    evolution: SeoEvolution,
) -> str:
    topics = " and ".join(c.cluster_name for c in clusters[:2]) if clusters else "general topics"
    topics = topics.lower()
    investment = level(dimensions.content_investment_intensity).lower()
    funnel = level(dimensions.funnel_coverage_balance).lower()
    templates = (
        f"This competitor concentrates SEO efforts on {topics} themes. Content investment appears "
        f"{investment} with {funnel} funnel coverage. {evolution.expansion_signal}",
        f"Observed SEO activity skews toward {topics} while maintaining {funnel} coverage across the funnel. "
        f"Overall content investment is {investment}, with trajectory classified as "
        f"{evolution.acceleration_level.lower()}.",
        f"Current search positioning is anchored in {topics} topics with {investment} content depth. "
        f"Funnel mix is {funnel}, and recent signals point to {trajectory_label(evolution).lower()} "
        "rather than abrupt shifts.",
    )
    return select(f"{competitor_id}:seo_snapshot", templates)


def build_seo_intelligence(
    *,
    competitor_id: str,
    pages: list[SeoPage],
    target_pages: list[SeoPage] | None = None,
    previous_snapshots: list[SeoSnapshotRecord] | None = None,
    cache: KeywordProfileCache | None = None,
    now: datetime | None = None,
) -> SeoIntelligence:
    """Full SEO view for one competitor.

    Args:
        competitor_id: Seed for the keyword cache and template choice.
        pages: Content pages captured for the competitor.
        target_pages: Reference page set for gap analysis; empty when omitted.
        previous_snapshots: Stored dimension history for the evolution signal.
        cache: Run-scoped keyword profile cache.
        now: Reference time for momentum.

    Returns:
        A `SeoIntelligence` record. Empty inputs yield zeroed dimensions
        and "not yet observable" descriptions.
    """
    cache = cache if cache is not None else KeywordProfileCache()
    pages = [page for page in pages if page.url]

    keywords = build_keyword_profile(pages)
    topic_clusters = build_topic_clusters(keywords)
    funnel = compute_funnel_distribution(pages)
    content = compute_content_depth_metrics(pages)
    dimensions = compute_seo_dimensions(
        clusters=topic_clusters,
        funnel=funnel,
        content=content,
        pages=pages,
        now=now,
    )
    evolution = analyze_seo_evolution(previous_snapshots or [])

    profile = extract_domain_keyword_profile(domain_id=competitor_id, pages=pages, cache=cache)
    weighted_clusters = map_keyword_clusters(profile)
    reference_profile = extract_domain_keyword_profile(
        domain_id=f"{competitor_id}:reference",
        pages=list(target_pages or []),
        cache=cache,
    )
    content_gap = find_content_gaps(
        target_profile=profile,
        competitor_profile=reference_profile,
        target_clusters=weighted_clusters,
        competitor_clusters=map_keyword_clusters(reference_profile),
    )

    dominant_topics = [c.cluster_name for c in (weighted_clusters or topic_clusters)[:5]]
    summary = SeoSnapshotSummary(
        dominant_topics=dominant_topics,
        funnel_strategy=describe_funnel(funnel),
        content_intensity=describe_content_intensity(content),
        enterprise_signal=enterprise_signal(dimensions),
        seo_risk_flags=detect_seo_risk_flags(dimensions),
        trajectory_signal=trajectory_label(evolution),
        executive_summary=executive_summary(competitor_id, topic_clusters, dimensions, evolution),
    )

    return SeoIntelligence(
        snapshot=summary,
        topic_clusters=topic_clusters,
        funnel=funnel,
        content=content,
        dimensions=dimensions,
        evolution=evolution,
        domain_keyword_profile=profile,
        dominant_keywords=[kw.keyword for kw in profile[:DOMINANT_KEYWORD_LIMIT]],
        weighted_clusters=weighted_clusters,
        content_gap=content_gap,
    )
