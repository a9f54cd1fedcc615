"""
seo/dimensions.py

Six 0-100 SEO dimensions from clusters, funnel mix, content depth and
page text.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone

from intelligence.rounding import round_int
from seo.types import ContentDepthMetrics, FunnelDistribution, SeoDimensions, SeoPage, TopicCluster

VERTICAL_CLUSTERS = ("FINTECH",)
RECENT_WINDOW = timedelta(days=90)
ENTERPRISE_PATTERN = re.compile(r"enterprise")
EXECUTIVE_PATTERN = re.compile(r"cxo|c-suite|cio|cto|cfo")


def _topic_concentration(clusters: list[TopicCluster], total_weight: int) -> int:
    if not clusters or total_weight <= 0:
        return 0
    return round_int(clusters[0].cluster_weight / total_weight * 100)


def _vertical_focus(clusters: list[TopicCluster], total_weight: int) -> int:
    vertical_weight = sum(c.cluster_weight for c in clusters if c.cluster_name in VERTICAL_CLUSTERS)
    if vertical_weight <= 0:
        return 0
    return round_int(min(1.0, vertical_weight / max(1, total_weight)) * 100)


def _funnel_balance(funnel: FunnelDistribution) -> int:
    total = funnel.total
    if total <= 0:
        return 0
    ideal = total / 3
    max_diff = max(
        abs(funnel.top_of_funnel - ideal),
        abs(funnel.mid_of_funnel - ideal),
        abs(funnel.bottom_of_funnel - ideal),
    )
    return round_int((1 - max_diff / total) * 100)


def _enterprise_orientation(pages: list[SeoPage]) -> int:
    text = " ".join(f"{p.h1} {p.meta_title}" for p in pages).lower()
    hits = len(ENTERPRISE_PATTERN.findall(text)) + len(EXECUTIVE_PATTERN.findall(text))
    return min(100, 40 + hits * 10) if hits > 0 else 0


def _momentum(pages: list[SeoPage], content: ContentDepthMetrics, now: datetime) -> int:
    recent = [p for p in pages if p.published_at is not None and now - p.published_at <= RECENT_WINDOW]
    if not recent:
        return 0
    cadence = min(content.publishing_frequency_per_month / 6, 1.0)
    recency = min(len(recent) / max(1, len(pages)), 1.0)
    return round_int((0.6 * cadence + 0.4 * recency) * 100)


def compute_seo_dimensions(
    *,
    clusters: list[TopicCluster],
    funnel: FunnelDistribution,
    content: ContentDepthMetrics,
    pages: list[SeoPage],
    now: datetime | None = None,
) -> SeoDimensions:
    total_weight = sum(c.cluster_weight for c in clusters)
    return SeoDimensions(
        topic_concentration=_topic_concentration(clusters, total_weight),
        vertical_seo_focus=_vertical_focus(clusters, total_weight),
        funnel_coverage_balance=_funnel_balance(funnel),
        content_investment_intensity=content.content_investment_score,
        enterprise_seo_orientation=_enterprise_orientation(pages),
        seo_momentum=_momentum(pages, content, now or datetime.now(timezone.utc)),
    )
