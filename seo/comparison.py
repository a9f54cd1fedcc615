"""
seo/comparison.py

Leaders across tracked competitors for topic concentration, funnel
balance and content investment.
"""

from __future__ import annotations

from dataclasses import dataclass

from seo.types import SeoComparison, SeoDimensions

NO_DATA = "No comparison data available."


@dataclass(frozen=True)
class CompetitorSeoSummary:
    competitor_id: str
    dimensions: SeoDimensions


def _leader(competitors: list[CompetitorSeoSummary], attribute: str) -> CompetitorSeoSummary:
    # max() keeps the first competitor on ties.
    return max(competitors, key=lambda c: getattr(c.dimensions, attribute))


def compare_seo_across_competitors(competitors: list[CompetitorSeoSummary]) -> SeoComparison:
    if not competitors:
        return SeoComparison(
            relative_topic_advantage=NO_DATA,
            funnel_dominance=NO_DATA,
            content_investment_leader=NO_DATA,
        )

    topic = _leader(competitors, "topic_concentration")
    funnel = _leader(competitors, "funnel_coverage_balance")
    content = _leader(competitors, "content_investment_intensity")
    return SeoComparison(
        relative_topic_advantage=f"Strongest topic concentration signal among tracked peers: {topic.competitor_id}.",
        funnel_dominance=f"Best-balanced funnel coverage among tracked peers: {funnel.competitor_id}.",
        content_investment_leader=(
            f"Highest content investment intensity among tracked peers: {content.competitor_id}."
        ),
    )
