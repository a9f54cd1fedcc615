"""
seo/types.py

Records shared by the search-intelligence stages.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any


def _as_str_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if isinstance(item, str) and item.strip()]


@dataclass(frozen=True)
class SeoPage:
    url: str
    h1: str = ""
    h2: list[str] = field(default_factory=list)
    h3: list[str] = field(default_factory=list)
    meta_title: str = ""
    meta_description: str = ""
    word_count: int = 0
    published_at: datetime | None = None
    anchor_text: list[str] = field(default_factory=list)
    slug: str = ""
    image_alt_text: list[str] = field(default_factory=list)

    @classmethod
    def from_record(
        cls,
        record: dict[str, Any],
        *,
        fallback_url: str = "",
        fallback_title: str | None = None,
    ) -> "SeoPage":
        """Build from a stored `search_seo` record; unknown shapes degrade to empty fields."""
        word_count = record.get("word_count")
        published_at = record.get("published_at")
        return cls(
            url=str(record.get("url") or fallback_url),
            h1=str(record.get("h1") or ""),
            h2=_as_str_list(record.get("h2")),
            h3=_as_str_list(record.get("h3")),
            meta_title=str(record.get("meta_title") or fallback_title or ""),
            meta_description=str(record.get("meta_description") or ""),
            word_count=int(word_count) if isinstance(word_count, (int, float)) else 0,
            published_at=published_at if isinstance(published_at, datetime) else None,
            anchor_text=_as_str_list(record.get("anchors") or record.get("anchor_text")),
            slug=str(record.get("slug") or ""),
            image_alt_text=_as_str_list(record.get("image_alt_text")),
        )


@dataclass(frozen=True)
class KeywordCount:
    keyword: str
    frequency: int


@dataclass(frozen=True)
class TopicCluster:
    cluster_name: str
    cluster_weight: int


@dataclass(frozen=True)
class FunnelDistribution:
    top_of_funnel: int = 0
    mid_of_funnel: int = 0
    bottom_of_funnel: int = 0

    @property
    def total(self) -> int:
        return self.top_of_funnel + self.mid_of_funnel + self.bottom_of_funnel


@dataclass(frozen=True)
class ContentDepthMetrics:
    total_blog_pages: int = 0
    avg_word_count: int = 0
    total_case_studies: int = 0
    publishing_frequency_per_month: float = 0.0
    long_form_ratio: float = 0.0
    content_investment_score: int = 0


@dataclass(frozen=True)
class SeoDimensions:
    topic_concentration: int = 0
    vertical_seo_focus: int = 0
    funnel_coverage_balance: int = 0
    content_investment_intensity: int = 0
    enterprise_seo_orientation: int = 0
    seo_momentum: int = 0

    def to_dict(self) -> dict[str, int]:
        return asdict(self)

    @classmethod
    def from_dict(cls, payload: dict[str, Any] | None) -> "SeoDimensions":
        payload = payload or {}
        values: dict[str, int] = {}
        for key in cls.__dataclass_fields__:
            raw = payload.get(key)
            values[key] = int(raw) if isinstance(raw, (int, float)) else 0
        return cls(**values)


@dataclass(frozen=True)
class DomainKeyword:
    keyword: str
    frequency: int
    page_count: int
    appearance_in_h1: int
    keyword_weight: float


@dataclass(frozen=True)
class ClusterScore:
    cluster_name: str
    cluster_score: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ContentGapResult:
    gap_severity: str
    keyword_gaps: list[str]
    cluster_gaps: list[str]
    dominant_competitor_keywords: list[str]
    funnel_imbalance: str | None
    executive_summary_lines: list[str]


@dataclass(frozen=True)
class SeoSnapshotRecord:
    captured_at: datetime
    dimensions: SeoDimensions


@dataclass(frozen=True)
class SeoEvolution:
    dominant_trend: str | None
    expansion_signal: str
    acceleration_level: str


@dataclass(frozen=True)
class SeoComparison:
    relative_topic_advantage: str
    funnel_dominance: str
    content_investment_leader: str


@dataclass(frozen=True)
class SeoSnapshotSummary:
    dominant_topics: list[str]
    funnel_strategy: str
    content_intensity: str
    enterprise_signal: str
    seo_risk_flags: list[str]
    trajectory_signal: str
    executive_summary: str


@dataclass(frozen=True)
class SeoIntelligence:
    snapshot: SeoSnapshotSummary
    topic_clusters: list[TopicCluster]
    funnel: FunnelDistribution
    content: ContentDepthMetrics
    dimensions: SeoDimensions
    evolution: SeoEvolution
    domain_keyword_profile: list[DomainKeyword]
    dominant_keywords: list[str]
    weighted_clusters: list[ClusterScore]
    content_gap: ContentGapResult

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
