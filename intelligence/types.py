"""
intelligence/types.py

Records passed between the deterministic intelligence stages:
raw signals -> traits -> scores -> ranking -> narrative -> confidence.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any


class ScoreDimension:
    POSITIONING = "Positioning"
    OPERATIONAL_DEPTH = "OperationalDepth"
    MONETIZATION_CLARITY = "MonetizationClarity"
    MARKET_FOCUS = "MarketFocus"
    CREDIBILITY_PROOF = "CredibilityProof"
    EXECUTION_VELOCITY = "ExecutionVelocity"

    ALL = (
        POSITIONING,
        OPERATIONAL_DEPTH,
        MONETIZATION_CLARITY,
        MARKET_FOCUS,
        CREDIBILITY_PROOF,
        EXECUTION_VELOCITY,
    )


class ConfidenceLevel:
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


UNKNOWN = "unknown"


@dataclass(frozen=True)
class ServiceSnapshotSignal:
    strategic_keywords_count: int = 0
    execution_keywords_count: int = 0
    lifecycle_keywords_count: int = 0
    enterprise_keywords_count: int = 0
    industries: list[str] = field(default_factory=list)
    primary_focus: str = "Balanced"
    section_count: int = 0

    @classmethod
    def from_structured(cls, payload: Any) -> "ServiceSnapshotSignal | None":
        """Read the service keys stored alongside `search_seo`; None when absent."""
        if not isinstance(payload, dict) or "section_count" not in payload:
            return None

        def _int(key: str) -> int:
            value = payload.get(key)
            return int(value) if isinstance(value, (int, float)) else 0

        industries = payload.get("industries")
        focus = payload.get("primary_focus")
        return cls(
            strategic_keywords_count=_int("strategic_keywords_count"),
            execution_keywords_count=_int("execution_keywords_count"),
            lifecycle_keywords_count=_int("lifecycle_keywords_count"),
            enterprise_keywords_count=_int("enterprise_keywords_count"),
            industries=[str(item) for item in industries] if isinstance(industries, list) else [],
            primary_focus=focus if focus in ("Strategic", "Execution", "Balanced") else "Balanced",
            section_count=_int("section_count"),
        )


@dataclass(frozen=True)
class SnapshotSignal:
    url: str | None = None
    http_status: int | None = None
    title: str | None = None
    h1_text: str | None = None
    h2_headings: list[str] = field(default_factory=list)
    h3_headings: list[str] = field(default_factory=list)
    list_items: list[str] = field(default_factory=list)
    nav_labels: list[str] = field(default_factory=list)
    primary_cta_text: str | None = None
    secondary_cta_text: str | None = None
    structured_content: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ServicesSignal:
    snapshot: ServiceSnapshotSignal | None
    evidence_headings: list[str]
    blocked_by_bot_mitigation: bool


@dataclass(frozen=True)
class WebpageSignals:
    messaging_theme: str | None = None
    gtm_motion: str | None = None
    pricing_narrative: str | None = None
    capability_theme: str | None = None


@dataclass(frozen=True)
class RawSignals:
    competitor_id: str
    tracked_page_types: list[str]
    changes_last_30d_count: int
    snapshots: dict[str, SnapshotSignal]
    services: ServicesSignal
    webpage_signals: WebpageSignals


@dataclass(frozen=True)
class EvidenceItem:
    source: str
    key: str
    value: Any


@dataclass(frozen=True)
class Trait:
    id: str
    label: str
    value: str
    rule_id: str
    evidence: list[EvidenceItem]


@dataclass(frozen=True)
class Contribution:
    trait_id: str
    weight: float
    points: int
    rationale: str


@dataclass(frozen=True)
class DimensionScore:
    dimension: str
    score: int
    rule_id: str
    contributions: list[Contribution]


@dataclass(frozen=True)
class RankedEvidence:
    value: Any
    trait_id: str | None = None
    dimension: str | None = None


@dataclass(frozen=True)
class RankedItem:
    id: str
    kind: str
    severity: int
    rule_id: str
    evidence: list[RankedEvidence]
    dimension: str | None = None


@dataclass(frozen=True)
class Ranking:
    strengths: list[RankedItem]
    risks: list[RankedItem]
    imbalances: list[RankedItem]


@dataclass(frozen=True)
class NarrativeLine:
    id: str
    kind: str
    text: str
    template_id: str
    rule_id: str
    evidence: list[RankedEvidence]


@dataclass(frozen=True)
class Narrative:
    strengths: list[NarrativeLine]
    risks: list[NarrativeLine]
    implications: list[NarrativeLine]


@dataclass(frozen=True)
class ConfidenceResult:
    level: str
    rule_id: str
    reasons: list[str]
    signals_used_count: int
    score_spread: int


@dataclass(frozen=True)
class TraceEvent:
    step: str
    rule_id: str
    message: str
    data: Any = None


@dataclass(frozen=True)
class IntelligenceReport:
    competitor_id: str
    raw: RawSignals
    traits: dict[str, Trait]
    scores: dict[str, DimensionScore]
    ranking: Ranking
    narrative: Narrative
    confidence: ConfidenceResult
    trace: list[TraceEvent]

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
