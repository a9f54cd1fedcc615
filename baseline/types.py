"""
baseline/types.py

Records produced by the company baseline profile stages. Every profile
carries a rule id and the evidence it was derived from.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

from intelligence.types import EvidenceItem, SnapshotSignal, TraceEvent


class TargetSegment:
    ENTERPRISE = "enterprise"
    MID_MARKET = "mid_market"
    SMB = "smb"
    MIXED = "mixed"
    UNKNOWN = "unknown"


class OfferingComplexity:
    SINGLE = "single-offering"
    MULTI_SERVICE = "multi-service"
    BROAD_PORTFOLIO = "broad-portfolio"
    UNKNOWN = "unknown"


class ValuePropType:
    OUTCOME_DRIVEN = "outcome-driven"
    EFFICIENCY = "efficiency"
    RISK_COMPLIANCE = "risk-compliance"
    INNOVATION = "innovation"
    COST_OPTIMIZATION = "cost-optimization"
    OTHER = "other"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class AboutSnapshot:
    company_summary_raw: str | None
    founding_year: int | None
    detected_regions: list[str]
    mission_keywords: list[str]
    company_size_signals: list[str]
    rule_id: str
    evidence: list[EvidenceItem]


@dataclass(frozen=True)
class IndustryProfile:
    primary_industry: str | None
    secondary_industries: list[str]
    industry_confidence: str
    rule_id: str
    evidence: list[EvidenceItem]


@dataclass(frozen=True)
class TargetSegmentProfile:
    target_segment: str
    rule_id: str
    evidence: list[EvidenceItem]


@dataclass(frozen=True)
class OfferingProfile:
    core_offerings: list[str]
    offering_count: int
    offering_complexity_level: str
    rule_id: str
    evidence: list[EvidenceItem]


@dataclass(frozen=True)
class ValuePropProfile:
    value_prop_type: str
    dominant_narrative: str | None
    rule_id: str
    evidence: list[EvidenceItem]


@dataclass(frozen=True)
class TrustIndicators:
    case_studies_present: bool
    certifications_detected: list[str]
    logo_grid_detected: bool
    testimonial_count: int


@dataclass(frozen=True)
class TrustProfile:
    trust_indicators: TrustIndicators
    rule_id: str
    evidence: list[EvidenceItem]


@dataclass(frozen=True)
class CompanyBaselineProfile:
    about: AboutSnapshot
    industry_profile: IndustryProfile
    target_segment_profile: TargetSegmentProfile
    offering_profile: OfferingProfile
    value_prop_profile: ValuePropProfile
    trust_profile: TrustProfile
    biography_summary: str
    industry_summary: str
    target_market_summary: str
    offering_structure_summary: str
    value_proposition_summary: str
    trust_profile_summary: str


@dataclass(frozen=True)
class BaselineInput:
    competitor_id: str
    homepage: SnapshotSignal | None = None
    about_page: SnapshotSignal | None = None
    services_page: SnapshotSignal | None = None
    nav_snapshot: SnapshotSignal | None = None
    case_studies_page: SnapshotSignal | None = None


@dataclass(frozen=True)
class BaselineResult:
    profile: CompanyBaselineProfile
    trace: list[TraceEvent] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
