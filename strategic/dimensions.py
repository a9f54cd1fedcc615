"""
strategic/dimensions.py

Fixed formulas from raw counts to six 0-100 dimension scores.
"""

from __future__ import annotations

from intelligence.rounding import clamp_score
from intelligence.types import EvidenceItem
from strategic.types import (
    DimensionScoreDetail,
    StrategicDimensions,
    StrategicDimensionsResult,
    StrategicRawSignals,
)

BREADTH_WITHOUT_FOCUS = "breadth_without_focus"

# Raw elevation of about 40 is treated as a full score.
ELEVATION_NORMALIZER = 40.0
ENTERPRISE_NORMALIZER = 100.0
BREADTH_DAMPEN_AFTER = 10
BREADTH_FLAG_SERVICE_COUNT = 8
BREADTH_FLAG_VERTICAL_MAX = 40


def strategic_elevation(raw: StrategicRawSignals) -> DimensionScoreDetail:
    score_raw = raw.strategic_terms * 2.0 + raw.lifecycle_terms * 1.5 - raw.execution_terms * 0.5
    return DimensionScoreDetail(
        dimension="strategic_elevation",
        score=clamp_score(score_raw / ELEVATION_NORMALIZER * 100),
        evidence=[
            EvidenceItem("services_snapshot", "strategic_terms", raw.strategic_terms),
            EvidenceItem("services_snapshot", "lifecycle_terms", raw.lifecycle_terms),
            EvidenceItem("services_snapshot", "execution_terms", raw.execution_terms),
        ],
    )


def vertical_depth(raw: StrategicRawSignals) -> DimensionScoreDetail:
    count = len(raw.industries_detected)
    return DimensionScoreDetail(
        dimension="vertical_depth",
        score=10 if count == 0 else min(count * 20, 100),
        evidence=[EvidenceItem("services_snapshot", "industries_detected", list(raw.industries_detected))],
    )


def service_breadth(raw: StrategicRawSignals, vertical_score: int) -> tuple[DimensionScoreDetail, list[str]]:
    count = raw.service_count
    if count > BREADTH_DAMPEN_AFTER:
        # Flatten growth past ten services.
        score = clamp_score(80 + (count - BREADTH_DAMPEN_AFTER) * 2)
    else:
        score = min(count * 10, 100)

    flags: list[str] = []
    if count > BREADTH_FLAG_SERVICE_COUNT and vertical_score < BREADTH_FLAG_VERTICAL_MAX:
        flags.append(BREADTH_WITHOUT_FOCUS)

    detail = DimensionScoreDetail(
        dimension="service_breadth",
        score=score,
        evidence=[EvidenceItem("services_snapshot", "service_count", count)],
    )
    return detail, flags


def enterprise_orientation(raw: StrategicRawSignals) -> DimensionScoreDetail:
    score_raw = raw.enterprise_keywords * 3 + (10 if raw.case_studies_present else 0) + raw.certifications_count * 15
    return DimensionScoreDetail(
        dimension="enterprise_orientation",
        score=clamp_score(score_raw / ENTERPRISE_NORMALIZER * 100),
        evidence=[
            EvidenceItem("services_snapshot", "enterprise_keywords", raw.enterprise_keywords),
            EvidenceItem("case_studies", "case_studies_present", raw.case_studies_present),
            EvidenceItem("case_studies", "certifications_count", raw.certifications_count),
        ],
    )


def monetization_maturity(raw: StrategicRawSignals) -> DimensionScoreDetail:
    base = 60 if raw.pricing_transparent else 30
    if raw.multiple_tiers_detected:
        base += 20
    if raw.enterprise_tier_detected:
        base += 10
    return DimensionScoreDetail(
        dimension="monetization_maturity",
        score=clamp_score(base),
        evidence=[
            EvidenceItem("pricing", "pricing_transparent", raw.pricing_transparent),
            EvidenceItem("pricing", "multiple_tiers_detected", raw.multiple_tiers_detected),
            EvidenceItem("pricing", "enterprise_tier_detected", raw.enterprise_tier_detected),
        ],
    )


def market_momentum(raw: StrategicRawSignals) -> DimensionScoreDetail:
    bonus = 20 if raw.structural_trait_shifts_detected else 0
    return DimensionScoreDetail(
        dimension="market_momentum",
        score=clamp_score(raw.recent_change_count_30d * 15 + bonus),
        evidence=[
            EvidenceItem("changes", "recent_change_count_30d", raw.recent_change_count_30d),
            EvidenceItem("changes", "structural_trait_shifts_detected", raw.structural_trait_shifts_detected),
        ],
    )


def compute_strategic_dimensions(raw: StrategicRawSignals) -> StrategicDimensionsResult:
    vertical = vertical_depth(raw)
    breadth, flags = service_breadth(raw, vertical.score)
    details = [
        strategic_elevation(raw),
        breadth,
        vertical,
        enterprise_orientation(raw),
        monetization_maturity(raw),
        market_momentum(raw),
    ]
    dimensions = StrategicDimensions(**{detail.dimension: detail.score for detail in details})
    return StrategicDimensionsResult(
        dimensions=dimensions,
        details=details,
        flags=flags,
        evidence=[item for detail in details for item in detail.evidence],
    )
