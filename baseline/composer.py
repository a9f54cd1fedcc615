"""
baseline/composer.py

Turns the individual baseline profiles into the human-readable summary
lines shown alongside them.
"""

from __future__ import annotations

from baseline.types import (
    AboutSnapshot,
    CompanyBaselineProfile,
    IndustryProfile,
    OfferingComplexity,
    OfferingProfile,
    TargetSegment,
    TargetSegmentProfile,
    TrustProfile,
    ValuePropProfile,
    ValuePropType,
)
from intelligence.selection import select

NOT_SPECIFIED = "Not clearly specified"

TARGET_MARKET_LABELS: dict[str, str] = {
    TargetSegment.ENTERPRISE: "Enterprise-focused positioning",
    TargetSegment.MID_MARKET: "Mid-market oriented positioning",
    TargetSegment.SMB: "SMB / small business oriented positioning",
    TargetSegment.MIXED: "Mixed segment positioning",
    TargetSegment.UNKNOWN: "Target segment not explicitly signaled yet",
}

OFFERING_SUMMARIES: dict[str, str] = {
    OfferingComplexity.SINGLE: "Offering Structure: Focused single-offering model.",
    OfferingComplexity.MULTI_SERVICE: "Offering Structure: Multi-service model with a defined set of offerings.",
    OfferingComplexity.BROAD_PORTFOLIO: "Offering Structure: Diversified multi-service portfolio.",
}
OFFERING_FALLBACK = "Offering structure not yet clearly surfaced."

VALUE_PROP_TEMPLATES: dict[str, tuple[str, ...]] = {
    ValuePropType.OUTCOME_DRIVEN: ("Outcome-driven transformation narrative.",),
    ValuePropType.EFFICIENCY: ("Efficiency and productivity improvement narrative.",),
    ValuePropType.RISK_COMPLIANCE: ("Risk and compliance-focused narrative.",),
    ValuePropType.INNOVATION: ("Innovation and future-oriented narrative.",),
    ValuePropType.COST_OPTIMIZATION: ("Cost optimization narrative.",),
}
VALUE_PROP_FALLBACK = ("Value proposition is present but not yet strongly classified.",)

TRUST_FALLBACK = "Trust signals will strengthen as more surfaces are crawled."


def biography_lines(about: AboutSnapshot, industry: IndustryProfile) -> list[str]:
    industry_line = f"Industry: {industry.primary_industry or NOT_SPECIFIED}"
    if industry.primary_industry:
        industry_line += f" ({industry.industry_confidence} confidence)"
    founded = (
        f"Founded: {about.founding_year}"
        if about.founding_year is not None
        else "Founded year: Not explicitly stated"
    )
    regions = (
        f"Regions Mentioned: {', '.join(about.detected_regions)}"
        if about.detected_regions
        else f"Regions Mentioned: {NOT_SPECIFIED}"
    )
    return [industry_line, founded, regions]


def trust_lines(trust: TrustProfile) -> list[str]:
    indicators = trust.trust_indicators
    lines: list[str] = []
    if indicators.case_studies_present:
        lines.append("Case studies present")
    if indicators.certifications_detected:
        lines.append(f"Certifications detected: {', '.join(indicators.certifications_detected)}")
    if indicators.logo_grid_detected:
        lines.append('Logo grid / "Trusted by" section detected')
    if indicators.testimonial_count > 0:
        lines.append(f"Testimonials detected (approx. {indicators.testimonial_count})")
    return lines or [TRUST_FALLBACK]


def industry_summary(industry: IndustryProfile) -> str:
    summary = f"Primary industry: {industry.primary_industry or NOT_SPECIFIED}"
    if industry.secondary_industries:
        summary += f"; Secondary: {', '.join(industry.secondary_industries)}"
    return f"{summary}. Confidence: {industry.industry_confidence}."


def compose_baseline(
    *,
    competitor_id: str,
    about: AboutSnapshot,
    industry: IndustryProfile,
    segment: TargetSegmentProfile,
    offerings: OfferingProfile,
    value_prop: ValuePropProfile,
    trust: TrustProfile,
) -> CompanyBaselineProfile:
    value_prop_pool = VALUE_PROP_TEMPLATES.get(value_prop.value_prop_type, VALUE_PROP_FALLBACK)
    return CompanyBaselineProfile(
        about=about,
        industry_profile=industry,
        target_segment_profile=segment,
        offering_profile=offerings,
        value_prop_profile=value_prop,
        trust_profile=trust,
        biography_summary="\n".join(biography_lines(about, industry)),
        industry_summary=industry_summary(industry),
        target_market_summary=TARGET_MARKET_LABELS.get(
            segment.target_segment, TARGET_MARKET_LABELS[TargetSegment.UNKNOWN]
        ),
        offering_structure_summary=OFFERING_SUMMARIES.get(offerings.offering_complexity_level, OFFERING_FALLBACK),
        value_proposition_summary=select(f"{competitor_id}:valueProp:{value_prop.rule_id}", value_prop_pool),
        trust_profile_summary="\n".join(trust_lines(trust)),
    )
