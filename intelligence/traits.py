"""
intelligence/traits.py

Maps raw signals onto nine qualitative traits. Each trait is a simple
presence or threshold rule and records the values it was derived from.
"""

from __future__ import annotations

from app.scraping.taxonomy import PageType
from intelligence.types import UNKNOWN, EvidenceItem, RawSignals, Trait

TRAIT_IDS = (
    "service_breadth",
    "service_focus",
    "vertical_focus",
    "monetization_signal",
    "gtm_motion",
    "messaging_emphasis",
    "credibility_surface",
    "execution_velocity",
    "bot_mitigation_block",
)

BROAD_SECTION_THRESHOLD = 6
ACTIVE_CHANGE_THRESHOLD = 5
SELECTIVE_CHANGE_THRESHOLD = 2


def derive_execution_velocity(changes_last_30d_count: int) -> str:
    if changes_last_30d_count >= ACTIVE_CHANGE_THRESHOLD:
        return "active"
    if changes_last_30d_count >= SELECTIVE_CHANGE_THRESHOLD:
        return "selective"
    return "stable"


def derive_service_breadth(section_count: int | None) -> str:
    if section_count is None or section_count <= 0:
        return UNKNOWN
    return "broad" if section_count > BROAD_SECTION_THRESHOLD else "focused"


def derive_vertical_focus(industries: list[str]) -> str:
    if len(industries) >= 2:
        return "clear"
    if len(industries) == 1:
        return "diffuse"
    return UNKNOWN


def derive_monetization_signal(pricing_narrative: str | None) -> str:
    text = (pricing_narrative or "").lower()
    if "enterprise positioning emphasized" in text:
        return "enterprise"
    if "sales-driven" in text:
        return "sales-led"
    if "growth-led" in text:
        return "growth-led"
    return UNKNOWN


def derive_gtm_motion(gtm_motion: str | None) -> str:
    text = (gtm_motion or "").lower()
    for motion in ("hybrid", "sales-led", "self-serve"):
        if motion in text:
            return motion
    return UNKNOWN


def derive_competitive_traits(signals: RawSignals) -> dict[str, Trait]:
    service = signals.services.snapshot
    section_count = service.section_count if service is not None else None
    industries = list(service.industries) if service is not None else []
    service_focus = service.primary_focus if service is not None else UNKNOWN
    web = signals.webpage_signals
    has_case_studies = PageType.CASE_STUDIES_OR_CUSTOMERS in signals.tracked_page_types
    blocked = signals.services.blocked_by_bot_mitigation

    traits = [
        Trait(
            id="service_breadth",
            label="Service breadth",
            value=derive_service_breadth(section_count),
            rule_id="TE-SVC-001",
            evidence=[EvidenceItem("snapshot", "services.section_count", section_count)],
        ),
        Trait(
            id="service_focus",
            label="Service focus",
            value=service_focus,
            rule_id="TE-SVC-002",
            evidence=[EvidenceItem("snapshot", "services.primary_focus", service_focus)],
        ),
        Trait(
            id="vertical_focus",
            label="Vertical focus",
            value=derive_vertical_focus(industries),
            rule_id="TE-VERT-001",
            evidence=[EvidenceItem("snapshot", "services.industries", industries)],
        ),
        Trait(
            id="monetization_signal",
            label="Monetization signal",
            value=derive_monetization_signal(web.pricing_narrative),
            rule_id="TE-PRICE-001",
            evidence=[EvidenceItem("webpage_signal", "pricing_narrative", web.pricing_narrative)],
        ),
        Trait(
            id="gtm_motion",
            label="GTM motion",
            value=derive_gtm_motion(web.gtm_motion),
            rule_id="TE-GTM-001",
            evidence=[EvidenceItem("webpage_signal", "gtm_motion", web.gtm_motion)],
        ),
        Trait(
            id="messaging_emphasis",
            label="Messaging emphasis",
            value=web.messaging_theme or UNKNOWN,
            rule_id="TE-MSG-001",
            evidence=[EvidenceItem("webpage_signal", "messaging_theme", web.messaging_theme)],
        ),
        Trait(
            id="credibility_surface",
            label="Credibility surface",
            value="present" if has_case_studies else "absent",
            rule_id="TE-CRED-001",
            evidence=[EvidenceItem("coverage", "tracked.case_studies_or_customers", has_case_studies)],
        ),
        Trait(
            id="execution_velocity",
            label="Execution velocity",
            value=derive_execution_velocity(signals.changes_last_30d_count),
            rule_id="TE-ACT-001",
            evidence=[EvidenceItem("activity", "changes_last_30d_count", signals.changes_last_30d_count)],
        ),
        Trait(
            id="bot_mitigation_block",
            label="Bot mitigation",
            value="blocked" if blocked else "not_blocked",
            rule_id="TE-QUAL-001",
            evidence=[EvidenceItem("snapshot", "services.blocked_by_bot_mitigation", blocked)],
        ),
    ]
    return {trait.id: trait for trait in traits}
