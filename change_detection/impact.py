"""
change_detection/impact.py

Impact level rules and the interpretation templates attached to every
persisted change.
"""

from __future__ import annotations

from dataclasses import dataclass

from change_detection.details import ChangeType
from change_detection.types import ChangeCategory, DetectedChange, ImpactLevel

_STRUCTURAL_TYPES = (ChangeType.ELEMENT_ADDED, ChangeType.ELEMENT_REMOVED)


@dataclass(frozen=True)
class ChangeInterpretation:
    strategic_interpretation: str
    monitoring_action: str


def assess_impact(change: DetectedChange) -> str:
    """
    Impact rules, first match wins:

    - CTA text and pricing copy changes are Moderate.
    - Navigation tweaks are Minor.
    - Product/service sections added or removed are Strategic.
    - Structural changes on the homepage or in positioning content are Strategic.
    - Trust-signal additions are Moderate.
    - Everything else is Minor.
    """

    if change.change_type == ChangeType.CTA_TEXT_CHANGE:
        return ImpactLevel.MODERATE
    if change.category == ChangeCategory.PRICING_OFFERS and change.change_type != ChangeType.NAV_CHANGE:
        return ImpactLevel.MODERATE
    if change.change_type == ChangeType.NAV_CHANGE:
        return ImpactLevel.MINOR

    if change.change_type in _STRUCTURAL_TYPES:
        if change.category == ChangeCategory.PRODUCT_SERVICES:
            return ImpactLevel.STRATEGIC
        if change.page_type == "homepage" or change.category == ChangeCategory.POSITIONING_MESSAGING:
            return ImpactLevel.STRATEGIC
        if change.change_type == ChangeType.ELEMENT_ADDED and change.category == ChangeCategory.TRUST_CREDIBILITY:
            return ImpactLevel.MODERATE

    return ImpactLevel.MINOR


CHANGE_TEMPLATES: dict[tuple[str, str], ChangeInterpretation] = {
    (ChangeCategory.POSITIONING_MESSAGING, ImpactLevel.STRATEGIC): ChangeInterpretation(
        "Core positioning is being reworked; the competitor may be targeting a new audience or value narrative.",
        "Compare the new positioning against your own messaging and brief sales on the shift.",
    ),
    (ChangeCategory.POSITIONING_MESSAGING, ImpactLevel.MODERATE): ChangeInterpretation(
        "Conversion language or sales motion is being tested.",
        "Compare conversion language with your funnel and watch for follow-up changes.",
    ),
    (ChangeCategory.POSITIONING_MESSAGING, ImpactLevel.MINOR): ChangeInterpretation(
        "Messaging copy was refined without a visible change in direction.",
        "No immediate action; keep monitoring for a sustained messaging trend.",
    ),
    (ChangeCategory.PRICING_OFFERS, ImpactLevel.STRATEGIC): ChangeInterpretation(
        "Packaging or monetization strategy is being restructured.",
        "Review pricing tiers side by side and assess exposure in competitive deals.",
    ),
    (ChangeCategory.PRICING_OFFERS, ImpactLevel.MODERATE): ChangeInterpretation(
        "The competitor may be refining monetization strategy.",
        "Review pricing tiers and CTA alignment.",
    ),
    (ChangeCategory.PRICING_OFFERS, ImpactLevel.MINOR): ChangeInterpretation(
        "Pricing page copy was adjusted without a clear structural change.",
        "Spot-check the pricing page on the next crawl.",
    ),
    (ChangeCategory.PRODUCT_SERVICES, ImpactLevel.STRATEGIC): ChangeInterpretation(
        "The offering footprint is changing; new or retired services signal a shift in focus.",
        "Map the added or removed offerings against your roadmap and positioning.",
    ),
    (ChangeCategory.PRODUCT_SERVICES, ImpactLevel.MODERATE): ChangeInterpretation(
        "Product or service presentation is being reframed.",
        "Check whether the reframing changes how buyers compare offerings.",
    ),
    (ChangeCategory.PRODUCT_SERVICES, ImpactLevel.MINOR): ChangeInterpretation(
        "Product or service content received incremental updates.",
        "No immediate action; track for accumulation over time.",
    ),
    (ChangeCategory.TRUST_CREDIBILITY, ImpactLevel.STRATEGIC): ChangeInterpretation(
        "Proof strategy is expanding into new segments or logos.",
        "Identify the new proof points and prepare counter-references.",
    ),
    (ChangeCategory.TRUST_CREDIBILITY, ImpactLevel.MODERATE): ChangeInterpretation(
        "Credibility signals are being strengthened with new proof.",
        "Review new logos or testimonials for overlap with your pipeline.",
    ),
    (ChangeCategory.TRUST_CREDIBILITY, ImpactLevel.MINOR): ChangeInterpretation(
        "Proof content was lightly edited.",
        "No immediate action required.",
    ),
    (ChangeCategory.NAVIGATION_STRUCTURE, ImpactLevel.STRATEGIC): ChangeInterpretation(
        "Site structure was reorganised around new priorities.",
        "Review which sections gained or lost prominence.",
    ),
    (ChangeCategory.NAVIGATION_STRUCTURE, ImpactLevel.MODERATE): ChangeInterpretation(
        "Navigation emphasis shifted toward different sections.",
        "Note newly surfaced sections and watch their content.",
    ),
    (ChangeCategory.NAVIGATION_STRUCTURE, ImpactLevel.MINOR): ChangeInterpretation(
        "Low strategic significance; structural housekeeping.",
        "No immediate action required.",
    ),
}


def interpret_change(category: str, impact_level: str) -> ChangeInterpretation:
    template = CHANGE_TEMPLATES.get((category, impact_level))
    if template is None:
        return CHANGE_TEMPLATES[(ChangeCategory.NAVIGATION_STRUCTURE, ImpactLevel.MINOR)]
    return template
