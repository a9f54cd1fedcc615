"""
change_detection/pm_signals.py

Narrow, high-confidence diffs over the signals product marketers care
about: headline, primary CTA, navigation labels, pricing structure,
product sections and customer proof.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Union

from app.scraping.extractor import (
    extract_plan_signals,
    extract_price_signals,
    normalize_signal_text,
    parse_html,
    visible_text_without_footer,
)
from app.scraping.taxonomy import PageType

SignalValue = Union[str, list[str], None]

PRODUCT_SECTION_PATTERN = re.compile(r"(feature|service|solution|capability|offering|platform)", re.IGNORECASE)
CASE_STUDY_KEYWORDS = ("case study", "customer story", "success story", "trusted by", "client")
_LOGO = re.compile(r"\blogo\b")

# Services pages carry the same section headings as product pages.
PRODUCT_SECTION_PAGE_TYPES = (PageType.PRODUCT_OR_SERVICES, PageType.SERVICES)


class PmSignalChangeType:
    HOMEPAGE_HEADLINE_CHANGE = "homepage_headline_change"
    CTA_TEXT_CHANGE = "cta_text_change"
    PRICING_STRUCTURE_CHANGE = "pricing_structure_change"
    PRODUCT_SERVICE_SECTION_CHANGE = "product_service_section_change"
    NAV_ITEMS_CHANGE = "nav_items_change"
    CASE_STUDY_OR_CUSTOMER_LOGO_ADDED = "case_study_or_customer_logo_added"


@dataclass(frozen=True)
class PmSignalSnapshot:
    page_type: str
    html: str
    primary_headline: str | None = None
    primary_cta_text: str | None = None
    nav_items: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class PmSignalDiff:
    page_type: str
    change_type: str
    before_value: SignalValue
    after_value: SignalValue
    confidence: str


def normalize_array(values: list[str]) -> list[str]:
    return sorted({normalized for normalized in (normalize_signal_text(v) for v in values) if normalized})


def extract_product_section_signals(html: str) -> list[str]:
    sections: set[str] = set()
    for element in parse_html(html).select("main h2, main h3, section h2, section h3"):
        normalized = normalize_signal_text(element.get_text())
        if normalized and PRODUCT_SECTION_PATTERN.search(normalized):
            sections.add(normalized)
    return sorted(sections)


def case_study_or_logo_additions(before_html: str, after_html: str) -> list[str]:
    before = normalize_signal_text(visible_text_without_footer(before_html))
    after = normalize_signal_text(visible_text_without_footer(after_html))

    additions = [keyword for keyword in CASE_STUDY_KEYWORDS if keyword not in before and keyword in after]
    if len(_LOGO.findall(after)) > len(_LOGO.findall(before)):
        additions.append("logo")
    return additions


def detect_pm_signal_changes(before: PmSignalSnapshot, after: PmSignalSnapshot) -> list[PmSignalDiff]:
    page_type = after.page_type
    diffs: list[PmSignalDiff] = []

    before_nav = normalize_array(before.nav_items)
    after_nav = normalize_array(after.nav_items)
    if before_nav != after_nav:
        diffs.append(
            PmSignalDiff(page_type, PmSignalChangeType.NAV_ITEMS_CHANGE, before_nav, after_nav, "High")
        )

    if page_type == PageType.HOMEPAGE:
        before_headline = normalize_signal_text(before.primary_headline)
        after_headline = normalize_signal_text(after.primary_headline)
        if before_headline and after_headline and before_headline != after_headline:
            diffs.append(
                PmSignalDiff(
                    page_type,
                    PmSignalChangeType.HOMEPAGE_HEADLINE_CHANGE,
                    before.primary_headline,
                    after.primary_headline,
                    "High",
                )
            )

    before_cta = normalize_signal_text(before.primary_cta_text)
    after_cta = normalize_signal_text(after.primary_cta_text)
    if before_cta and after_cta and before_cta != after_cta:
        diffs.append(
            PmSignalDiff(
                page_type,
                PmSignalChangeType.CTA_TEXT_CHANGE,
                before.primary_cta_text,
                after.primary_cta_text,
                "High",
            )
        )

    if page_type == PageType.PRICING:
        before_prices = extract_price_signals(visible_text_without_footer(before.html))
        after_prices = extract_price_signals(visible_text_without_footer(after.html))
        before_plans = extract_plan_signals(before.html)
        after_plans = extract_plan_signals(after.html)
        if before_prices != after_prices or before_plans != after_plans:
            diffs.append(
                PmSignalDiff(
                    page_type,
                    PmSignalChangeType.PRICING_STRUCTURE_CHANGE,
                    [*before_plans, *before_prices],
                    [*after_plans, *after_prices],
                    "High",
                )
            )

    if page_type in PRODUCT_SECTION_PAGE_TYPES:
        before_sections = extract_product_section_signals(before.html)
        after_sections = extract_product_section_signals(after.html)
        if before_sections != after_sections:
            diffs.append(
                PmSignalDiff(
                    page_type,
                    PmSignalChangeType.PRODUCT_SERVICE_SECTION_CHANGE,
                    before_sections,
                    after_sections,
                    "Medium",
                )
            )

    if page_type == PageType.CASE_STUDIES_OR_CUSTOMERS:
        additions = case_study_or_logo_additions(before.html, after.html)
        if additions:
            diffs.append(
                PmSignalDiff(
                    page_type,
                    PmSignalChangeType.CASE_STUDY_OR_CUSTOMER_LOGO_ADDED,
                    None,
                    additions,
                    "High",
                )
            )

    return diffs
