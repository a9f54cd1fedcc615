"""
change_detection/classifier.py

Maps a detected change onto one business category. Rules are checked in a
fixed order and the first match wins, so every change gets exactly one
category.
"""

from __future__ import annotations

import re

from bs4 import BeautifulSoup

from change_detection.details import ChangeType
from change_detection.types import ChangeCategory, DetectedChange

PRODUCT_KEYWORDS = ("product", "service", "solution", "feature", "offering")
TESTIMONIAL_KEYWORDS = ("testimonial", "review", "customer", "trust", "rating", "client", "quote")

_WHITESPACE = re.compile(r"\s+")

_PAGE_TYPE_CATEGORIES = (
    ("pricing", ChangeCategory.PRICING_OFFERS),
    ("cta_elements", ChangeCategory.POSITIONING_MESSAGING),
    ("product_or_services", ChangeCategory.PRODUCT_SERVICES),
    ("use_cases_or_industries", ChangeCategory.PRODUCT_SERVICES),
    ("case_studies_or_customers", ChangeCategory.TRUST_CREDIBILITY),
    ("navigation", ChangeCategory.NAVIGATION_STRUCTURE),
)


def _normalize(value: str | None) -> str:
    return _WHITESPACE.sub(" ", value or "").strip().lower()


def _related(key: str, context: str, width: int) -> bool:
    # An empty side would match anything.
    if not key or not context:
        return False
    return context[:width] in key or key[:width] in context


def _reference_values(change: DetectedChange) -> tuple[str, str, str]:
    reference = change.before or change.after
    if reference is None:
        return "", "", ""
    return _normalize(reference.key), _normalize(reference.label), _normalize(reference.text)


def is_product_or_service_content(change: DetectedChange) -> bool:
    values = (*_reference_values(change), _normalize(change.element_key))
    return any(keyword in value for keyword in PRODUCT_KEYWORDS for value in values)


def is_footer_change(change: DetectedChange) -> bool:
    key, label, _ = _reference_values(change)
    return "footer" in key or "footer" in label or "footer" in _normalize(change.element_key)


def is_logo_or_testimonial(html: str, element_key: str) -> bool:
    """
    True when the added element looks like a logo or testimonial, either by
    its own key or by nearby logo images, headings or aria-labelled blocks.
    """

    key = _normalize(element_key)
    if "logo" in key:
        return True
    if any(keyword in key for keyword in TESTIMONIAL_KEYWORDS):
        return True

    soup = BeautifulSoup(html or "", "html.parser")

    for image in soup.find_all("img"):
        alt = _normalize(image.get("alt"))
        src = _normalize(image.get("src"))
        parent = image.parent
        parent_tag = (parent.name or "").lower() if parent is not None else ""
        if "logo" in alt or "logo" in src or parent_tag in ("header", "footer"):
            context = _normalize(parent.get_text()) if parent is not None else ""
            if _related(key, context, 50):
                return True

    for heading in soup.find_all(["h1", "h2", "h3", "h4", "h5", "h6"]):
        heading_text = _normalize(heading.get_text())
        if any(keyword in heading_text for keyword in TESTIMONIAL_KEYWORDS):
            parent = heading.parent
            context = _normalize(parent.get_text()) if parent is not None else ""
            if _related(key, context, 100):
                return True

    for block in soup.find_all(["section", "article", "div"]):
        aria_label = _normalize(block.get("aria-label"))
        if any(keyword in aria_label for keyword in TESTIMONIAL_KEYWORDS):
            if _related(key, _normalize(block.get_text()), 100):
                return True

    return False


def classify_change(change: DetectedChange, after_html: str | None = None) -> str:
    if change.change_type == ChangeType.CTA_TEXT_CHANGE:
        return ChangeCategory.POSITIONING_MESSAGING

    for page_type, category in _PAGE_TYPE_CATEGORIES:
        if change.page_type == page_type:
            return category

    if change.change_type == ChangeType.ELEMENT_ADDED:
        if is_product_or_service_content(change):
            return ChangeCategory.PRODUCT_SERVICES
        if after_html:
            element_key = (change.after.key if change.after is not None else None) or change.element_key
            if is_logo_or_testimonial(after_html, element_key or ""):
                return ChangeCategory.TRUST_CREDIBILITY

    if change.change_type == ChangeType.NAV_CHANGE or is_footer_change(change):
        return ChangeCategory.NAVIGATION_STRUCTURE

    return ChangeCategory.NAVIGATION_STRUCTURE
