"""
Page-type taxonomy for competitor websites.

Each page type carries URL patterns, navigation keywords and content
signals used to classify discovered links and captured pages, plus a
priority used when choosing which pages to crawl (lower runs first).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from urllib.parse import urlparse


class PageType:
    HOMEPAGE = "homepage"
    PRICING = "pricing"
    SERVICES = "services"
    PRODUCT_OR_SERVICES = "product_or_services"
    USE_CASES_OR_INDUSTRIES = "use_cases_or_industries"
    CASE_STUDIES_OR_CUSTOMERS = "case_studies_or_customers"
    CTA_ELEMENTS = "cta_elements"
    NAVIGATION = "navigation"


@dataclass(frozen=True)
class PageTypeDefinition:
    key: str
    label: str
    url_patterns: tuple[re.Pattern[str], ...]
    nav_keywords: tuple[str, ...]
    content_signals: tuple[str, ...]
    priority: int
    pm_value: str
    competitive_signal: str


def _patterns(*raw: str) -> tuple[re.Pattern[str], ...]:
    return tuple(re.compile(item, re.IGNORECASE) for item in raw)


PAGE_TAXONOMY: dict[str, PageTypeDefinition] = {
    PageType.HOMEPAGE: PageTypeDefinition(
        key=PageType.HOMEPAGE,
        label="Homepage",
        url_patterns=_patterns(r"^https?://[^/]+/?$", r"/home/?$"),
        nav_keywords=("home", "homepage"),
        content_signals=("hero", "get started", "book a demo", "trusted by"),
        priority=1,
        pm_value="Primary positioning, headline messaging and top-level CTAs.",
        competitive_signal="Shifts in core value proposition and target audience.",
    ),
    PageType.PRICING: PageTypeDefinition(
        key=PageType.PRICING,
        label="Pricing",
        url_patterns=_patterns(r"/pricing\b", r"/plans?\b", r"/packages?\b", r"/quote\b"),
        nav_keywords=("pricing", "plans", "packages", "get quote"),
        content_signals=("per month", "per user", "annual billing", "enterprise plan"),
        priority=2,
        pm_value="Packaging, tiers and monetization posture.",
        competitive_signal="Price moves, new tiers and packaging changes.",
    ),
    PageType.SERVICES: PageTypeDefinition(
        key=PageType.SERVICES,
        label="Services",
        url_patterns=_patterns(
            r"/services?\b",
            r"/solutions?\b",
            r"/what-we-do\b",
            r"/offerings?\b",
            r"/who-we-serve\b",
            r"/who-we-work-with\b",
        ),
        nav_keywords=(
            "services",
            "solutions",
            "what we do",
            "offerings",
            "who we serve",
            "who we work with",
        ),
        content_signals=(
            "our solutions",
            "service offering",
            "how we deliver",
            "who we serve",
            "clients we serve",
        ),
        priority=3,
        pm_value="Service catalogue and delivery model.",
        competitive_signal="New service lines and shifts in delivery focus.",
    ),
    PageType.PRODUCT_OR_SERVICES: PageTypeDefinition(
        key=PageType.PRODUCT_OR_SERVICES,
        label="Product / Services",
        url_patterns=_patterns(r"product(s)?\b", r"platform\b", r"capabilities?\b"),
        nav_keywords=("product", "products", "platform", "capabilities"),
        content_signals=("features", "capabilities", "what we offer", "our services"),
        priority=3,
        pm_value="Feature surface and capability framing.",
        competitive_signal="Feature launches and capability emphasis.",
    ),
    PageType.USE_CASES_OR_INDUSTRIES: PageTypeDefinition(
        key=PageType.USE_CASES_OR_INDUSTRIES,
        label="Use Cases / Industries",
        url_patterns=_patterns(r"/use-cases?\b", r"/industr(y|ies)\b", r"/verticals?\b", r"/segments?\b"),
        nav_keywords=("use cases", "industries", "verticals", "who we serve"),
        content_signals=("for healthcare", "for finance", "for enterprise", "industry solutions"),
        priority=4,
        pm_value="Target segments and verticals.",
        competitive_signal="Entry into new verticals or segments.",
    ),
    PageType.CASE_STUDIES_OR_CUSTOMERS: PageTypeDefinition(
        key=PageType.CASE_STUDIES_OR_CUSTOMERS,
        label="Case Studies / Customers",
        url_patterns=_patterns(
            r"/case-stud(y|ies)\b",
            r"/customer(s)?\b",
            r"/success(-stories)?\b",
            r"/testimonials?\b",
        ),
        nav_keywords=("case studies", "customers", "success stories", "testimonials", "client stories"),
        content_signals=("customer story", "outcomes", "roi", "trusted by"),
        priority=3,
        pm_value="Proof points, logos and customer outcomes.",
        competitive_signal="New marquee customers and proof investment.",
    ),
    PageType.CTA_ELEMENTS: PageTypeDefinition(
        key=PageType.CTA_ELEMENTS,
        label="CTA Elements",
        url_patterns=_patterns(r"/demo\b", r"/book(-|_)?demo\b", r"/contact\b", r"/signup\b", r"/trial\b"),
        nav_keywords=("book demo", "request demo", "start free", "contact sales", "free trial"),
        content_signals=("start free", "talk to sales", "request a demo", "submit"),
        priority=4,
        pm_value="Conversion paths and go-to-market motion.",
        competitive_signal="Changes between sales-led and self-serve conversion.",
    ),
    PageType.NAVIGATION: PageTypeDefinition(
        key=PageType.NAVIGATION,
        label="Navigation",
        url_patterns=_patterns(r"/sitemap\b"),
        nav_keywords=("menu", "navigation", "site map"),
        content_signals=("header", "footer", "navigation"),
        priority=1,
        pm_value="Information architecture and surfaced priorities.",
        competitive_signal="New top-level sections and de-emphasised areas.",
    ),
}

IGNORE_URL_PATTERNS = _patterns(
    r"/careers?\b",
    r"/jobs?\b",
    r"/legal\b",
    r"/privacy\b",
    r"/terms\b",
    r"/news\b",
    r"/blog\b",
    r"/help\b",
    r"/support\b",
    r"/docs?\b",
    r"/documentation\b",
)

IGNORE_NAV_TEXT = (
    "careers",
    "jobs",
    "we're hiring",
    "privacy policy",
    "terms",
    "help center",
    "support",
    "documentation",
)

# Checked in order; the wildcard host pattern applies to every competitor.
MANDATORY_CRAWL_PATHS: tuple[tuple[re.Pattern[str], tuple[str, ...]], ...] = (
    (
        re.compile(r"crunchbase\.com", re.IGNORECASE),
        (
            "/buy/select-product",
            "/products",
            "/offerings",
            "/solutions",
            "/services",
            "/platform",
            "/features",
        ),
    ),
    (
        re.compile(r".*"),
        (
            "/pricing",
            "/products",
            "/product",
            "/platform",
            "/services",
            "/solutions",
            "/features",
            "/capabilities",
        ),
    ),
)

DETECTION_ORDER: tuple[str, ...] = (
    PageType.PRICING,
    PageType.SERVICES,
    PageType.PRODUCT_OR_SERVICES,
    PageType.USE_CASES_OR_INDUSTRIES,
    PageType.CASE_STUDIES_OR_CUSTOMERS,
    PageType.CTA_ELEMENTS,
)

_WHITESPACE = re.compile(r"\s+")


def normalize_text(value: str | None) -> str:
    return _WHITESPACE.sub(" ", value or "").strip().lower()


def priority_of(page_type: str) -> int:
    definition = PAGE_TAXONOMY.get(page_type)
    return definition.priority if definition else 99


def _path_of(url: str) -> str:
    try:
        return urlparse(url).path
    except ValueError:
        return ""


def page_type_from_url(url: str) -> str | None:
    for page_type in DETECTION_ORDER:
        if any(pattern.search(url) for pattern in PAGE_TAXONOMY[page_type].url_patterns):
            return page_type
    if _path_of(url) in ("", "/"):
        return PageType.HOMEPAGE
    return None


def page_type_from_nav(url: str, text: str | None) -> str | None:
    from_url = page_type_from_url(url)
    if from_url is not None:
        return from_url
    normalized = normalize_text(text)
    if not normalized:
        return None
    for page_type in DETECTION_ORDER:
        if any(keyword in normalized for keyword in PAGE_TAXONOMY[page_type].nav_keywords):
            return page_type
    return None


def page_type_from_content(html: str, url: str) -> str:
    from_url = page_type_from_url(url)
    if from_url is not None:
        return from_url
    normalized = normalize_text(html)
    for page_type in DETECTION_ORDER:
        if any(signal in normalized for signal in PAGE_TAXONOMY[page_type].content_signals):
            return page_type
    return PageType.HOMEPAGE


def should_ignore(url: str, text: str | None = None) -> bool:
    if any(pattern.search(url) for pattern in IGNORE_URL_PATTERNS):
        return True
    normalized = normalize_text(text)
    return bool(normalized) and any(item in normalized for item in IGNORE_NAV_TEXT)


def mandatory_paths_for_host(hostname: str) -> list[str]:
    """
    Mandatory paths for a host, deduplicated across matching patterns.
    """

    paths: list[str] = []
    for pattern, candidates in MANDATORY_CRAWL_PATHS:
        if not pattern.search(hostname.lower()):
            continue
        for path in candidates:
            if path not in paths:
                paths.append(path)
    return paths
