"""
Structured signal extraction from rendered HTML.

Everything here is pure: the same HTML and URL always produce the same
signals. Selectors follow document order, and deduplication keeps the first
occurrence.
"""

from __future__ import annotations

import base64
import hashlib
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup, Tag

from app.scraping.taxonomy import PageType, should_ignore

CTA_PATTERN = re.compile(
    r"(get started|book demo|request demo|start free|free trial|contact sales|talk to sales|sign up|signup)",
    re.IGNORECASE,
)
PRICE_PATTERN = re.compile(r"(\$|usd\s*)\s?\d+[.,]?\d*")
PLAN_PATTERN = re.compile(r"(plan|pricing|starter|pro|business|enterprise|package|tier)", re.IGNORECASE)

STRATEGIC_KEYWORDS = ("strategy", "transformation", "advisory", "roadmap", "innovation", "operating model")
EXECUTION_KEYWORDS = ("implementation", "delivery", "deployment", "build", "integrate", "optimize")
LIFECYCLE_KEYWORDS = ("discovery", "design", "launch", "support", "operate", "maintenance")
ENTERPRISE_KEYWORDS = ("enterprise", "global", "governance", "compliance", "cxo", "fortune")
SERVICE_INDUSTRIES = (
    "healthcare",
    "finance",
    "banking",
    "insurance",
    "retail",
    "manufacturing",
    "logistics",
    "telecom",
    "saas",
    "public sector",
    "education",
    "energy",
)

_WHITESPACE = re.compile(r"\s+")
_TAG_GAP = re.compile(r">\s+<")
_SIGNAL_NOISE = re.compile(r"[^\w\s$%.-]")
_NOISE_TAGS = ("script", "noscript", "style", "template")

MAX_NAV_LINKS = 25
MAX_CTA_CANDIDATES = 300


@dataclass(frozen=True)
class NavLink:
    text: str
    href: str

    def to_dict(self) -> dict[str, str]:
        return {"text": self.text, "href": self.href}


@dataclass(frozen=True)
class CtaCandidate:
    text: str
    href: str | None
    score: int


@dataclass(frozen=True)
class ExtractedPage:
    """
    Signals extracted from one captured page.
    """

    headline: str | None
    h1_text: str | None
    h2_headings: list[str]
    h3_headings: list[str]
    list_items: list[str]
    meta_description: str
    top_navigation: list[NavLink]
    footer_links: list[NavLink]
    nav_labels: list[str]
    top_ctas: list[CtaCandidate]
    seo: dict[str, Any]
    html_hash: str
    service_snapshot: dict[str, Any] | None = None
    pricing_signals: dict[str, list[str]] | None = None
    structured_content: dict[str, Any] = field(default_factory=dict)

    @property
    def primary_cta(self) -> CtaCandidate | None:
        return self.top_ctas[0] if self.top_ctas else None

    @property
    def secondary_cta(self) -> CtaCandidate | None:
        return self.top_ctas[1] if len(self.top_ctas) > 1 else None


# ----------------------------------------------------------------------
# helpers
# ----------------------------------------------------------------------


def parse_html(html: str) -> BeautifulSoup:
    return BeautifulSoup(html or "", "html.parser")


def collapse_whitespace(value: str | None) -> str:
    return _WHITESPACE.sub(" ", value or "").strip()


def normalize_signal_text(value: str | None) -> str:
    """
    Lowercase, collapse whitespace and drop punctuation other than `$ % . -`.
    """

    lowered = _WHITESPACE.sub(" ", (value or "").lower())
    return _SIGNAL_NOISE.sub("", lowered).strip()


def origin_of(url: str) -> str:
    parsed = urlparse(url)
    return f"{parsed.scheme.lower()}://{parsed.netloc.lower()}"


def same_origin(a: str, b: str) -> bool:
    try:
        return origin_of(a) == origin_of(b)
    except ValueError:
        return False


def resolve_href(raw: str, base_url: str) -> str | None:
    try:
        return urljoin(base_url, raw)
    except ValueError:
        return None


def _text(element: Tag) -> str:
    return element.get_text().strip()


def _dedupe_casefold(values: Iterable[str], limit: int) -> list[str]:
    seen: set[str] = set()
    result: list[str] = []
    for value in values:
        key = value.lower()
        if key in seen:
            continue
        seen.add(key)
        result.append(value)
    return result[:limit]


def strip_noise(soup: BeautifulSoup, extra: tuple[str, ...] = ()) -> BeautifulSoup:
    for element in soup.find_all(list(_NOISE_TAGS + extra)):
        element.decompose()
    return soup


def compute_html_hash(html: str) -> str:
    normalized = _TAG_GAP.sub("><", _WHITESPACE.sub(" ", html)).strip()
    return hashlib.sha256(normalized.encode("utf-8")).hexdigest()


def count_keywords(text: str, keywords: Iterable[str]) -> int:
    total = 0
    for keyword in keywords:
        total += len(re.findall(rf"\b{re.escape(keyword)}\b", text, flags=re.IGNORECASE))
    return total


def build_screenshot_path(
    *,
    competitor_id: str,
    crawl_job_id: str,
    page_type: str,
    page_url: str,
    captured_at: datetime,
) -> str:
    safe_url = base64.urlsafe_b64encode(page_url.encode("utf-8")).decode("ascii").rstrip("=")[:64]
    timestamp = re.sub(r"[:.]", "-", captured_at.isoformat())
    return f"competitors/{competitor_id}/crawl_jobs/{crawl_job_id}/{timestamp}-{page_type}-{safe_url}.png"


# ----------------------------------------------------------------------
# navigation and CTAs
# ----------------------------------------------------------------------


def _collect_links(soup: BeautifulSoup, selector: str, base_url: str) -> list[NavLink]:
    seen: set[str] = set()
    links: list[NavLink] = []
    for element in soup.select(selector):
        text = _text(element)
        raw_href = (element.get("href") or "").strip()
        if not text or not raw_href:
            continue
        href = resolve_href(raw_href, base_url)
        if href is None or not same_origin(href, base_url) or should_ignore(href, text):
            continue
        key = f"{href}::{text.lower()}"
        if key in seen:
            continue
        seen.add(key)
        links.append(NavLink(text=text, href=href))
    return links[:MAX_NAV_LINKS]


def extract_top_navigation(soup: BeautifulSoup, base_url: str) -> list[NavLink]:
    return _collect_links(soup, "header nav a[href], nav a[href]", base_url)


def extract_footer_links(soup: BeautifulSoup, base_url: str) -> list[NavLink]:
    return _collect_links(soup, "footer a[href]", base_url)


def extract_nav_labels(top_navigation: list[NavLink]) -> list[str]:
    return _dedupe_casefold((link.text for link in top_navigation if link.text), MAX_NAV_LINKS)


def _score_cta(element: Tag, text: str) -> int:
    score = 10 if CTA_PATTERN.search(text) else 0
    if element.find_parent(["main", "header"]) is not None:
        score += 2
    if 1 < len(text) < 40:
        score += 1
    return score


def extract_top_ctas(soup: BeautifulSoup, base_url: str, limit: int = 2) -> list[CtaCandidate]:
    """
    Rank link and button candidates by CTA likelihood, unique by lowercase text.
    """

    candidates: list[CtaCandidate] = []
    for element in soup.select("main a[href], header a[href], a[href], button")[:MAX_CTA_CANDIDATES]:
        text = _text(element)
        score = _score_cta(element, text)
        if score <= 0:
            continue
        raw_href = (element.get("href") or "").strip()
        href = resolve_href(raw_href, base_url) if raw_href else None
        candidates.append(CtaCandidate(text=text, href=href, score=score))

    candidates.sort(key=lambda item: item.score, reverse=True)

    seen: set[str] = set()
    unique: list[CtaCandidate] = []
    for candidate in candidates:
        key = candidate.text.lower()
        if key not in seen:
            seen.add(key)
            unique.append(candidate)
        if len(unique) >= limit:
            break
    return unique


# ----------------------------------------------------------------------
# headings and content
# ----------------------------------------------------------------------


def extract_headline(soup: BeautifulSoup) -> str | None:
    element = soup.select_one("main h1, header h1, h1")
    if element is None:
        return None
    return _text(element) or None


def _extract_headings(soup: BeautifulSoup, tag: str, take: int, limit: int) -> list[str]:
    nodes = soup.select(f"main {tag}") or soup.select(tag)
    headings = [text for text in (_text(node) for node in nodes) if text and len(text) <= 140]
    return _dedupe_casefold(headings[:take], limit)


def extract_h2_headings(soup: BeautifulSoup) -> list[str]:
    return _extract_headings(soup, "h2", take=50, limit=30)


def extract_h3_headings(soup: BeautifulSoup) -> list[str]:
    return _extract_headings(soup, "h3", take=80, limit=50)


def extract_list_items(soup: BeautifulSoup) -> list[str]:
    items = [
        text
        for text in (collapse_whitespace(node.get_text()) for node in soup.select("main li, li"))
        if 3 <= len(text) <= 180
    ]
    return _dedupe_casefold(items[:250], 120)


def extract_meta_description(soup: BeautifulSoup) -> str:
    for attrs in ({"name": "description"}, {"property": "og:description"}):
        meta = soup.find("meta", attrs=attrs)
        if meta is not None and meta.get("content") is not None:
            return collapse_whitespace(meta.get("content"))
    return ""


def extract_internal_anchor_text(soup: BeautifulSoup, page_url: str) -> list[str]:
    anchors: list[str] = []
    for element in soup.select("a[href]"):
        text = collapse_whitespace(element.get_text())
        raw_href = (element.get("href") or "").strip()
        if not text or not raw_href:
            continue
        href = resolve_href(raw_href, page_url)
        if href is None or not same_origin(href, page_url):
            continue
        if 2 <= len(text) <= 120:
            anchors.append(text)
    return _dedupe_casefold(anchors, 200)


def extract_url_slug(page_url: str) -> str:
    segments = [segment for segment in urlparse(page_url).path.split("/") if segment]
    if not segments:
        return ""
    return re.sub(r"[-_]+", " ", segments[-1]).strip()


def extract_image_alt_text(soup: BeautifulSoup) -> list[str]:
    alts = [
        text
        for text in (collapse_whitespace(img.get("alt")) for img in soup.select("img[alt]"))
        if 2 <= len(text) <= 180
    ]
    return _dedupe_casefold(alts, 120)


def compute_word_count(soup: BeautifulSoup) -> int:
    main_text = " ".join(node.get_text() for node in soup.select("main"))
    text = main_text
    if not collapse_whitespace(text):
        body = soup.body
        text = body.get_text() if body is not None else ""
    normalized = collapse_whitespace(text)
    return len(normalized.split(" ")) if normalized else 0


def extract_seo_record(soup: BeautifulSoup, page_url: str, title: str | None) -> dict[str, Any]:
    return {
        "url": page_url,
        "h1": extract_headline(soup) or "",
        "h2": extract_h2_headings(soup),
        "h3": extract_h3_headings(soup),
        "meta_title": title or "",
        "meta_description": extract_meta_description(soup),
        "anchors": extract_internal_anchor_text(soup, page_url),
        "slug": extract_url_slug(page_url),
        "image_alt_text": extract_image_alt_text(soup),
        "word_count": compute_word_count(soup),
    }


def analyze_service_content(soup: BeautifulSoup) -> dict[str, Any]:
    """
    Keyword profile of a services page, computed over `<main>` text only.
    """

    text = collapse_whitespace(" ".join(node.get_text() for node in soup.select("main"))).lower()

    strategic = count_keywords(text, STRATEGIC_KEYWORDS)
    execution = count_keywords(text, EXECUTION_KEYWORDS)
    if strategic > execution:
        primary_focus = "Strategic"
    elif execution > strategic:
        primary_focus = "Execution"
    else:
        primary_focus = "Balanced"

    return {
        "strategic_keywords_count": strategic,
        "execution_keywords_count": execution,
        "lifecycle_keywords_count": count_keywords(text, LIFECYCLE_KEYWORDS),
        "enterprise_keywords_count": count_keywords(text, ENTERPRISE_KEYWORDS),
        "industries": [industry for industry in SERVICE_INDUSTRIES if industry in text],
        "primary_focus": primary_focus,
        "section_count": min(len(soup.find_all("h2")) + len(soup.find_all("h3")), 50),
    }


# ----------------------------------------------------------------------
# pricing
# ----------------------------------------------------------------------


def visible_text_without_footer(html: str) -> str:
    soup = strip_noise(parse_html(html), extra=("footer",))
    body = soup.body or soup
    return collapse_whitespace(body.get_text())


def extract_price_signals(text: str) -> list[str]:
    return sorted(_WHITESPACE.sub("", match.group(0)) for match in PRICE_PATTERN.finditer(text.lower()))


def extract_plan_signals(html: str) -> list[str]:
    labels: set[str] = set()
    for element in parse_html(html).select("h1, h2, h3, h4, button, strong, b"):
        text = _text(element)
        normalized = normalize_signal_text(text)
        if normalized and PLAN_PATTERN.search(text):
            labels.add(normalized)
    return sorted(labels)


def extract_pricing_signals(html: str) -> dict[str, list[str]]:
    return {
        "prices": extract_price_signals(visible_text_without_footer(html)),
        "plans": extract_plan_signals(html),
    }


# ----------------------------------------------------------------------
# entry point
# ----------------------------------------------------------------------


def extract_page(html: str, *, url: str, title: str | None, page_type: str) -> ExtractedPage:
    soup = parse_html(html)
    top_navigation = extract_top_navigation(soup, url)
    seo = extract_seo_record(soup, url, title)

    service_snapshot = analyze_service_content(soup) if page_type == PageType.SERVICES else None

    pricing_signals = extract_pricing_signals(html) if page_type == PageType.PRICING else None

    # Service keys sit at the top level next to the SEO record.
    structured: dict[str, Any] = {**(service_snapshot or {}), "search_seo": seo}
    if pricing_signals is not None:
        structured["pricing_signals"] = pricing_signals

    return ExtractedPage(
        headline=extract_headline(soup),
        h1_text=seo["h1"] or None,
        h2_headings=seo["h2"],
        h3_headings=seo["h3"],
        list_items=extract_list_items(soup),
        meta_description=seo["meta_description"],
        top_navigation=top_navigation,
        footer_links=extract_footer_links(soup, url),
        nav_labels=extract_nav_labels(top_navigation),
        top_ctas=extract_top_ctas(soup, url, limit=2) if page_type == PageType.HOMEPAGE else [],
        seo=seo,
        html_hash=compute_html_hash(html),
        service_snapshot=service_snapshot,
        pricing_signals=pricing_signals,
        structured_content=structured,
    )
