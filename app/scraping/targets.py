"""
Crawl target selection.

Starting from the homepage, picks at most one page per page type from the
discovered links, adds a few SEO content pages, then fills remaining slots
with mandatory paths for the host.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from urllib.parse import urlparse, urlunparse

from app.scraping.extractor import parse_html, resolve_href, same_origin
from app.scraping.taxonomy import (
    PageType,
    mandatory_paths_for_host,
    page_type_from_nav,
    page_type_from_url,
    priority_of,
    should_ignore,
)
from app.scraping.types import CrawlTarget

MAX_PAGES_TO_CRAWL = 8
MAX_SEO_CONTENT_PAGES = 3

_CASE_STUDY_PATH = re.compile(r"/case-stud(y|ies)(/|$)", re.IGNORECASE)
_CONTENT_PATH = re.compile(r"/(blog|resources|insights|knowledge|guides)(/|$)", re.IGNORECASE)
_BLOCKED_SCHEMES = ("mailto:", "tel:", "javascript:")


@dataclass(frozen=True)
class CandidateLink:
    href: str
    text: str


def normalize_url(raw: str) -> str:
    """
    Add `https://` when no scheme is given and drop any fragment.
    """

    trimmed = raw.strip()
    if not trimmed.startswith(("http://", "https://")):
        trimmed = f"https://{trimmed}"
    parsed = urlparse(trimmed)
    if not parsed.netloc:
        raise ValueError(f"Invalid URL: {raw!r}")
    path = parsed.path or "/"
    return urlunparse((parsed.scheme, parsed.netloc, path, parsed.params, parsed.query, ""))


def origin_url(url: str) -> str:
    parsed = urlparse(url)
    return f"{parsed.scheme}://{parsed.netloc}"


def classify_seo_content_path(url: str) -> str | None:
    if _CASE_STUDY_PATH.search(url):
        return PageType.CASE_STUDIES_OR_CUSTOMERS
    if _CONTENT_PATH.search(url):
        return PageType.USE_CASES_OR_INDUSTRIES
    return None


def classify_link(text: str, href: str) -> str | None:
    if should_ignore(href, text):
        return None
    return page_type_from_nav(href, text) or classify_seo_content_path(href)


def extract_candidate_links(html: str, base_url: str) -> list[CandidateLink]:
    soup = parse_html(html)
    candidates: list[CandidateLink] = []
    for element in soup.select("nav a[href], header a[href], a[href]"):
        raw_href = (element.get("href") or "").strip()
        if not raw_href or raw_href.lower().startswith(_BLOCKED_SCHEMES):
            continue
        href = resolve_href(raw_href, base_url)
        if href is None or not href.startswith("http") or not same_origin(href, base_url):
            continue
        candidates.append(CandidateLink(href=href, text=element.get_text().strip()))
    return candidates


def mandatory_targets(base_url: str) -> list[tuple[str, str | None]]:
    origin = origin_url(base_url)
    hostname = urlparse(origin).hostname or ""
    seen: set[str] = set()
    targets: list[tuple[str, str | None]] = []
    for path in mandatory_paths_for_host(hostname):
        url = f"{origin}{path if path.startswith('/') else '/' + path}"
        if url in seen:
            continue
        seen.add(url)
        targets.append((url, page_type_from_url(url)))
    return targets


def pick_target_urls(
    base_url: str,
    links: list[CandidateLink],
    *,
    max_pages: int = MAX_PAGES_TO_CRAWL,
    max_seo_pages: int = MAX_SEO_CONTENT_PAGES,
) -> list[CrawlTarget]:
    origin = origin_url(base_url)
    selected_types: set[str] = {PageType.HOMEPAGE}
    selected: list[CrawlTarget] = [CrawlTarget(url=origin, page_type=PageType.HOMEPAGE)]

    def already_selected(url: str) -> bool:
        return any(target.url == url for target in selected)

    typed: list[CrawlTarget] = []
    for link in links:
        page_type = classify_link(link.text, link.href)
        if page_type is None or page_type == PageType.NAVIGATION:
            continue
        typed.append(CrawlTarget(url=link.href, page_type=page_type))
    typed.sort(key=lambda target: priority_of(target.page_type))

    for candidate in typed:
        if candidate.page_type in selected_types:
            continue
        selected_types.add(candidate.page_type)
        selected.append(candidate)
        if len(selected) >= max_pages:
            break

    if len(selected) < max_pages:
        added = 0
        for link in links:
            page_type = classify_seo_content_path(link.href)
            if page_type is None:
                continue
            if len(selected) >= max_pages or added >= max_seo_pages:
                break
            if already_selected(link.href):
                continue
            selected.append(CrawlTarget(url=link.href, page_type=page_type))
            added += 1

    for url, page_type in mandatory_targets(base_url):
        if len(selected) >= max_pages:
            break
        if page_type is None or page_type == PageType.NAVIGATION:
            continue
        if page_type in selected_types or already_selected(url):
            continue
        selected_types.add(page_type)
        selected.append(CrawlTarget(url=url, page_type=page_type))

    return selected
