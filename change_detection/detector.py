"""
change_detection/detector.py

Deterministic structural diff between two captures of the same page.

Four passes run over noise-stripped HTML: a visible-text fingerprint, a
coarse structural fingerprint (headings, landmark blocks, list items), CTA
text matched by href, and navigation links. The same inputs always yield
the same list of changes in the same order.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from change_detection.classifier import classify_change
from change_detection.details import (
    ChangeReference,
    ChangeType,
    CtaTextChangeDetails,
    ElementChangeDetails,
    NavChangeDetails,
    StructuralSummaryDetails,
    TextChangeDetails,
)
from change_detection.types import DetectedChange

MAX_ITEMISED_STRUCTURE_CHANGES = 25
STRUCTURE_SUMMARY_LIMIT = 10
NAV_SUMMARY_LIMIT = 20
TEXT_PREVIEW_CHARS = 500

_WHITESPACE = re.compile(r"\s+")
_NON_CONTENT_TAGS = ["script", "noscript", "style", "template"]
_SKIPPED_HREF_PREFIXES = ("#", "mailto:", "tel:", "javascript:")


@dataclass(frozen=True)
class _LinkItem:
    key: str
    text: str
    href: str | None
    tag: str = ""


def normalize_whitespace(value: str) -> str:
    return _WHITESPACE.sub(" ", value).strip()


def normalize_text(value: str) -> str:
    return normalize_whitespace(value).lower()


def _load(html: str) -> BeautifulSoup:
    soup = BeautifulSoup(html or "", "html.parser")
    for element in soup.find_all(_NON_CONTENT_TAGS):
        element.decompose()
    return soup


def resolve_href(base_url: str, raw: str) -> str | None:
    href = raw.strip()
    if not href or href.startswith(_SKIPPED_HREF_PREFIXES):
        return None
    try:
        return urljoin(base_url, href)
    except ValueError:
        return None


def _dedupe_by_key(items: list[_LinkItem]) -> list[_LinkItem]:
    seen: set[str] = set()
    result: list[_LinkItem] = []
    for item in items:
        if item.key in seen:
            continue
        seen.add(item.key)
        result.append(item)
    return result


def visible_text_fingerprint(soup: BeautifulSoup) -> str:
    root = soup.body or soup
    return normalize_text(root.get_text())


def structural_fingerprint(soup: BeautifulSoup) -> list[str]:
    entries: list[str] = []

    for element in soup.select("h1, h2, h3")[:200]:
        text = normalize_whitespace(element.get_text())
        if text:
            entries.append(f"heading:{element.name.lower()}:{text.lower()}")

    for element in soup.select("main section, main article, section, article")[:200]:
        aria = normalize_text(element.get("aria-label") or "")
        element_id = normalize_text(element.get("id") or "")
        classes = element.get("class") or []
        first_class = normalize_text(classes[0]) if classes else ""
        entries.append(f"block:{element.name.lower()}:{aria or element_id or first_class or 'unknown'}")

    for element in soup.select("main li")[:400]:
        text = normalize_whitespace(element.get_text())
        if text:
            entries.append(f"li:{text.lower()[:120]}")

    return sorted(set(entries))


def extract_ctas(soup: BeautifulSoup, base_url: str) -> list[_LinkItem]:
    items: list[_LinkItem] = []
    selector = "a[href], button, [role='button'], input[type='submit'], input[type='button']"
    for element in soup.select(selector)[:500]:
        tag = (element.name or "unknown").lower()
        raw_text = str(element.get("value") or "") if tag == "input" else element.get_text()
        text = normalize_whitespace(raw_text)
        if len(text) < 2:
            continue
        raw_href = element.get("href")
        href = resolve_href(base_url, raw_href) if raw_href else None
        key = f"href:{href}::{text.lower()}" if href else f"cta:{tag}::{text.lower()}"
        items.append(_LinkItem(key=key, text=text, href=href, tag=tag))
    return _dedupe_by_key(items)


def extract_nav_items(soup: BeautifulSoup, base_url: str) -> list[_LinkItem]:
    items: list[_LinkItem] = []
    for element in soup.select("nav a[href], header nav a[href], header a[href]")[:200]:
        text = normalize_whitespace(element.get_text())
        if len(text) < 2:
            continue
        href = resolve_href(base_url, element.get("href") or "")
        if href is None:
            continue
        items.append(_LinkItem(key=f"{href}::{text.lower()}", text=text, href=href))
    return _dedupe_by_key(items)


def diff_sets(before: list[str], after: list[str]) -> tuple[list[str], list[str]]:
    before_set = set(before)
    after_set = set(after)
    added = [item for item in after if item not in before_set]
    removed = [item for item in before if item not in after_set]
    return added, removed


def summarize_list(items: list[str], limit: int) -> list[str]:
    if len(items) <= limit:
        return list(items)
    return [*items[:limit], f"… (+{len(items) - limit} more)"]


def detect_changes(*, before_html: str, after_html: str, page_url: str, page_type: str) -> list[DetectedChange]:
    before = _load(before_html)
    after = _load(after_html)
    changes: list[DetectedChange] = []

    def add(change: DetectedChange) -> None:
        changes.append(replace(change, category=classify_change(change, after_html)))

    before_text = visible_text_fingerprint(before)
    after_text = visible_text_fingerprint(after)
    if before_text != after_text:
        add(
            DetectedChange(
                change_type=ChangeType.TEXT_CHANGE,
                page_url=page_url,
                page_type=page_type,
                summary="Page text content changed",
                before=ChangeReference(text=before_text[:TEXT_PREVIEW_CHARS]),
                after=ChangeReference(text=after_text[:TEXT_PREVIEW_CHARS]),
                details=TextChangeDetails(before_length=len(before_text), after_length=len(after_text)),
            )
        )

    added, removed = diff_sets(structural_fingerprint(before), structural_fingerprint(after))
    for key in added[:MAX_ITEMISED_STRUCTURE_CHANGES]:
        add(
            DetectedChange(
                change_type=ChangeType.ELEMENT_ADDED,
                page_url=page_url,
                page_type=page_type,
                summary="Element/block added",
                after=ChangeReference(key=key, label=key),
                details=ElementChangeDetails(kind=ChangeType.ELEMENT_ADDED, element_key=key),
            )
        )
    for key in removed[:MAX_ITEMISED_STRUCTURE_CHANGES]:
        add(
            DetectedChange(
                change_type=ChangeType.ELEMENT_REMOVED,
                page_url=page_url,
                page_type=page_type,
                summary="Element/block removed",
                before=ChangeReference(key=key, label=key),
                details=ElementChangeDetails(kind=ChangeType.ELEMENT_REMOVED, element_key=key),
            )
        )
    if len(added) > MAX_ITEMISED_STRUCTURE_CHANGES or len(removed) > MAX_ITEMISED_STRUCTURE_CHANGES:
        add(
            DetectedChange(
                change_type=ChangeType.ELEMENT_ADDED,
                page_url=page_url,
                page_type=page_type,
                summary="Many structural changes detected",
                details=StructuralSummaryDetails(
                    added=summarize_list(added, STRUCTURE_SUMMARY_LIMIT),
                    removed=summarize_list(removed, STRUCTURE_SUMMARY_LIMIT),
                ),
            )
        )

    # Later duplicates of an href win, matching the last CTA seen on the old page.
    before_by_href = {cta.href: cta for cta in extract_ctas(before, page_url) if cta.href}
    for after_cta in extract_ctas(after, page_url):
        if not after_cta.href:
            continue
        before_cta = before_by_href.get(after_cta.href)
        if before_cta is None or normalize_text(before_cta.text) == normalize_text(after_cta.text):
            continue
        key = f"href:{after_cta.href}"
        add(
            DetectedChange(
                change_type=ChangeType.CTA_TEXT_CHANGE,
                page_url=page_url,
                page_type=page_type,
                summary=f"CTA text changed for {after_cta.href}",
                before=ChangeReference(key=key, href=after_cta.href, text=before_cta.text, label=before_cta.text),
                after=ChangeReference(key=key, href=after_cta.href, text=after_cta.text, label=after_cta.text),
                details=CtaTextChangeDetails(
                    href=after_cta.href,
                    before_text=before_cta.text,
                    after_text=after_cta.text,
                ),
            )
        )

    nav_added, nav_removed = diff_sets(
        [item.key for item in extract_nav_items(before, page_url)],
        [item.key for item in extract_nav_items(after, page_url)],
    )
    if nav_added or nav_removed:
        add(
            DetectedChange(
                change_type=ChangeType.NAV_CHANGE,
                page_url=page_url,
                page_type=page_type,
                summary="Navigation changed",
                details=NavChangeDetails(
                    added=summarize_list(nav_added, NAV_SUMMARY_LIMIT),
                    removed=summarize_list(nav_removed, NAV_SUMMARY_LIMIT),
                ),
            )
        )

    return changes
