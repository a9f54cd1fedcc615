"""
change_detection/insights.py

Short templated insights derived from PM-signal diffs, tracked page types
and the latest snapshot per page type. Each writer skips texts already
recorded for the competitor within its dedupe window.
"""

from __future__ import annotations

import logging
import re
import uuid
from datetime import datetime, timedelta, timezone
from typing import Iterable

from app.domain.crawl import InsightWrite, StoredSnapshot
from app.scraping.storage.base import SnapshotStore
from app.scraping.taxonomy import PageType
from change_detection.pm_signals import PmSignalChangeType, PmSignalDiff
from db.models.insight import InsightType

logger = logging.getLogger(__name__)

CHANGE_INSIGHT_DEDUPE = timedelta(days=1)
SIGNAL_INSIGHT_DEDUPE = timedelta(days=7)

_CHANGE_INSIGHTS: dict[str, tuple[str, str, str]] = {
    PmSignalChangeType.HOMEPAGE_HEADLINE_CHANGE: (
        InsightType.MESSAGING_SHIFT,
        "Competitor updated core positioning or messaging.",
        "High",
    ),
    PmSignalChangeType.CTA_TEXT_CHANGE: (
        InsightType.CONVERSION_STRATEGY,
        "Go-to-market or conversion strategy updated.",
        "High",
    ),
    PmSignalChangeType.PRICING_STRUCTURE_CHANGE: (
        InsightType.PRICING_STRATEGY,
        "Pricing or packaging strategy updated.",
        "High",
    ),
    PmSignalChangeType.PRODUCT_SERVICE_SECTION_CHANGE: (
        InsightType.PRODUCT_FOCUS,
        "Service or product focus evolving.",
        "Medium",
    ),
    PmSignalChangeType.CASE_STUDY_OR_CUSTOMER_LOGO_ADDED: (
        InsightType.CREDIBILITY_PROOF,
        "Credibility strengthened with new proof.",
        "High",
    ),
}
_DEFAULT_CHANGE_INSIGHT = (InsightType.STRATEGIC_PRIORITY, "Strategic focus area shifted.", "High")

OBSERVATION_TEXTS: dict[str, str] = {
    PageType.HOMEPAGE: "Homepage is actively monitored.",
    PageType.PRICING: "Pricing page detected and tracked.",
    PageType.PRODUCT_OR_SERVICES: "Services pages under continuous observation.",
    PageType.USE_CASES_OR_INDUSTRIES: "Use-case and industry pages are actively monitored.",
    PageType.CASE_STUDIES_OR_CUSTOMERS: "Case studies and customer proof pages are tracked.",
    PageType.NAVIGATION: "Navigation structure is actively monitored.",
    PageType.CTA_ELEMENTS: "Primary CTA elements are actively monitored.",
}
DEFAULT_OBSERVATION_TEXT = "Page is actively monitored; no changes detected."

MESSAGING_THEMES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("collaboration", ("collaboration", "collaborate", "team", "teams", "together")),
    ("productivity", ("productivity", "efficient", "efficiency", "faster", "workflow", "workflows")),
    ("security", ("security", "secure", "compliance", "trust", "governance")),
    ("scale", ("scale", "scalable", "scalability", "global", "performance")),
    ("automation", ("automation", "automate", "automated", "streamline")),
    ("enterprise", ("enterprise", "enterprises", "organization", "org", "admins")),
)
CAPABILITY_THEMES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("automation", ("automation", "automate", "workflow", "workflows", "streamline")),
    ("integrations", ("integration", "integrations", "connect", "connectors", "api")),
    ("analytics", ("analytics", "insights", "reporting", "dashboard", "metrics")),
    ("security", ("security", "secure", "compliance", "governance")),
)

SALES_LED_PATTERN = re.compile(r"(contact sales|talk to sales|book demo|request demo)", re.IGNORECASE)
SELF_SERVE_PATTERN = re.compile(r"(get started|free trial|start free|sign up|signup)", re.IGNORECASE)


# ----------------------------------------------------------------------
# change insights
# ----------------------------------------------------------------------


def generate_change_insights(
    *,
    competitor_id: uuid.UUID,
    page_type: str,
    diffs: Iterable[PmSignalDiff],
    related_change_ids: list[str],
) -> list[InsightWrite]:
    """
    One insight per insight type, first diff wins.
    """

    by_type: dict[str, InsightWrite] = {}
    for diff in diffs:
        insight_type, text, confidence = _CHANGE_INSIGHTS.get(diff.change_type, _DEFAULT_CHANGE_INSIGHT)
        if insight_type in by_type:
            continue
        by_type[insight_type] = InsightWrite(
            competitor_id=competitor_id,
            page_type=page_type,
            insight_type=insight_type,
            insight_text=text,
            confidence=confidence,
            related_change_ids=list(related_change_ids),
        )
    return list(by_type.values())


def _filter_recent(
    store: SnapshotStore,
    rows: list[InsightWrite],
    *,
    window: timedelta,
    now: datetime,
) -> list[InsightWrite]:
    since = now - window
    return [
        row
        for row in rows
        if not store.insight_exists_since(
            competitor_id=row.competitor_id,
            insight_text=row.insight_text,
            since=since,
            page_type=row.page_type,
            insight_type=row.insight_type,
        )
    ]


def persist_insights(
    store: SnapshotStore,
    rows: list[InsightWrite],
    *,
    window: timedelta = CHANGE_INSIGHT_DEDUPE,
    now: datetime | None = None,
) -> int:
    fresh = _filter_recent(store, rows, window=window, now=now or datetime.now(timezone.utc))
    if not fresh:
        return 0
    return store.save_insights(fresh)


# ----------------------------------------------------------------------
# observational insights
# ----------------------------------------------------------------------


def observation_text(page_type: str) -> str:
    return OBSERVATION_TEXTS.get(page_type, DEFAULT_OBSERVATION_TEXT)


def persist_observational_insights(
    store: SnapshotStore,
    *,
    competitor_id: uuid.UUID,
    page_types: Iterable[str],
    window: timedelta = SIGNAL_INSIGHT_DEDUPE,
    now: datetime | None = None,
) -> int:
    rows = [
        InsightWrite(
            competitor_id=competitor_id,
            page_type=page_type,
            insight_type=InsightType.OBSERVATIONAL,
            insight_text=observation_text(page_type),
            confidence="High",
        )
        for page_type in dict.fromkeys(page_types)
    ]
    return persist_insights(store, rows, window=window, now=now)


# ----------------------------------------------------------------------
# webpage-signal insights
# ----------------------------------------------------------------------


def _joined_text(parts: Iterable[str | None]) -> str:
    return re.sub(r"\s+", " ", " ".join(p for p in parts if p and p.strip())).strip().lower()


def _count_occurrences(text: str, keywords: Iterable[str]) -> int:
    return sum(len(re.findall(rf"\b{re.escape(k)}\b", text, flags=re.IGNORECASE)) for k in keywords if k)


def _best_theme(text: str, themes: tuple[tuple[str, tuple[str, ...]], ...]) -> str | None:
    if not text:
        return None
    best_theme, best_score = None, 0
    for theme, keywords in themes:
        score = _count_occurrences(text, keywords)
        if score > best_score:
            best_theme, best_score = theme, score
    return best_theme


def homepage_messaging_theme(snapshot: StoredSnapshot) -> str | None:
    return _best_theme(_joined_text([snapshot.h1_text, *snapshot.h2_headings]), MESSAGING_THEMES)


def capability_theme(snapshot: StoredSnapshot) -> str | None:
    return _best_theme(_joined_text([snapshot.h1_text, *snapshot.h2_headings]), CAPABILITY_THEMES)


def gtm_motion(primary_cta: str | None, secondary_cta: str | None) -> str | None:
    primary = (primary_cta or "").lower()
    secondary = (secondary_cta or "").lower()
    primary_sales = bool(SALES_LED_PATTERN.search(primary))
    primary_self = bool(SELF_SERVE_PATTERN.search(primary))
    secondary_sales = bool(SALES_LED_PATTERN.search(secondary))
    secondary_self = bool(SELF_SERVE_PATTERN.search(secondary))

    if (primary_sales and secondary_self) or (primary_self and secondary_sales):
        return "a hybrid"
    if primary_sales:
        return "a sales-led"
    if primary_self:
        return "a self-serve"
    if secondary_sales and not secondary_self:
        return "a sales-led"
    if secondary_self and not secondary_sales:
        return "a self-serve"
    return None


def pricing_narrative(snapshot: StoredSnapshot) -> str | None:
    text = _joined_text([snapshot.h1_text, snapshot.title, *snapshot.h2_headings])
    if not text:
        return None
    if re.search(r"\benterprise\b", text):
        return "Enterprise positioning emphasized."
    if re.search(r"\bcustom\b", text):
        return "Sales-driven monetization signaled via custom packaging."
    if re.search(r"\bfree\b", text) or re.search(r"\btrial\b", text):
        return "Growth-led pricing motion signaled via free or trial language."
    return None


def latest_by_page_type(snapshots: Iterable[StoredSnapshot]) -> dict[str, StoredSnapshot]:
    """
    First snapshot per page type from a newest-first sequence.
    """

    latest: dict[str, StoredSnapshot] = {}
    for snapshot in snapshots:
        if snapshot.page_type and snapshot.page_type not in latest:
            latest[snapshot.page_type] = snapshot
    return latest


def build_webpage_signal_insights(
    *,
    competitor_id: uuid.UUID,
    snapshots: Iterable[StoredSnapshot],
) -> list[InsightWrite]:
    latest = latest_by_page_type(snapshots)
    candidates: list[tuple[str, str]] = []

    homepage = latest.get(PageType.HOMEPAGE)
    if homepage is not None:
        theme = homepage_messaging_theme(homepage)
        if theme:
            candidates.append((PageType.HOMEPAGE, f"Homepage messaging emphasizes {theme}."))
        motion = gtm_motion(homepage.primary_cta_text, homepage.secondary_cta_text)
        if motion:
            candidates.append((PageType.HOMEPAGE, f"Primary CTA suggests {motion} go-to-market strategy."))

    pricing = latest.get(PageType.PRICING)
    if pricing is not None:
        narrative = pricing_narrative(pricing)
        if narrative:
            candidates.append((PageType.PRICING, f"Pricing narrative: {narrative}"))

    capability_source = latest.get(PageType.PRODUCT_OR_SERVICES) or latest.get(PageType.USE_CASES_OR_INDUSTRIES)
    if capability_source is not None:
        theme = capability_theme(capability_source)
        if theme:
            page_type = capability_source.page_type or PageType.PRODUCT_OR_SERVICES
            candidates.append((page_type, f"Product capabilities emphasize {theme}."))

    return [
        InsightWrite(
            competitor_id=competitor_id,
            page_type=page_type,
            insight_type=InsightType.WEBPAGE_SIGNAL,
            insight_text=text,
            confidence="High",
        )
        for page_type, text in candidates
    ]


def persist_webpage_signal_insights(
    store: SnapshotStore,
    *,
    competitor_id: uuid.UUID,
    history_limit: int = 60,
    window: timedelta = SIGNAL_INSIGHT_DEDUPE,
    now: datetime | None = None,
) -> int:
    snapshots = store.recent_snapshots(competitor_id=competitor_id, limit=history_limit)
    rows = build_webpage_signal_insights(competitor_id=competitor_id, snapshots=snapshots)
    return persist_insights(store, rows, window=window, now=now)
