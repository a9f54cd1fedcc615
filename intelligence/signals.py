"""
intelligence/signals.py

Aggregates tracked page types, recent change volume, the latest snapshot
per page type and stored webpage-signal insight texts into one
`RawSignals` record per competitor.
"""

from __future__ import annotations

import re
from typing import Iterable

from app.domain.crawl import StoredSnapshot
from app.scraping.taxonomy import PageType
from intelligence.types import (
    RawSignals,
    ServicesSignal,
    ServiceSnapshotSignal,
    SnapshotSignal,
    WebpageSignals,
)

MESSAGING_PATTERN = re.compile(r"homepage messaging emphasizes\s+([a-z- ]+)\.", re.IGNORECASE)
GTM_PATTERN = re.compile(r"primary cta suggests\s+(a .*?)\s+go-to-market strategy\.", re.IGNORECASE)
PRICING_PATTERNS = (
    re.compile(r"(Enterprise positioning emphasized\.)", re.IGNORECASE),
    re.compile(r"(Sales-driven monetization.*?\.)", re.IGNORECASE),
    re.compile(r"(Growth-led pricing motion.*?\.)", re.IGNORECASE),
)
CAPABILITY_PATTERN = re.compile(r"product capabilities emphasize\s+([a-z- ]+)\.", re.IGNORECASE)

EVIDENCE_HEADING_LIMIT = 12


def snapshot_signal(snapshot: StoredSnapshot) -> SnapshotSignal:
    return SnapshotSignal(
        url=snapshot.url,
        http_status=snapshot.http_status,
        title=snapshot.title,
        h1_text=snapshot.h1_text,
        h2_headings=list(snapshot.h2_headings),
        h3_headings=list(snapshot.h3_headings),
        list_items=list(snapshot.list_items),
        nav_labels=list(snapshot.nav_labels),
        primary_cta_text=snapshot.primary_cta_text,
        secondary_cta_text=snapshot.secondary_cta_text,
        structured_content=dict(snapshot.structured_content or {}),
    )


def is_bot_challenge(snapshot: SnapshotSignal | None) -> bool:
    """Cloudflare-style interstitial: 401/403 with a "just a moment" title."""
    if snapshot is None:
        return False
    title = (snapshot.title or "").lower()
    return snapshot.http_status in (401, 403) and "just a moment" in title


def pick_first_matching(texts: Iterable[str], pattern: re.Pattern[str]) -> str | None:
    for text in texts:
        match = pattern.search(text)
        if match:
            return match.group(1) if match.lastindex else match.group(0)
    return None


def extract_webpage_signals(insight_texts: list[str]) -> WebpageSignals:
    pricing = None
    for pattern in PRICING_PATTERNS:
        pricing = pick_first_matching(insight_texts, pattern)
        if pricing:
            break
    return WebpageSignals(
        messaging_theme=pick_first_matching(insight_texts, MESSAGING_PATTERN),
        gtm_motion=pick_first_matching(insight_texts, GTM_PATTERN),
        pricing_narrative=pricing,
        capability_theme=pick_first_matching(insight_texts, CAPABILITY_PATTERN),
    )


def build_raw_signals(
    *,
    competitor_id: str,
    tracked_page_types: list[str],
    changes_last_30d_count: int,
    latest_by_page_type: dict[str, SnapshotSignal],
    webpage_signal_insights: list[str] | None = None,
) -> RawSignals:
    services_snapshot = latest_by_page_type.get(PageType.SERVICES)
    structured = ServiceSnapshotSignal.from_structured(
        services_snapshot.structured_content if services_snapshot is not None else None
    )
    evidence_headings = (
        [heading for heading in services_snapshot.h2_headings if heading][:EVIDENCE_HEADING_LIMIT]
        if services_snapshot is not None
        else []
    )

    return RawSignals(
        competitor_id=competitor_id,
        tracked_page_types=list(tracked_page_types),
        changes_last_30d_count=max(0, changes_last_30d_count),
        snapshots=dict(latest_by_page_type),
        services=ServicesSignal(
            snapshot=structured,
            evidence_headings=evidence_headings,
            blocked_by_bot_mitigation=is_bot_challenge(services_snapshot),
        ),
        webpage_signals=extract_webpage_signals(list(webpage_signal_insights or [])),
    )
