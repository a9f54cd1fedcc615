"""
app/domain/crawl.py

Domain records exchanged between the crawl engine and its snapshot store.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class SnapshotWrite:
    """
    One page capture ready to persist. The store assigns id and version.
    """

    page_id: uuid.UUID
    crawl_job_id: uuid.UUID | None
    page_type: str
    html: str
    html_hash: str
    captured_at: datetime
    screenshot_url: str | None = None
    http_status: int | None = None
    title: str | None = None
    h1_text: str | None = None
    h2_headings: list[str] = field(default_factory=list)
    h3_headings: list[str] = field(default_factory=list)
    list_items: list[str] = field(default_factory=list)
    nav_labels: list[str] = field(default_factory=list)
    primary_headline: str | None = None
    primary_cta_text: str | None = None
    secondary_cta_text: str | None = None
    nav_items: list[str] = field(default_factory=list)
    footer_links: list[dict[str, Any]] = field(default_factory=list)
    structured_content: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class StoredSnapshot:
    """
    Read model of a persisted snapshot.
    """

    id: uuid.UUID
    page_id: uuid.UUID
    version_number: int
    html: str
    captured_at: datetime
    page_type: str | None = None
    url: str | None = None
    http_status: int | None = None
    title: str | None = None
    h1_text: str | None = None
    h2_headings: list[str] = field(default_factory=list)
    h3_headings: list[str] = field(default_factory=list)
    list_items: list[str] = field(default_factory=list)
    nav_labels: list[str] = field(default_factory=list)
    primary_headline: str | None = None
    primary_cta_text: str | None = None
    secondary_cta_text: str | None = None
    nav_items: list[str] = field(default_factory=list)
    structured_content: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ChangeWrite:
    competitor_id: uuid.UUID
    page_id: uuid.UUID
    before_snapshot_id: uuid.UUID
    after_snapshot_id: uuid.UUID
    page_url: str
    page_type: str
    change_type: str
    category: str
    impact_level: str
    summary: str
    details: dict[str, Any]
    strategic_interpretation: str | None = None
    monitoring_action: str | None = None


@dataclass(frozen=True)
class InsightWrite:
    competitor_id: uuid.UUID
    insight_type: str
    insight_text: str
    confidence: str
    page_type: str | None = None
    related_change_ids: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class SeoSnapshotWrite:
    competitor_id: uuid.UUID
    crawl_job_id: uuid.UUID | None
    url: str
    page_record: dict[str, Any]


@dataclass(frozen=True)
class CrawlSummary:
    """
    Outcome of one crawl job.
    """

    job_id: uuid.UUID | None
    competitor_id: uuid.UUID
    competitor_url: str
    status: str
    pages_persisted: int
    changes_detected: int
    page_urls: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.pages_persisted > 0
