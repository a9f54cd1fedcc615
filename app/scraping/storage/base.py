"""
Storage interfaces used by the crawl engine.
"""

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from collections.abc import Sequence
from datetime import datetime
from typing import Any

from app.domain.crawl import (
    ChangeWrite,
    InsightWrite,
    SeoSnapshotWrite,
    SnapshotWrite,
    StoredSnapshot,
)


class SnapshotStore(ABC):
    """
    Persistence seam for crawl jobs, pages, snapshots, changes and insights.

    Snapshot versions per page start at 1 and increase by exactly 1 on every
    save, including when two jobs capture the same page concurrently.
    """

    @abstractmethod
    def start_job(self, *, competitor_id: uuid.UUID, existing_job_id: uuid.UUID | None = None) -> uuid.UUID:
        """
        Mark an existing job running, or create a running job.
        """

    @abstractmethod
    def finalize_job(
        self,
        *,
        job_id: uuid.UUID,
        status: str,
        error_message: str | None = None,
        result_payload: dict[str, Any] | None = None,
    ) -> None:
        ...

    @abstractmethod
    def upsert_page(self, *, competitor_id: uuid.UUID, url: str, page_type: str) -> uuid.UUID:
        ...

    @abstractmethod
    def save_snapshot(self, record: SnapshotWrite) -> tuple[uuid.UUID, int]:
        """
        Persist a snapshot and return `(snapshot_id, version_number)`.
        """

    @abstractmethod
    def previous_snapshot(self, *, page_id: uuid.UUID, before_version: int) -> StoredSnapshot | None:
        ...

    @abstractmethod
    def save_changes(self, rows: Sequence[ChangeWrite]) -> list[uuid.UUID]:
        ...

    @abstractmethod
    def save_insights(self, rows: Sequence[InsightWrite]) -> int:
        ...

    @abstractmethod
    def insight_exists_since(
        self,
        *,
        competitor_id: uuid.UUID,
        insight_text: str,
        since: datetime,
        page_type: str | None = None,
        insight_type: str | None = None,
    ) -> bool:
        ...

    @abstractmethod
    def recent_snapshots(self, *, competitor_id: uuid.UUID, limit: int) -> list[StoredSnapshot]:
        """
        Most recent snapshots for a competitor, newest first.
        """

    @abstractmethod
    def save_seo_snapshots(
        self,
        rows: Sequence[SeoSnapshotWrite],
        *,
        seo_dimensions: dict[str, Any],
        topic_clusters: list[dict[str, Any]],
    ) -> int:
        ...

    @abstractmethod
    def mark_competitor_crawled(self, *, competitor_id: uuid.UUID, crawled_at: datetime) -> None:
        ...


class BlobStorage(ABC):
    """
    Object storage for screenshots.
    """

    @abstractmethod
    def upload(self, *, path: str, content: bytes, content_type: str = "image/png") -> str | None:
        """
        Store content at `path` and return its public URL when one exists.
        """
