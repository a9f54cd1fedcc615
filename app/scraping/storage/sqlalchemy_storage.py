"""
SQLAlchemy-backed snapshot store.

Every write commits its own transaction so one failing page never rolls
back pages that were already persisted in the same job.
"""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from datetime import datetime
from typing import Any, Callable, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.crawl import (
    ChangeWrite,
    InsightWrite,
    SeoSnapshotWrite,
    SnapshotWrite,
    StoredSnapshot,
)
from app.scraping.storage.base import SnapshotStore
from db.models.crawl_job import CrawlJobStatus
from db.repositories import (
    ChangeRepository,
    CompetitorRepository,
    CrawlJobNotFoundError,
    CrawlJobRepository,
    InsightRepository,
    PageRepository,
    SeoSnapshotRepository,
    SnapshotRepository,
)

T = TypeVar("T")


class SQLAlchemySnapshotStore(SnapshotStore):
    def __init__(self, *, session: Session) -> None:
        self._session = session
        self._jobs = CrawlJobRepository(session)
        self._competitors = CompetitorRepository(session)
        self._pages = PageRepository(session)
        self._snapshots = SnapshotRepository(session)
        self._changes = ChangeRepository(session)
        self._insights = InsightRepository(session)
        self._seo = SeoSnapshotRepository(session)

    def _commit(self, operation: Callable[[], T]) -> T:
        try:
            result = operation()
            self._session.commit()
            return result
        except SQLAlchemyError:
            self._session.rollback()
            raise

    def start_job(self, *, competitor_id: uuid.UUID, existing_job_id: uuid.UUID | None = None) -> uuid.UUID:
        def _start() -> uuid.UUID:
            if existing_job_id is not None:
                job = self._jobs.mark_running(job_id=existing_job_id)
                if job is None:
                    raise CrawlJobNotFoundError(f"Crawl job {existing_job_id} not found.")
                return job.id
            return self._jobs.create_job(competitor_id=competitor_id, status=CrawlJobStatus.RUNNING).id

        return self._commit(_start)

    def finalize_job(
        self,
        *,
        job_id: uuid.UUID,
        status: str,
        error_message: str | None = None,
        result_payload: dict[str, Any] | None = None,
    ) -> None:
        def _finalize() -> None:
            if status == CrawlJobStatus.COMPLETED:
                self._jobs.mark_completed(job_id=job_id, result_payload=result_payload)
            else:
                self._jobs.mark_failed(
                    job_id=job_id,
                    error_message=error_message or "No pages crawled",
                    result_payload=result_payload,
                )

        self._commit(_finalize)

    def upsert_page(self, *, competitor_id: uuid.UUID, url: str, page_type: str) -> uuid.UUID:
        return self._commit(
            lambda: self._pages.upsert_page(competitor_id=competitor_id, url=url, page_type=page_type)
        )

    def save_snapshot(self, record: SnapshotWrite) -> tuple[uuid.UUID, int]:
        # The page row lock taken for versioning is released by this commit.
        return self._commit(lambda: self._snapshots.insert_snapshot(record))

    def previous_snapshot(self, *, page_id: uuid.UUID, before_version: int) -> StoredSnapshot | None:
        return self._snapshots.get_previous(page_id=page_id, before_version=before_version)

    def save_changes(self, rows: Sequence[ChangeWrite]) -> list[uuid.UUID]:
        return self._commit(lambda: self._changes.insert_changes(rows))

    def save_insights(self, rows: Sequence[InsightWrite]) -> int:
        return self._commit(lambda: self._insights.insert_insights(rows))

    def insight_exists_since(
        self,
        *,
        competitor_id: uuid.UUID,
        insight_text: str,
        since: datetime,
        page_type: str | None = None,
        insight_type: str | None = None,
    ) -> bool:
        return self._insights.exists_since(
            competitor_id=competitor_id,
            insight_text=insight_text,
            since=since,
            page_type=page_type,
            insight_type=insight_type,
        )

    def recent_snapshots(self, *, competitor_id: uuid.UUID, limit: int) -> list[StoredSnapshot]:
        return self._snapshots.latest_for_competitor(competitor_id=competitor_id, limit=limit)

    def save_seo_snapshots(
        self,
        rows: Sequence[SeoSnapshotWrite],
        *,
        seo_dimensions: dict[str, Any],
        topic_clusters: list[dict[str, Any]],
    ) -> int:
        def _save() -> int:
            for row in rows:
                snapshot_id = self._seo.insert(row)
                self._seo.record_dimensions(
                    snapshot_id=snapshot_id,
                    seo_dimensions=seo_dimensions,
                    topic_clusters=topic_clusters,
                )
            return len(rows)

        return self._commit(_save)

    def mark_competitor_crawled(self, *, competitor_id: uuid.UUID, crawled_at: datetime) -> None:
        self._commit(lambda: self._competitors.mark_crawled(competitor_id=competitor_id, crawled_at=crawled_at))
