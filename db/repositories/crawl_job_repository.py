"""
Repository for crawl job lifecycle persistence and status lookup.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from db.models.crawl_job import CrawlJob, CrawlJobSource, CrawlJobStatus

STALE_JOB_ERROR = "Timed out (stale)"


class CrawlJobRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def create_job(
        self,
        *,
        competitor_id: uuid.UUID,
        source: str = CrawlJobSource.MANUAL,
        status: str = CrawlJobStatus.PENDING,
    ) -> CrawlJob:
        job = CrawlJob(
            competitor_id=competitor_id,
            status=status,
            source=source,
        )
        if status == CrawlJobStatus.RUNNING:
            job.started_at = datetime.now(timezone.utc)
        self._session.add(job)
        self._session.flush()
        self._session.refresh(job)
        return job

    def get_job(self, job_id: uuid.UUID) -> CrawlJob | None:
        return self._session.get(CrawlJob, job_id)

    def find_active_job(self, *, competitor_id: uuid.UUID) -> CrawlJob | None:
        stmt = (
            select(CrawlJob)
            .where(
                CrawlJob.competitor_id == competitor_id,
                CrawlJob.status.in_(CrawlJobStatus.ACTIVE),
            )
            .order_by(CrawlJob.created_at.desc())
            .limit(1)
        )
        return self._session.scalars(stmt).first()

    def fail_stale_jobs(self, *, competitor_id: uuid.UUID, older_than: timedelta) -> int:
        """
        Mark pending/running jobs created before the cutoff as failed.
        """

        now = datetime.now(timezone.utc)
        stmt = (
            update(CrawlJob)
            .where(
                CrawlJob.competitor_id == competitor_id,
                CrawlJob.status.in_(CrawlJobStatus.ACTIVE),
                CrawlJob.created_at < now - older_than,
            )
            .values(
                status=CrawlJobStatus.FAILED,
                completed_at=now,
                error_message=STALE_JOB_ERROR,
            )
            .execution_options(synchronize_session=False)
        )
        result = self._session.execute(stmt)
        return int(result.rowcount or 0)

    def claim_oldest_pending(self) -> CrawlJob | None:
        """
        Lock and return the oldest pending job, skipping rows other workers hold.
        """

        stmt = (
            select(CrawlJob)
            .where(CrawlJob.status == CrawlJobStatus.PENDING)
            .order_by(CrawlJob.created_at.asc())
            .limit(1)
            .with_for_update(skip_locked=True)
        )
        return self._session.scalars(stmt).first()

    def mark_running(self, *, job_id: uuid.UUID) -> CrawlJob | None:
        job = self.get_job(job_id)
        if job is None:
            return None
        job.status = CrawlJobStatus.RUNNING
        job.started_at = datetime.now(timezone.utc)
        job.completed_at = None
        job.error_message = None
        return job

    def mark_completed(
        self,
        *,
        job_id: uuid.UUID,
        result_payload: dict[str, Any] | None = None,
    ) -> CrawlJob | None:
        job = self.get_job(job_id)
        if job is None:
            return None
        job.status = CrawlJobStatus.COMPLETED
        job.completed_at = datetime.now(timezone.utc)
        job.result_payload = result_payload
        job.error_message = None
        return job

    def mark_failed(
        self,
        *,
        job_id: uuid.UUID,
        error_message: str,
        result_payload: dict[str, Any] | None = None,
    ) -> CrawlJob | None:
        job = self.get_job(job_id)
        if job is None:
            return None
        job.status = CrawlJobStatus.FAILED
        job.completed_at = datetime.now(timezone.utc)
        job.error_message = error_message
        if result_payload is not None:
            job.result_payload = result_payload
        return job
