"""
app/schemas/crawl_jobs.py

Request and response schemas for crawl job operations.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from app.domain.crawl import CrawlSummary
from db.models.crawl_job import CrawlJob, CrawlJobSource


class CrawlJobCreateRequest(BaseModel):
    """
    Optional body for enqueueing a crawl job.
    """

    source: str = Field(default=CrawlJobSource.MANUAL, pattern="^(manual|scheduled|standalone)$")


class CrawlSummaryResponse(BaseModel):
    """
    API response model for the outcome of one crawl job.
    """

    job_id: uuid.UUID | None = None
    competitor_id: uuid.UUID
    competitor_url: str
    status: str
    pages_persisted: int = Field(..., ge=0)
    changes_detected: int = Field(..., ge=0)
    page_urls: list[str] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)

    @classmethod
    def from_summary(cls, summary: CrawlSummary) -> "CrawlSummaryResponse":
        return cls(
            job_id=summary.job_id,
            competitor_id=summary.competitor_id,
            competitor_url=summary.competitor_url,
            status=summary.status,
            pages_persisted=summary.pages_persisted,
            changes_detected=summary.changes_detected,
            page_urls=list(summary.page_urls),
            errors=list(summary.errors),
        )


class CrawlJobResponse(BaseModel):
    """
    API response model for one crawl job row.
    """

    id: uuid.UUID
    competitor_id: uuid.UUID
    status: str
    source: str
    error_message: str | None = None
    pages_persisted: int = Field(default=0, ge=0)
    changes_detected: int = Field(default=0, ge=0)
    created_at: datetime | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None

    @classmethod
    def from_job(cls, job: CrawlJob) -> "CrawlJobResponse":
        payload = job.result_payload or {}
        return cls(
            id=job.id,
            competitor_id=job.competitor_id,
            status=job.status,
            source=job.source,
            error_message=job.error_message,
            pages_persisted=len(payload.get("pages") or []),
            changes_detected=int(payload.get("changes_detected") or 0),
            created_at=job.created_at,
            started_at=job.started_at,
            completed_at=job.completed_at,
        )
