"""
app/api/routers/crawl_jobs.py

Crawl job trigger endpoints: enqueue a crawl for a competitor, run a
queued job synchronously, and read a job's status.
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Body, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.api.dependencies import get_competitor_id, get_job_id
from app.schemas.crawl_jobs import CrawlJobCreateRequest, CrawlJobResponse, CrawlSummaryResponse
from app.services.crawl_job_service import CrawlJobService, get_crawl_job_service
from db.repositories.errors import CompetitorNotFoundError, CrawlJobNotFoundError
from db.session import get_db

router = APIRouter(tags=["crawl-jobs"])


@router.post(
    "/competitors/{competitor_id}/crawl-jobs",
    response_model=CrawlJobResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
def enqueue_crawl_job(
    request: CrawlJobCreateRequest | None = Body(default=None),
    competitor_id: uuid.UUID = Depends(get_competitor_id),
    db: Session = Depends(get_db),
    crawl_service: CrawlJobService = Depends(get_crawl_job_service),
) -> CrawlJobResponse:
    """
    Queue a crawl for one competitor. An already pending or running job
    for the same competitor is returned instead of a new one.
    """

    source = (request or CrawlJobCreateRequest()).source
    try:
        job = crawl_service.enqueue(db=db, competitor_id=competitor_id, source=source)
    except CompetitorNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    return CrawlJobResponse.from_job(job)


@router.post("/crawl-jobs/{job_id}/run", response_model=CrawlSummaryResponse)
def run_crawl_job(
    job_id: uuid.UUID = Depends(get_job_id),
    db: Session = Depends(get_db),
    crawl_service: CrawlJobService = Depends(get_crawl_job_service),
) -> CrawlSummaryResponse:
    """
    Run a queued job to completion and return its outcome.
    """

    try:
        summary = crawl_service.run_crawl(db=db, job_id=job_id)
    except CrawlJobNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    return CrawlSummaryResponse.from_summary(summary)


@router.get("/crawl-jobs/{job_id}", response_model=CrawlJobResponse)
def get_crawl_job(
    job_id: uuid.UUID = Depends(get_job_id),
    db: Session = Depends(get_db),
    crawl_service: CrawlJobService = Depends(get_crawl_job_service),
) -> CrawlJobResponse:
    try:
        job = crawl_service.get_job(db=db, job_id=job_id)
    except CrawlJobNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    return CrawlJobResponse.from_job(job)
