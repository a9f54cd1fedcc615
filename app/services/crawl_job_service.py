"""
app/services/crawl_job_service.py

Crawl job trigger and worker.

Enqueue fails stale jobs first and returns the competitor's active job
instead of creating a duplicate. Running a job builds one browser-backed
fetcher for the lifetime of that job.
"""

from __future__ import annotations

import logging
import uuid
from contextlib import AbstractContextManager
from datetime import timedelta
from functools import lru_cache
from typing import Callable

from sqlalchemy.orm import Session

from app.domain.crawl import CrawlSummary
from app.scraping.config import CrawlSettings, get_crawl_settings
from app.scraping.engine import CrawlEngine
from app.scraping.events import EventEmitter, LoggingEventEmitter
from app.scraping.executor import FetchExecutor
from app.scraping.fetcher import PageFetcher, PlaywrightPageFetcher
from app.scraping.logging_utils import log_event
from app.scraping.robots import RobotsPolicyManager
from app.scraping.storage import BlobStorage, LocalBlobStorage, SQLAlchemySnapshotStore
from db.models.crawl_job import CrawlJob, CrawlJobSource, CrawlJobStatus
from db.repositories.competitor_repository import CompetitorRepository
from db.repositories.crawl_job_repository import CrawlJobRepository
from db.repositories.errors import CompetitorNotFoundError, CrawlJobNotFoundError

logger = logging.getLogger(__name__)

MISSING_COMPETITOR_ERROR = "Competitor not found or missing URL"

FetcherFactory = Callable[[CrawlSettings], AbstractContextManager[PageFetcher]]


def playwright_fetcher_factory(settings: CrawlSettings) -> PlaywrightPageFetcher:
    return PlaywrightPageFetcher(
        headless=settings.headless,
        navigation_timeout_ms=settings.navigation_timeout_ms,
        network_idle_timeout_ms=settings.network_idle_timeout_ms,
    )


def summary_from_job(job: CrawlJob, *, competitor_url: str) -> CrawlSummary:
    """Rebuild the outcome of a job that already finished."""
    payload = job.result_payload or {}
    pages = [str(url) for url in payload.get("pages") or []]
    errors = [str(error) for error in payload.get("errors") or []]
    if not errors and job.error_message:
        errors = [job.error_message]
    return CrawlSummary(
        job_id=job.id,
        competitor_id=job.competitor_id,
        competitor_url=competitor_url,
        status=job.status,
        pages_persisted=len(pages),
        changes_detected=int(payload.get("changes_detected") or 0),
        page_urls=pages,
        errors=errors,
    )


class CrawlJobService:
    """
    Enqueues, runs and claims crawl jobs.
    """

    def __init__(
        self,
        *,
        settings: CrawlSettings | None = None,
        fetcher_factory: FetcherFactory | None = None,
        blob_storage: BlobStorage | None = None,
        events: EventEmitter | None = None,
    ) -> None:
        self._settings = settings or get_crawl_settings()
        self._fetcher_factory = fetcher_factory or playwright_fetcher_factory
        self._blob_storage = blob_storage or LocalBlobStorage(
            root_dir=self._settings.screenshot_dir,
            public_base_url=self._settings.screenshot_public_base_url,
        )
        self._events = events or LoggingEventEmitter()

    # ------------------------------------------------------------------
    # trigger
    # ------------------------------------------------------------------

    def enqueue(
        self,
        *,
        db: Session,
        competitor_id: uuid.UUID,
        source: str = CrawlJobSource.MANUAL,
    ) -> CrawlJob:
        """
        Return a pending job for the competitor, creating one only when no
        job is already pending or running.

        Raises:
            CompetitorNotFoundError: unknown competitor.
            ValueError: the competitor has no homepage URL.
        """

        competitor = CompetitorRepository(db).get(competitor_id)
        if competitor is None:
            raise CompetitorNotFoundError(f"Competitor {competitor_id} not found.")
        if not (competitor.url or "").strip():
            raise ValueError(f"Competitor {competitor_id} has no URL.")

        jobs = CrawlJobRepository(db)
        try:
            stale = jobs.fail_stale_jobs(
                competitor_id=competitor_id,
                older_than=timedelta(minutes=self._settings.stale_job_minutes),
            )
            if stale:
                log_event(logger, logging.WARNING, "stale_crawl_jobs_failed", competitor_id=competitor_id, count=stale)

            active = jobs.find_active_job(competitor_id=competitor_id)
            if active is not None:
                db.commit()
                return active

            job = jobs.create_job(competitor_id=competitor_id, source=source)
            db.commit()
        except Exception:
            db.rollback()
            raise

        log_event(logger, logging.INFO, "crawl_job_enqueued", competitor_id=competitor_id, job_id=job.id, source=source)
        return job

    def get_job(self, *, db: Session, job_id: uuid.UUID) -> CrawlJob:
        job = CrawlJobRepository(db).get_job(job_id)
        if job is None:
            raise CrawlJobNotFoundError(f"Crawl job {job_id} not found.")
        return job

    # ------------------------------------------------------------------
    # execution
    # ------------------------------------------------------------------

    def _build_engine(self, db: Session, fetcher: PageFetcher) -> CrawlEngine:
        executor = FetchExecutor(
            fetcher,
            settings=self._settings,
            robots=RobotsPolicyManager(timeout_seconds=self._settings.robots_timeout_seconds),
        )
        return CrawlEngine(
            store=SQLAlchemySnapshotStore(session=db),
            executor=executor,
            settings=self._settings,
            blob_storage=self._blob_storage,
            events=self._events,
        )

    def _fail_job(self, db: Session, job: CrawlJob, message: str, *, competitor_url: str = "") -> CrawlSummary:
        try:
            CrawlJobRepository(db).mark_failed(job_id=job.id, error_message=message)
            db.commit()
        except Exception:
            db.rollback()
            raise
        return CrawlSummary(
            job_id=job.id,
            competitor_id=job.competitor_id,
            competitor_url=competitor_url,
            status=CrawlJobStatus.FAILED,
            pages_persisted=0,
            changes_detected=0,
            errors=[message],
        )

    def _execute(self, db: Session, job: CrawlJob) -> CrawlSummary:
        competitor = CompetitorRepository(db).get(job.competitor_id)
        url = (competitor.url or "").strip() if competitor is not None else ""
        if not url:
            return self._fail_job(db, job, MISSING_COMPETITOR_ERROR)

        try:
            with self._fetcher_factory(self._settings) as fetcher:
                engine = self._build_engine(db, fetcher)
                return engine.crawl_competitor(
                    competitor_id=job.competitor_id,
                    competitor_url=url,
                    existing_job_id=job.id,
                )
        except Exception as exc:
            db.rollback()
            log_event(
                logger,
                logging.ERROR,
                "crawl_job_aborted",
                job_id=job.id,
                competitor_id=job.competitor_id,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            return self._fail_job(db, job, str(exc) or type(exc).__name__, competitor_url=url)

    def run_crawl(self, *, db: Session, job_id: uuid.UUID) -> CrawlSummary:
        """
        Run one job to completion. Running a finished job again returns its
        stored outcome without crawling.
        """

        job = self.get_job(db=db, job_id=job_id)
        if job.status in CrawlJobStatus.TERMINAL:
            competitor = CompetitorRepository(db).get(job.competitor_id)
            return summary_from_job(job, competitor_url=(competitor.url or "") if competitor else "")
        return self._execute(db, job)

    def process_next_job(self, *, db: Session) -> CrawlSummary | None:
        """
        Claim the oldest pending job and run it. Returns None when the
        queue is empty.
        """

        jobs = CrawlJobRepository(db)
        try:
            job = jobs.claim_oldest_pending()
            if job is None:
                db.rollback()
                return None
            jobs.mark_running(job_id=job.id)
            db.commit()
        except Exception:
            db.rollback()
            raise

        summary = self._execute(db, job)
        log_event(
            logger,
            logging.INFO,
            "worker_job_processed",
            job_id=job.id,
            competitor_id=job.competitor_id,
            status=summary.status,
            pages=summary.pages_persisted,
            changes=summary.changes_detected,
        )
        return summary


@lru_cache(maxsize=1)
def get_crawl_job_service() -> CrawlJobService:
    """
    Build and cache the crawl job service.
    """

    return CrawlJobService()
