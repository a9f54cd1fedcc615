"""
app/scheduler/jobs.py

APScheduler-based background worker for queued competitor crawls.

Schedule
--------
  crawl_worker: every ``CRAWL_WORKER_INTERVAL_MINUTES`` minutes (default 5)

Each tick claims at most ``CRAWL_WORKER_MAX_JOBS_PER_TICK`` pending crawl
jobs (oldest first) and runs them to completion. Jobs are only ever
created through the API or the CLI; the worker never enqueues work itself.

Lifecycle
----------
Call ``build_scheduler()`` once to get a configured ``BackgroundScheduler``.
Start it on app boot; shut it down gracefully on app shutdown.
The scheduler is wired into FastAPI via the ``lifespan`` context in main.py.
"""

from __future__ import annotations

import logging

from apscheduler.schedulers.background import BackgroundScheduler

from app.config import WorkerSettings, get_worker_settings
from app.services.crawl_job_service import CrawlJobService, get_crawl_job_service
from db.session import session_scope

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Job: crawl worker
# ---------------------------------------------------------------------------


def run_crawl_worker(
    *,
    service: CrawlJobService | None = None,
    settings: WorkerSettings | None = None,
) -> int:
    """
    Drain up to ``max_jobs_per_tick`` pending crawl jobs.

    Returns the number of jobs processed. A failing job is logged and ends
    the tick; the job itself is already marked failed by the service.
    """
    service = service or get_crawl_job_service()
    settings = settings or get_worker_settings()
    logger.info("Scheduler: crawl_worker starting")

    processed = 0
    with session_scope() as db:
        for _ in range(settings.max_jobs_per_tick):
            try:
                summary = service.process_next_job(db=db)
            except Exception as exc:  # noqa: BLE001
                db.rollback()
                logger.warning("Scheduler: crawl_worker failed: %s", exc)
                break
            if summary is None:
                break
            processed += 1
            logger.info(
                "Scheduler: crawl_worker job=%s competitor=%s status=%r pages=%d changes=%d",
                summary.job_id,
                summary.competitor_id,
                summary.status,
                summary.pages_persisted,
                summary.changes_detected,
            )

    if processed == 0:
        logger.info("Scheduler: crawl_worker idle, no pending jobs")
    logger.info("Scheduler: crawl_worker complete processed=%d", processed)
    return processed


# ---------------------------------------------------------------------------
# Scheduler factory
# ---------------------------------------------------------------------------


def build_scheduler(settings: WorkerSettings | None = None) -> BackgroundScheduler:
    """
    Build the scheduler and register the crawl worker.

    Returns a configured but *not yet started* ``BackgroundScheduler``.
    The caller must call ``.start()`` and ``.shutdown(wait=True)`` at the
    appropriate lifecycle points. When the worker is disabled the
    scheduler carries no jobs.
    """
    settings = settings or get_worker_settings()
    scheduler = BackgroundScheduler(timezone="UTC")

    if not settings.scheduler_enabled:
        logger.info("Scheduler: crawl_worker disabled by configuration")
        return scheduler

    scheduler.add_job(
        run_crawl_worker,
        trigger="interval",
        minutes=settings.interval_minutes,
        id="crawl_worker",
        name="Competitor crawl worker",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
        misfire_grace_time=settings.misfire_grace_seconds,
    )
    return scheduler
