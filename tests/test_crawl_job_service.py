"""
tests/test_crawl_job_service.py

Pytest tests for the crawl job trigger and worker service.

Repositories are replaced with in-memory fakes keyed off a fake session,
and the SQLAlchemy snapshot store with the shared in-memory store.

Coverage
--------
- Enqueue: new job, existing active job, unknown competitor, missing URL
- Enqueue rolls back and re-raises on repository errors
- run_crawl: pending job crawls; finished job returns its stored outcome
- run_crawl fails the job when the competitor URL is missing
- A browser that fails to launch fails the job instead of leaving it running
- process_next_job: empty queue and claim-then-run
- summary_from_job fallbacks
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any

import pytest

from app.services import crawl_job_service as service_module
from app.services.crawl_job_service import MISSING_COMPETITOR_ERROR, CrawlJobService, summary_from_job
from db.models.crawl_job import CrawlJobSource, CrawlJobStatus
from db.repositories.errors import CompetitorNotFoundError, CrawlJobNotFoundError
from tests.conftest import BASE_URL, FakeFetcher


@dataclass
class FakeCompetitor:
    id: uuid.UUID
    url: str | None


@dataclass
class FakeJob:
    competitor_id: uuid.UUID
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    status: str = CrawlJobStatus.PENDING
    source: str = CrawlJobSource.MANUAL
    result_payload: dict[str, Any] | None = None
    error_message: str | None = None


class FakeSession:
    def __init__(self) -> None:
        self.competitors: dict[uuid.UUID, FakeCompetitor] = {}
        self.jobs: list[FakeJob] = []
        self.commits = 0
        self.rollbacks = 0
        self.stale = 0
        self.fail_create = False

    def commit(self) -> None:
        self.commits += 1

    def rollback(self) -> None:
        self.rollbacks += 1


class FakeCompetitorRepository:
    def __init__(self, session: FakeSession) -> None:
        self._session = session

    def get(self, competitor_id: uuid.UUID) -> FakeCompetitor | None:
        return self._session.competitors.get(competitor_id)


class FakeCrawlJobRepository:
    def __init__(self, session: FakeSession) -> None:
        self._session = session

    def fail_stale_jobs(self, *, competitor_id: uuid.UUID, older_than: timedelta) -> int:
        return self._session.stale

    def find_active_job(self, *, competitor_id: uuid.UUID) -> FakeJob | None:
        for job in self._session.jobs:
            if job.competitor_id == competitor_id and job.status in CrawlJobStatus.ACTIVE:
                return job
        return None

    def create_job(self, *, competitor_id: uuid.UUID, source: str) -> FakeJob:
        if self._session.fail_create:
            raise RuntimeError("insert failed")
        job = FakeJob(competitor_id=competitor_id, source=source)
        self._session.jobs.append(job)
        return job

    def get_job(self, job_id: uuid.UUID) -> FakeJob | None:
        return next((job for job in self._session.jobs if job.id == job_id), None)

    def claim_oldest_pending(self) -> FakeJob | None:
        return next((job for job in self._session.jobs if job.status == CrawlJobStatus.PENDING), None)

    def mark_running(self, *, job_id: uuid.UUID) -> FakeJob | None:
        job = self.get_job(job_id)
        if job is not None:
            job.status = CrawlJobStatus.RUNNING
        return job

    def mark_failed(self, *, job_id: uuid.UUID, error_message: str) -> FakeJob | None:
        job = self.get_job(job_id)
        if job is not None:
            job.status = CrawlJobStatus.FAILED
            job.error_message = error_message
        return job


class _UnlaunchableBrowser:
    def __enter__(self) -> FakeFetcher:
        raise RuntimeError("Executable doesn't exist at chromium")

    def __exit__(self, *exc_info: object) -> None:
        return None


@pytest.fixture()
def db(monkeypatch, store) -> FakeSession:
    monkeypatch.setattr(service_module, "CompetitorRepository", FakeCompetitorRepository)
    monkeypatch.setattr(service_module, "CrawlJobRepository", FakeCrawlJobRepository)
    monkeypatch.setattr(service_module, "SQLAlchemySnapshotStore", lambda session: store)
    return FakeSession()


@pytest.fixture()
def fetchers() -> list[FakeFetcher]:
    return []


@pytest.fixture()
def service(crawl_settings, site_pages, blob_storage, emitter, fetchers) -> CrawlJobService:
    def factory(settings):
        fetcher = FakeFetcher(site_pages)
        fetchers.append(fetcher)
        return fetcher

    return CrawlJobService(
        settings=crawl_settings,
        fetcher_factory=factory,
        blob_storage=blob_storage,
        events=emitter,
    )


def _competitor(db: FakeSession, url: str | None = BASE_URL) -> uuid.UUID:
    competitor_id = uuid.uuid4()
    db.competitors[competitor_id] = FakeCompetitor(id=competitor_id, url=url)
    return competitor_id


class TestEnqueue:
    def test_creates_pending_job(self, service, db) -> None:
        competitor_id = _competitor(db)

        job = service.enqueue(db=db, competitor_id=competitor_id)

        assert job.status == CrawlJobStatus.PENDING
        assert job.source == CrawlJobSource.MANUAL
        assert db.commits == 1

    def test_returns_active_job(self, service, db) -> None:
        competitor_id = _competitor(db)
        running = FakeJob(competitor_id=competitor_id, status=CrawlJobStatus.RUNNING)
        db.jobs.append(running)

        job = service.enqueue(db=db, competitor_id=competitor_id, source=CrawlJobSource.SCHEDULED)

        assert job is running
        assert len(db.jobs) == 1

    def test_unknown_competitor(self, service, db) -> None:
        with pytest.raises(CompetitorNotFoundError):
            service.enqueue(db=db, competitor_id=uuid.uuid4())

    def test_competitor_without_url(self, service, db) -> None:
        competitor_id = _competitor(db, url="  ")
        with pytest.raises(ValueError):
            service.enqueue(db=db, competitor_id=competitor_id)

    def test_rolls_back_on_repository_error(self, service, db) -> None:
        competitor_id = _competitor(db)
        db.fail_create = True

        with pytest.raises(RuntimeError):
            service.enqueue(db=db, competitor_id=competitor_id)
        assert db.rollbacks == 1
        assert db.commits == 0


class TestRunCrawl:
    def test_unknown_job(self, service, db) -> None:
        with pytest.raises(CrawlJobNotFoundError):
            service.run_crawl(db=db, job_id=uuid.uuid4())

    def test_pending_job_is_crawled(self, service, db, store, fetchers) -> None:
        competitor_id = _competitor(db)
        job = service.enqueue(db=db, competitor_id=competitor_id)

        summary = service.run_crawl(db=db, job_id=job.id)

        assert summary.job_id == job.id
        assert summary.status == CrawlJobStatus.COMPLETED
        assert summary.pages_persisted == 4
        assert store.jobs[job.id]["status"] == CrawlJobStatus.COMPLETED
        assert len(fetchers) == 1
        assert BASE_URL in [url for url, _ in fetchers[0].calls]

    def test_finished_job_returns_stored_outcome(self, service, db, fetchers) -> None:
        competitor_id = _competitor(db)
        job = FakeJob(
            competitor_id=competitor_id,
            status=CrawlJobStatus.COMPLETED,
            result_payload={"pages": [BASE_URL, f"{BASE_URL}/pricing"], "changes_detected": 3},
        )
        db.jobs.append(job)

        summary = service.run_crawl(db=db, job_id=job.id)

        assert summary.pages_persisted == 2
        assert summary.changes_detected == 3
        assert summary.competitor_url == BASE_URL
        assert fetchers == []

    def test_missing_url_fails_job(self, service, db, fetchers) -> None:
        job = FakeJob(competitor_id=uuid.uuid4())
        db.jobs.append(job)

        summary = service.run_crawl(db=db, job_id=job.id)

        assert summary.status == CrawlJobStatus.FAILED
        assert summary.errors == [MISSING_COMPETITOR_ERROR]
        assert job.status == CrawlJobStatus.FAILED
        assert job.error_message == MISSING_COMPETITOR_ERROR
        assert fetchers == []


    def test_browser_launch_failure_fails_job(self, crawl_settings, blob_storage, emitter, db) -> None:
        service = CrawlJobService(
            settings=crawl_settings,
            fetcher_factory=lambda settings: _UnlaunchableBrowser(),
            blob_storage=blob_storage,
            events=emitter,
        )
        competitor_id = _competitor(db)
        job = service.enqueue(db=db, competitor_id=competitor_id)

        summary = service.run_crawl(db=db, job_id=job.id)

        assert summary.status == CrawlJobStatus.FAILED
        assert summary.errors == ["Executable doesn't exist at chromium"]
        assert summary.competitor_url == BASE_URL
        assert job.status == CrawlJobStatus.FAILED
        assert job.error_message == "Executable doesn't exist at chromium"


class TestProcessNextJob:
    def test_empty_queue(self, service, db) -> None:
        assert service.process_next_job(db=db) is None
        assert db.rollbacks == 1

    def test_claims_oldest_pending(self, service, db, store) -> None:
        competitor_id = _competitor(db)
        done = FakeJob(competitor_id=competitor_id, status=CrawlJobStatus.COMPLETED)
        pending = FakeJob(competitor_id=competitor_id)
        db.jobs.extend([done, pending])

        summary = service.process_next_job(db=db)

        assert summary is not None
        assert summary.job_id == pending.id
        assert pending.status == CrawlJobStatus.RUNNING
        assert store.jobs[pending.id]["status"] == CrawlJobStatus.COMPLETED


class TestSummaryFromJob:
    def test_error_message_fallback(self) -> None:
        job = FakeJob(competitor_id=uuid.uuid4(), status=CrawlJobStatus.FAILED, error_message="boom")

        summary = summary_from_job(job, competitor_url=BASE_URL)

        assert summary.errors == ["boom"]
        assert summary.pages_persisted == 0
        assert not summary.ok

    def test_payload_errors_win(self) -> None:
        job = FakeJob(
            competitor_id=uuid.uuid4(),
            status=CrawlJobStatus.COMPLETED,
            result_payload={"pages": [BASE_URL], "errors": ["robots"]},
            error_message="ignored",
        )
        assert summary_from_job(job, competitor_url=BASE_URL).errors == ["robots"]


class TestWorkerBrowserFailure:
    def test_claimed_job_never_left_running(self, crawl_settings, blob_storage, emitter, db) -> None:
        service = CrawlJobService(
            settings=crawl_settings,
            fetcher_factory=lambda settings: _UnlaunchableBrowser(),
            blob_storage=blob_storage,
            events=emitter,
        )
        pending = FakeJob(competitor_id=_competitor(db))
        db.jobs.append(pending)

        summary = service.process_next_job(db=db)

        assert summary is not None
        assert summary.status == CrawlJobStatus.FAILED
        assert pending.status in CrawlJobStatus.TERMINAL
