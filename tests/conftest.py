"""
tests/conftest.py

Shared fakes for crawl tests: a scripted page fetcher, an in-memory
snapshot store and an in-memory blob storage. Nothing here touches a
database, a browser or the network.
"""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Any

import pytest

from app.domain.crawl import ChangeWrite, InsightWrite, SeoSnapshotWrite, SnapshotWrite, StoredSnapshot
from app.scraping.config import CrawlSettings
from app.scraping.events import EventEmitter
from app.scraping.fetcher import RenderedPage
from app.scraping.storage.base import BlobStorage, SnapshotStore
from db.models.crawl_job import CrawlJobStatus

BASE_URL = "https://acme.test"

HOMEPAGE_HTML = """
<html><head><title>Acme</title><meta name="description" content="Acme builds workflow automation."></head>
<body>
  <header>
    <nav>
      <a href="/pricing">Pricing</a>
      <a href="/services">Services</a>
      <a href="/case-studies">Case Studies</a>
      <a href="/careers">Careers</a>
    </nav>
  </header>
  <main>
    <h1>Automate every workflow</h1>
    <h2>Collaboration for teams</h2>
    <a href="/signup">Get started</a>
    <a href="/demo">Book demo</a>
  </main>
  <footer><a href="/privacy">Privacy Policy</a></footer>
</body></html>
"""

PRICING_HTML = """
<html><body><main>
  <h1>Pricing</h1>
  <h2>Starter plan</h2><p>$29 per month</p>
  <h2>Enterprise plan</h2><p>Contact sales</p>
</main></body></html>
"""

SERVICES_HTML = """
<html><body><main>
  <h1>Our services</h1>
  <h2>Strategy and transformation advisory</h2>
  <h2>Implementation and delivery</h2>
  <h3>Healthcare solutions</h3>
  <p>We deliver strategy, implementation and support for enterprise teams in healthcare and finance.</p>
</main></body></html>
"""

CASE_STUDIES_HTML = """
<html><body><main>
  <h1>Customer stories</h1>
  <h2>How Globex cut onboarding time</h2>
  <blockquote>"Acme changed how we work." - CTO</blockquote>
</main></body></html>
"""


class FakeFetcher:
    """
    Returns scripted pages by URL. A missing URL, or an exception value,
    raises on fetch.
    """

    def __init__(self, pages: dict[str, str | Exception], *, screenshot: bytes | None = b"png") -> None:
        self.pages = dict(pages)
        self.screenshot = screenshot
        self.calls: list[tuple[str, str]] = []

    def fetch(self, url: str, *, user_agent: str) -> RenderedPage:
        self.calls.append((url, user_agent))
        page = self.pages.get(url)
        if page is None:
            raise RuntimeError(f"net::ERR_CONNECTION_REFUSED at {url}")
        if isinstance(page, Exception):
            raise page
        return RenderedPage(url=url, html=page, title="Acme", http_status=200, screenshot=self.screenshot)

    def __enter__(self) -> "FakeFetcher":
        return self

    def __exit__(self, *exc_info: object) -> None:
        return None


class InMemorySnapshotStore(SnapshotStore):
    """
    SnapshotStore that keeps every row in plain lists and dicts.
    """

    def __init__(self) -> None:
        self.jobs: dict[uuid.UUID, dict[str, Any]] = {}
        self.pages: dict[tuple[uuid.UUID, str], tuple[uuid.UUID, str]] = {}
        self.snapshots: list[tuple[uuid.UUID, StoredSnapshot]] = []
        self.changes: list[ChangeWrite] = []
        self.insights: list[InsightWrite] = []
        self.seo_rows: list[SeoSnapshotWrite] = []
        self.seo_dimensions: list[dict[str, Any]] = []
        self.crawled: dict[uuid.UUID, datetime] = {}

    def start_job(self, *, competitor_id: uuid.UUID, existing_job_id: uuid.UUID | None = None) -> uuid.UUID:
        job_id = existing_job_id or uuid.uuid4()
        self.jobs[job_id] = {"competitor_id": competitor_id, "status": CrawlJobStatus.RUNNING}
        return job_id

    def finalize_job(
        self,
        *,
        job_id: uuid.UUID,
        status: str,
        error_message: str | None = None,
        result_payload: dict[str, Any] | None = None,
    ) -> None:
        self.jobs[job_id].update(status=status, error_message=error_message, result_payload=result_payload)

    def upsert_page(self, *, competitor_id: uuid.UUID, url: str, page_type: str) -> uuid.UUID:
        key = (competitor_id, url)
        page_id = self.pages[key][0] if key in self.pages else uuid.uuid4()
        self.pages[key] = (page_id, page_type)
        return page_id

    def _page(self, page_id: uuid.UUID) -> tuple[uuid.UUID, str]:
        for (competitor_id, url), (stored_id, _) in self.pages.items():
            if stored_id == page_id:
                return competitor_id, url
        raise KeyError(page_id)

    def save_snapshot(self, record: SnapshotWrite) -> tuple[uuid.UUID, int]:
        competitor_id, url = self._page(record.page_id)
        version = 1 + sum(1 for _, row in self.snapshots if row.page_id == record.page_id)
        snapshot_id = uuid.uuid4()
        self.snapshots.append(
            (
                competitor_id,
                StoredSnapshot(
                    id=snapshot_id,
                    page_id=record.page_id,
                    version_number=version,
                    html=record.html,
                    captured_at=record.captured_at,
                    page_type=record.page_type,
                    url=url,
                    http_status=record.http_status,
                    title=record.title,
                    h1_text=record.h1_text,
                    h2_headings=list(record.h2_headings),
                    h3_headings=list(record.h3_headings),
                    list_items=list(record.list_items),
                    nav_labels=list(record.nav_labels),
                    primary_headline=record.primary_headline,
                    primary_cta_text=record.primary_cta_text,
                    secondary_cta_text=record.secondary_cta_text,
                    nav_items=list(record.nav_items),
                    structured_content=dict(record.structured_content),
                ),
            )
        )
        return snapshot_id, version

    def previous_snapshot(self, *, page_id: uuid.UUID, before_version: int) -> StoredSnapshot | None:
        candidates = [
            row for _, row in self.snapshots if row.page_id == page_id and row.version_number < before_version
        ]
        return max(candidates, key=lambda row: row.version_number) if candidates else None

    def save_changes(self, rows: Sequence[ChangeWrite]) -> list[uuid.UUID]:
        self.changes.extend(rows)
        return [uuid.uuid4() for _ in rows]

    def save_insights(self, rows: Sequence[InsightWrite]) -> int:
        self.insights.extend(rows)
        return len(rows)

    def insight_exists_since(
        self,
        *,
        competitor_id: uuid.UUID,
        insight_text: str,
        since: datetime,
        page_type: str | None = None,
        insight_type: str | None = None,
    ) -> bool:
        return any(
            row.competitor_id == competitor_id
            and row.insight_text == insight_text
            and (page_type is None or row.page_type == page_type)
            and (insight_type is None or row.insight_type == insight_type)
            for row in self.insights
        )

    def recent_snapshots(self, *, competitor_id: uuid.UUID, limit: int) -> list[StoredSnapshot]:
        rows = [row for owner, row in self.snapshots if owner == competitor_id]
        return list(reversed(rows))[:limit]

    def save_seo_snapshots(
        self,
        rows: Sequence[SeoSnapshotWrite],
        *,
        seo_dimensions: dict[str, Any],
        topic_clusters: list[dict[str, Any]],
    ) -> int:
        self.seo_rows.extend(rows)
        self.seo_dimensions.append(seo_dimensions)
        return len(rows)

    def mark_competitor_crawled(self, *, competitor_id: uuid.UUID, crawled_at: datetime) -> None:
        self.crawled[competitor_id] = crawled_at


class InMemoryBlobStorage(BlobStorage):
    def __init__(self, public_base_url: str = "https://cdn.test") -> None:
        self.blobs: dict[str, bytes] = {}
        self.public_base_url = public_base_url

    def upload(self, *, path: str, content: bytes, content_type: str = "image/png") -> str | None:
        self.blobs[path] = content
        return f"{self.public_base_url}/{path}"


class RecordingEmitter(EventEmitter):
    def __init__(self, *, fail: bool = False) -> None:
        self.events: list[tuple[str, dict[str, Any]]] = []
        self.fail = fail

    def emit(self, event_type: str, payload: dict[str, Any]) -> None:
        if self.fail:
            raise RuntimeError("event bus unavailable")
        self.events.append((event_type, payload))


def stored_snapshot(
    *,
    page_type: str,
    url: str = BASE_URL,
    html: str = "<html></html>",
    version: int = 1,
    captured_at: datetime | None = None,
    **fields: Any,
) -> StoredSnapshot:
    return StoredSnapshot(
        id=uuid.uuid4(),
        page_id=uuid.uuid4(),
        version_number=version,
        html=html,
        captured_at=captured_at or datetime(2026, 1, 1, tzinfo=timezone.utc),
        page_type=page_type,
        url=url,
        **fields,
    )


@pytest.fixture()
def site_pages() -> dict[str, str | Exception]:
    return {
        BASE_URL: HOMEPAGE_HTML,
        f"{BASE_URL}/pricing": PRICING_HTML,
        f"{BASE_URL}/services": SERVICES_HTML,
        f"{BASE_URL}/case-studies": CASE_STUDIES_HTML,
    }


@pytest.fixture()
def crawl_settings() -> CrawlSettings:
    return CrawlSettings(
        max_pages=4,
        max_seo_content_pages=0,
        retry_count=1,
        respect_robots=False,
        user_agents=("ua-one", "ua-two"),
        events_enabled=True,
    )


@pytest.fixture()
def store() -> InMemorySnapshotStore:
    return InMemorySnapshotStore()


@pytest.fixture()
def blob_storage() -> InMemoryBlobStorage:
    return InMemoryBlobStorage()


@pytest.fixture()
def emitter() -> RecordingEmitter:
    return RecordingEmitter()
