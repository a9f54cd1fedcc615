"""
Competitor crawl engine.

One call crawls one competitor site: fetch the homepage, pick targets from
its links, fetch them sequentially, persist a versioned snapshot per page,
diff each against the previous version, then record SEO, observational and
webpage-signal insights. Page-level failures accumulate as error messages;
the job fails only when no page was persisted.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from app.domain.crawl import CrawlSummary, SeoSnapshotWrite, SnapshotWrite
from app.scraping.config import CrawlSettings
from app.scraping.events import CrawlEventType, EventEmitter, NullEventEmitter, emit_safely
from app.scraping.executor import FetchExecutor
from app.scraping.extractor import ExtractedPage, build_screenshot_path, extract_page
from app.scraping.logging_utils import (
    log_change_detection_error,
    log_crawl_failure,
    log_event,
    log_snapshot_failure,
)
from app.scraping.storage.base import BlobStorage, SnapshotStore
from app.scraping.targets import extract_candidate_links, normalize_url, origin_url, pick_target_urls
from app.scraping.taxonomy import PageType
from app.scraping.types import CrawlTarget, FetchFailure, FetchResult, RobotsSkip
from change_detection.compare import ComparisonOutcome, compare_snapshots
from change_detection.insights import persist_observational_insights, persist_webpage_signal_insights
from change_detection.pm_signals import PmSignalSnapshot
from change_detection.types import ImpactLevel
from db.models.crawl_job import CrawlJobStatus
from seo import KeywordProfileCache, SeoPage, build_seo_intelligence, is_seo_content_path

logger = logging.getLogger(__name__)

NO_PAGES_ERROR = "No pages crawled"


@dataclass(frozen=True)
class PersistedPage:
    fetched: FetchResult
    extracted: ExtractedPage
    snapshot_id: uuid.UUID
    version_number: int
    comparison: ComparisonOutcome


class CrawlEngine:
    """
    Orchestrates crawl, persistence and change detection for one competitor.
    """

    def __init__(
        self,
        *,
        store: SnapshotStore,
        executor: FetchExecutor,
        settings: CrawlSettings,
        blob_storage: BlobStorage | None = None,
        events: EventEmitter | None = None,
    ) -> None:
        self._store = store
        self._executor = executor
        self._settings = settings
        self._blob_storage = blob_storage
        self._events = events if events is not None and settings.events_enabled else NullEventEmitter()

    # ------------------------------------------------------------------
    # fetching
    # ------------------------------------------------------------------

    def fetch_site(self, base_url: str) -> tuple[list[FetchResult], list[str]]:
        """
        Fetch the homepage, then every selected target in order.

        Returns the fetched pages and the accumulated error messages. A
        homepage failure ends the fetch with no pages.
        """

        errors: list[str] = []
        origin = origin_url(base_url)

        homepage = self._executor.fetch_page(CrawlTarget(url=origin, page_type=PageType.HOMEPAGE), pages_fetched=0)
        if not isinstance(homepage, FetchResult):
            errors.append(homepage.message if isinstance(homepage, FetchFailure) else homepage.reason)
            return [], errors

        pages: list[FetchResult] = [homepage]
        links = extract_candidate_links(homepage.html, origin)
        targets = [
            target
            for target in pick_target_urls(
                origin,
                links,
                max_pages=self._settings.max_pages,
                max_seo_pages=self._settings.max_seo_content_pages,
            )
            if target.page_type != PageType.HOMEPAGE
        ]

        for target in targets:
            target_url = normalize_url(target.url)
            if any(page.url == target_url for page in pages):
                continue

            result = self._executor.fetch_page(
                CrawlTarget(url=target_url, page_type=target.page_type),
                pages_fetched=len(pages),
            )
            if isinstance(result, RobotsSkip):
                errors.append(result.reason)
            elif isinstance(result, FetchFailure):
                errors.append(result.message)
            else:
                pages.append(result)

        return pages, errors

    # ------------------------------------------------------------------
    # persistence
    # ------------------------------------------------------------------

    def _upload_screenshot(
        self,
        *,
        competitor_id: uuid.UUID,
        job_id: uuid.UUID,
        page: FetchResult,
        captured_at: datetime,
    ) -> str | None:
        if self._blob_storage is None or not page.screenshot:
            return None
        path = build_screenshot_path(
            competitor_id=str(competitor_id),
            crawl_job_id=str(job_id),
            page_type=page.page_type,
            page_url=page.url,
            captured_at=captured_at,
        )
        return self._blob_storage.upload(path=path, content=page.screenshot, content_type="image/png")

    def _persist_page(
        self,
        *,
        competitor_id: uuid.UUID,
        job_id: uuid.UUID,
        page: FetchResult,
        errors: list[str],
    ) -> PersistedPage:
        captured_at = datetime.now(timezone.utc)
        extracted = extract_page(page.html, url=page.url, title=page.title, page_type=page.page_type)
        is_homepage = page.page_type == PageType.HOMEPAGE

        page_id = self._store.upsert_page(competitor_id=competitor_id, url=page.url, page_type=page.page_type)
        screenshot_url = self._upload_screenshot(
            competitor_id=competitor_id,
            job_id=job_id,
            page=page,
            captured_at=captured_at,
        )

        primary_cta = extracted.primary_cta.text if extracted.primary_cta is not None else None
        secondary_cta = extracted.secondary_cta.text if extracted.secondary_cta is not None else None
        headline = extracted.headline if is_homepage else None

        snapshot_id, version = self._store.save_snapshot(
            SnapshotWrite(
                page_id=page_id,
                crawl_job_id=job_id,
                page_type=page.page_type,
                html=page.html,
                html_hash=extracted.html_hash,
                captured_at=captured_at,
                screenshot_url=screenshot_url,
                http_status=page.http_status,
                title=page.title,
                h1_text=extracted.h1_text,
                h2_headings=extracted.h2_headings,
                h3_headings=extracted.h3_headings,
                list_items=extracted.list_items,
                nav_labels=extracted.nav_labels,
                primary_headline=headline,
                primary_cta_text=primary_cta,
                secondary_cta_text=secondary_cta,
                nav_items=extracted.nav_labels,
                footer_links=[link.to_dict() for link in extracted.footer_links],
                structured_content=extracted.structured_content,
            )
        )

        comparison = ComparisonOutcome()
        previous = self._store.previous_snapshot(page_id=page_id, before_version=version)
        if previous is not None and previous.html:
            try:
                comparison = compare_snapshots(
                    self._store,
                    competitor_id=competitor_id,
                    page_id=page_id,
                    page_url=page.url,
                    page_type=page.page_type,
                    previous=previous,
                    current_snapshot_id=snapshot_id,
                    current=PmSignalSnapshot(
                        page_type=page.page_type,
                        html=page.html,
                        primary_headline=headline,
                        primary_cta_text=primary_cta,
                        nav_items=[link.text for link in extracted.top_navigation if link.text],
                    ),
                )
            except Exception as exc:
                log_change_detection_error(logger, exc, competitor_id=competitor_id, page_id=page_id, url=page.url)
                errors.append(f"Change detection failed for {page.url}: {exc}")

        return PersistedPage(
            fetched=page,
            extracted=extracted,
            snapshot_id=snapshot_id,
            version_number=version,
            comparison=comparison,
        )

    def _persist_seo(self, *, competitor_id: uuid.UUID, job_id: uuid.UUID, pages: list[PersistedPage]) -> int:
        content_pages = [page for page in pages if is_seo_content_path(page.fetched.url)]
        if not content_pages:
            return 0

        seo_pages = [
            SeoPage.from_record(page.extracted.seo, fallback_url=page.fetched.url, fallback_title=page.fetched.title)
            for page in content_pages
        ]
        intelligence = build_seo_intelligence(
            competitor_id=str(competitor_id),
            pages=seo_pages,
            cache=KeywordProfileCache(),
        )
        rows = [
            SeoSnapshotWrite(
                competitor_id=competitor_id,
                crawl_job_id=job_id,
                url=page.fetched.url,
                page_record=dict(page.extracted.seo),
            )
            for page in content_pages
        ]
        return self._store.save_seo_snapshots(
            rows,
            seo_dimensions=intelligence.dimensions.to_dict(),
            topic_clusters=[cluster.to_dict() for cluster in intelligence.weighted_clusters],
        )

    def _after_crawl(
        self,
        *,
        competitor_id: uuid.UUID,
        job_id: uuid.UUID,
        pages: list[PersistedPage],
        errors: list[str],
    ) -> None:
        try:
            self._persist_seo(competitor_id=competitor_id, job_id=job_id, pages=pages)
        except Exception as exc:
            errors.append(f"SEO snapshot save failed: {exc}")

        try:
            persist_observational_insights(
                self._store,
                competitor_id=competitor_id,
                page_types=[page.fetched.page_type for page in pages],
                window=timedelta(days=self._settings.insight_dedupe_days),
            )
        except Exception as exc:
            errors.append(f"Observational insight save failed: {exc}")

        try:
            persist_webpage_signal_insights(
                self._store,
                competitor_id=competitor_id,
                history_limit=self._settings.snapshot_history_limit,
                window=timedelta(days=self._settings.insight_dedupe_days),
            )
        except Exception as exc:
            errors.append(f"Webpage signal insight save failed: {exc}")

        try:
            self._store.mark_competitor_crawled(competitor_id=competitor_id, crawled_at=datetime.now(timezone.utc))
        except Exception as exc:
            errors.append(f"Competitor last_crawled_at update failed: {exc}")

    def _emit_high_impact(self, *, competitor_id: uuid.UUID, job_id: uuid.UUID, page: PersistedPage) -> None:
        outcome = page.comparison
        for change, change_id, impact in zip(outcome.changes, outcome.change_ids, outcome.impact_levels):
            if impact != ImpactLevel.STRATEGIC:
                continue
            emit_safely(
                self._events,
                CrawlEventType.HIGH_IMPACT_CHANGE,
                {
                    "competitor_id": str(competitor_id),
                    "crawl_job_id": str(job_id),
                    "change_id": str(change_id),
                    "page_url": change.page_url,
                    "page_type": change.page_type,
                    "category": change.category,
                    "summary": change.summary,
                },
            )

    # ------------------------------------------------------------------
    # entry point
    # ------------------------------------------------------------------

    def crawl_competitor(
        self,
        *,
        competitor_id: uuid.UUID,
        competitor_url: str,
        existing_job_id: uuid.UUID | None = None,
    ) -> CrawlSummary:
        """
        Crawl and persist one competitor. Never raises; failures end up in
        the returned summary and on the job row.
        """

        errors: list[str] = []
        job_id: uuid.UUID | None = None
        url = competitor_url

        try:
            url = normalize_url(competitor_url)
            job_id = self._store.start_job(competitor_id=competitor_id, existing_job_id=existing_job_id)
            log_event(
                logger,
                logging.INFO,
                "crawl_job_started",
                competitor_id=competitor_id,
                job_id=job_id,
                url=url,
            )

            fetched, fetch_errors = self.fetch_site(url)
            errors.extend(fetch_errors)

            persisted: list[PersistedPage] = []
            for page in fetched:
                try:
                    persisted.append(
                        self._persist_page(competitor_id=competitor_id, job_id=job_id, page=page, errors=errors)
                    )
                except Exception as exc:
                    errors.append(str(exc))
                    log_snapshot_failure(
                        logger,
                        exc,
                        competitor_id=competitor_id,
                        job_id=job_id,
                        page_url=page.url,
                        page_type=page.page_type,
                    )

            ok = bool(persisted)
            if errors:
                log_event(
                    logger,
                    logging.WARNING if ok else logging.ERROR,
                    "crawl_failure",
                    competitor_id=competitor_id,
                    job_id=job_id,
                    url=url,
                    message="Crawl completed with some failures" if ok else "Crawl failed",
                    errors=errors,
                )
            if ok:
                self._after_crawl(competitor_id=competitor_id, job_id=job_id, pages=persisted, errors=errors)

            status = CrawlJobStatus.COMPLETED if ok else CrawlJobStatus.FAILED
            changes_detected = sum(page.comparison.change_count for page in persisted)
            self._store.finalize_job(
                job_id=job_id,
                status=status,
                error_message=None if ok else (errors[0] if errors else NO_PAGES_ERROR),
                result_payload={
                    "pages": [page.fetched.url for page in persisted],
                    "changes_detected": changes_detected,
                    "errors": errors,
                },
            )
            summary = CrawlSummary(
                job_id=job_id,
                competitor_id=competitor_id,
                competitor_url=url,
                status=status,
                pages_persisted=len(persisted),
                changes_detected=changes_detected,
                page_urls=[page.fetched.url for page in persisted],
                errors=errors,
            )
        except Exception as exc:
            message = str(exc) or "Unknown crawl error"
            errors.append(message)
            log_crawl_failure(logger, exc, competitor_id=competitor_id, job_id=job_id, url=url)
            if job_id is not None:
                try:
                    self._store.finalize_job(job_id=job_id, status=CrawlJobStatus.FAILED, error_message=message)
                except Exception as finalize_exc:
                    log_event(
                        logger,
                        logging.ERROR,
                        "crawl_job_finalize_failed",
                        job_id=job_id,
                        error=str(finalize_exc),
                        error_type=type(finalize_exc).__name__,
                    )
            return CrawlSummary(
                job_id=job_id,
                competitor_id=competitor_id,
                competitor_url=url,
                status=CrawlJobStatus.FAILED,
                pages_persisted=0,
                changes_detected=0,
                errors=errors,
            )

        log_event(
            logger,
            logging.INFO,
            "crawl_job_finalized",
            competitor_id=competitor_id,
            job_id=job_id,
            status=summary.status,
            pages=summary.pages_persisted,
            changes=summary.changes_detected,
            errors=len(errors),
        )
        for page in persisted:
            self._emit_high_impact(competitor_id=competitor_id, job_id=job_id, page=page)
        emit_safely(
            self._events,
            CrawlEventType.CRAWL_COMPLETED,
            {
                "competitor_id": str(competitor_id),
                "crawl_job_id": str(job_id),
                "status": summary.status,
                "pages_persisted": summary.pages_persisted,
                "changes_detected": summary.changes_detected,
            },
        )
        return summary
