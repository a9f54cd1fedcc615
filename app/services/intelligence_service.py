"""
app/services/intelligence_service.py

Read-side service that loads stored snapshots, changes and insights for a
competitor and runs the deterministic analyzers over them: the
intelligence report, the baseline profile, the strategic model with its
competitive snapshot, and the SEO view.
"""

from __future__ import annotations

import logging
import uuid
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from functools import lru_cache

from sqlalchemy.orm import Session

from app.domain.crawl import StoredSnapshot
from app.scraping.config import CrawlSettings, get_crawl_settings
from app.scraping.taxonomy import PageType
from baseline import BaselineInput, BaselineResult, run_baseline_profile
from change_detection.insights import latest_by_page_type
from change_detection.types import ImpactLevel
from db.models.competitor import Competitor
from db.models.insight import InsightType
from db.models.seo_snapshot import SeoSnapshot
from db.repositories.change_repository import ChangeRepository
from db.repositories.competitor_repository import CompetitorRepository
from db.repositories.errors import CompetitorNotFoundError
from db.repositories.insight_repository import InsightRepository
from db.repositories.page_repository import PageRepository
from db.repositories.seo_snapshot_repository import SeoSnapshotRepository
from db.repositories.snapshot_repository import SnapshotRepository
from intelligence import IntelligenceReport, build_raw_signals, run_intelligence_engine, snapshot_signal
from intelligence.types import ServiceSnapshotSignal, SnapshotSignal
from seo import KeywordProfileCache, SeoIntelligence, SeoPage, SeoSnapshotRecord, build_seo_intelligence
from seo.comparison import CompetitorSeoSummary, compare_seo_across_competitors
from seo.types import SeoComparison, SeoDimensions
from strategic import (
    CompetitiveSnapshot,
    StrategicDimensions,
    StrategicModelResult,
    StrategicRawSignals,
    TrajectorySnapshot,
    build_competitive_snapshot,
    build_strategic_signals,
    compute_strategic_dimensions,
    run_strategic_model,
)

logger = logging.getLogger(__name__)

CHANGE_WINDOW = timedelta(days=30)
SERVICE_PAGE_TYPES = (PageType.SERVICES, PageType.PRODUCT_OR_SERVICES)
ABOUT_PATH_MARKERS = ("/about", "/company", "/who-we-are")
WEBPAGE_SIGNAL_LIMIT = 50


@dataclass(frozen=True)
class CompetitorSignalContext:
    """Stored signals for one competitor at two consecutive points."""

    competitor_id: uuid.UUID
    tracked_page_types: list[str]
    latest: dict[str, SnapshotSignal]
    previous: dict[str, SnapshotSignal]
    about_page: SnapshotSignal | None
    changes_last_30d: int
    changes_prior_30d: int
    strategic_change_recent: bool
    strategic_change_prior: bool
    webpage_signal_texts: list[str] = field(default_factory=list)
    latest_captured_at: datetime | None = None
    previous_captured_at: datetime | None = None


@dataclass(frozen=True)
class StrategicView:
    model: StrategicModelResult
    snapshot: CompetitiveSnapshot


@dataclass(frozen=True)
class SeoView:
    intelligence: SeoIntelligence
    comparison: SeoComparison
    page_count: int


def previous_by_page_type(snapshots: list[StoredSnapshot]) -> dict[str, StoredSnapshot]:
    """
    Second-newest snapshot per page type from a newest-first list; the
    newest stands in when a page type has only one version.
    """

    seen: dict[str, list[StoredSnapshot]] = {}
    for snapshot in snapshots:
        if snapshot.page_type:
            seen.setdefault(snapshot.page_type, []).append(snapshot)
    return {page_type: rows[1] if len(rows) > 1 else rows[0] for page_type, rows in seen.items()}


def find_about_page(snapshots: list[StoredSnapshot]) -> StoredSnapshot | None:
    for snapshot in snapshots:
        path = (snapshot.url or "").lower()
        if any(marker in path for marker in ABOUT_PATH_MARKERS):
            return snapshot
    return None


def first_present(signals: dict[str, SnapshotSignal], page_types: tuple[str, ...]) -> SnapshotSignal | None:
    for page_type in page_types:
        if page_type in signals:
            return signals[page_type]
    return None


def group_seo_rows(rows: list[SeoSnapshot]) -> list[list[SeoSnapshot]]:
    """Newest-first rows grouped per crawl job, newest group first."""
    groups: OrderedDict[str, list[SeoSnapshot]] = OrderedDict()
    for row in rows:
        key = str(row.crawl_job_id or row.captured_at.isoformat())
        groups.setdefault(key, []).append(row)
    return list(groups.values())


def seo_pages(rows: list[SeoSnapshot]) -> list[SeoPage]:
    return [SeoPage.from_record(dict(row.page_record or {}), fallback_url=row.url) for row in rows]


def seo_record(rows: list[SeoSnapshot]) -> SeoSnapshotRecord:
    dimensions = next((row.seo_dimensions for row in rows if row.seo_dimensions), None)
    return SeoSnapshotRecord(
        captured_at=max(row.captured_at for row in rows),
        dimensions=SeoDimensions.from_dict(dimensions),
    )


class CompetitorIntelligenceService:
    """
    Builds analyzer inputs from the database and runs the analyzers.
    """

    def __init__(self, *, settings: CrawlSettings | None = None) -> None:
        self._settings = settings or get_crawl_settings()

    # ------------------------------------------------------------------
    # loading
    # ------------------------------------------------------------------

    def _competitor(self, db: Session, competitor_id: uuid.UUID) -> Competitor:
        competitor = CompetitorRepository(db).get(competitor_id)
        if competitor is None:
            raise CompetitorNotFoundError(f"Competitor {competitor_id} not found.")
        return competitor

    def load_context(
        self,
        *,
        db: Session,
        competitor_id: uuid.UUID,
        now: datetime | None = None,
    ) -> CompetitorSignalContext:
        now = now or datetime.now(timezone.utc)
        snapshots = SnapshotRepository(db).latest_for_competitor(
            competitor_id=competitor_id,
            limit=self._settings.snapshot_history_limit,
        )
        latest = latest_by_page_type(snapshots)
        previous = previous_by_page_type(snapshots)
        about = find_about_page(snapshots)

        changes = ChangeRepository(db).list_since(competitor_id=competitor_id, since=now - 2 * CHANGE_WINDOW)
        recent_cutoff = now - CHANGE_WINDOW
        recent = [change for change in changes if change.created_at >= recent_cutoff]
        prior = [change for change in changes if change.created_at < recent_cutoff]

        insights = InsightRepository(db).list_by_type(
            competitor_id=competitor_id,
            insight_type=InsightType.WEBPAGE_SIGNAL,
            limit=WEBPAGE_SIGNAL_LIMIT,
        )
        pages = PageRepository(db).list_for_competitor(competitor_id)

        return CompetitorSignalContext(
            competitor_id=competitor_id,
            tracked_page_types=sorted({page.page_type for page in pages if page.page_type}),
            latest={page_type: snapshot_signal(row) for page_type, row in latest.items()},
            previous={page_type: snapshot_signal(row) for page_type, row in previous.items()},
            about_page=snapshot_signal(about) if about is not None else None,
            changes_last_30d=len(recent),
            changes_prior_30d=len(prior),
            strategic_change_recent=any(change.impact_level == ImpactLevel.STRATEGIC for change in recent),
            strategic_change_prior=any(change.impact_level == ImpactLevel.STRATEGIC for change in prior),
            webpage_signal_texts=[insight.insight_text for insight in insights],
            latest_captured_at=max((row.captured_at for row in latest.values()), default=None),
            previous_captured_at=max((row.captured_at for row in previous.values()), default=None),
        )

    # ------------------------------------------------------------------
    # intelligence report
    # ------------------------------------------------------------------

    def intelligence_report(self, *, db: Session, competitor_id: uuid.UUID) -> IntelligenceReport:
        self._competitor(db, competitor_id)
        context = self.load_context(db=db, competitor_id=competitor_id)
        raw = build_raw_signals(
            competitor_id=str(competitor_id),
            tracked_page_types=context.tracked_page_types,
            changes_last_30d_count=context.changes_last_30d,
            latest_by_page_type=context.latest,
            webpage_signal_insights=context.webpage_signal_texts,
        )
        return run_intelligence_engine(raw)

    # ------------------------------------------------------------------
    # baseline
    # ------------------------------------------------------------------

    @staticmethod
    def _baseline_input(
        competitor_id: uuid.UUID,
        context: CompetitorSignalContext,
        *,
        previous: bool = False,
    ) -> BaselineInput:
        signals = context.previous if previous else context.latest
        homepage = signals.get(PageType.HOMEPAGE)
        return BaselineInput(
            competitor_id=str(competitor_id),
            homepage=homepage,
            about_page=context.about_page,
            services_page=first_present(signals, SERVICE_PAGE_TYPES),
            nav_snapshot=signals.get(PageType.NAVIGATION) or homepage,
            case_studies_page=signals.get(PageType.CASE_STUDIES_OR_CUSTOMERS),
        )

    def baseline_profile(self, *, db: Session, competitor_id: uuid.UUID) -> BaselineResult:
        self._competitor(db, competitor_id)
        context = self.load_context(db=db, competitor_id=competitor_id)
        return run_baseline_profile(self._baseline_input(competitor_id, context))

    # ------------------------------------------------------------------
    # strategic model
    # ------------------------------------------------------------------

    def _strategic_signals(
        self,
        competitor_id: uuid.UUID,
        context: CompetitorSignalContext,
        *,
        previous: bool = False,
    ) -> StrategicRawSignals:
        signals = context.previous if previous else context.latest
        services_page = first_present(signals, SERVICE_PAGE_TYPES)
        baseline = run_baseline_profile(self._baseline_input(competitor_id, context, previous=previous))
        return build_strategic_signals(
            competitor_id=str(competitor_id),
            services=ServiceSnapshotSignal.from_structured(services_page.structured_content) if services_page else None,
            pricing_page=signals.get(PageType.PRICING),
            trust=baseline.profile.trust_profile,
            recent_change_count_30d=context.changes_prior_30d if previous else context.changes_last_30d,
            structural_shift_detected=context.strategic_change_prior if previous else context.strategic_change_recent,
        )

    def _peer_dimensions(self, db: Session, competitor_id: uuid.UUID) -> list[StrategicDimensions]:
        peers: list[StrategicDimensions] = []
        for competitor in CompetitorRepository(db).list_active():
            if competitor.id == competitor_id:
                continue
            context = self.load_context(db=db, competitor_id=competitor.id)
            if not context.latest:
                continue
            raw = self._strategic_signals(competitor.id, context)
            peers.append(compute_strategic_dimensions(raw).dimensions)
        return peers

    def strategic_view(self, *, db: Session, competitor_id: uuid.UUID) -> StrategicView:
        self._competitor(db, competitor_id)
        now = datetime.now(timezone.utc)
        context = self.load_context(db=db, competitor_id=competitor_id, now=now)

        raw = self._strategic_signals(competitor_id, context)
        trajectory: list[TrajectorySnapshot] = []
        if context.previous_captured_at is not None and context.previous != context.latest:
            previous_raw = self._strategic_signals(competitor_id, context, previous=True)
            trajectory.append(
                TrajectorySnapshot(
                    captured_at=context.previous_captured_at,
                    dimensions=compute_strategic_dimensions(previous_raw).dimensions,
                )
            )
        trajectory.append(
            TrajectorySnapshot(
                captured_at=context.latest_captured_at or now,
                dimensions=compute_strategic_dimensions(raw).dimensions,
            )
        )

        model = run_strategic_model(
            raw,
            peer_dimensions=self._peer_dimensions(db, competitor_id),
            trajectory_snapshots=trajectory,
            now=now,
        )
        snapshot = build_competitive_snapshot(
            competitor_id=str(competitor_id),
            dimensions=model.dimensions_result.dimensions,
            overlapping_high_dimensions=model.pressure.overlapping_high_dimensions,
            trajectory=model.trajectory,
        )
        return StrategicView(model=model, snapshot=snapshot)

    # ------------------------------------------------------------------
    # SEO
    # ------------------------------------------------------------------

    def seo_view(self, *, db: Session, competitor_id: uuid.UUID) -> SeoView:
        competitor = self._competitor(db, competitor_id)
        repository = SeoSnapshotRepository(db)

        groups = group_seo_rows(repository.list_for_competitor(competitor_id=competitor_id))
        pages = seo_pages(groups[0]) if groups else []
        history = [seo_record(group) for group in groups]

        target_pages: list[SeoPage] = []
        peer_summaries: list[CompetitorSeoSummary] = []
        for peer in CompetitorRepository(db).list_active():
            if peer.id == competitor_id:
                continue
            peer_groups = group_seo_rows(repository.list_for_competitor(competitor_id=peer.id))
            if not peer_groups:
                continue
            target_pages.extend(seo_pages(peer_groups[0]))
            peer_summaries.append(
                CompetitorSeoSummary(competitor_id=peer.name, dimensions=seo_record(peer_groups[0]).dimensions)
            )

        intelligence = build_seo_intelligence(
            competitor_id=str(competitor_id),
            pages=pages,
            target_pages=target_pages,
            previous_snapshots=history,
            cache=KeywordProfileCache(),
        )
        comparison = compare_seo_across_competitors(
            [CompetitorSeoSummary(competitor_id=competitor.name, dimensions=intelligence.dimensions), *peer_summaries]
        )
        return SeoView(intelligence=intelligence, comparison=comparison, page_count=len(pages))


@lru_cache(maxsize=1)
def get_intelligence_service() -> CompetitorIntelligenceService:
    """
    Build and cache the intelligence read service.
    """

    return CompetitorIntelligenceService()
