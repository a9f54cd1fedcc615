"""
change_detection/compare.py

Compares a freshly persisted snapshot with the previous version of the
same page, stores the classified change rows and the insights derived
from the PM-signal diff.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field

from app.domain.crawl import ChangeWrite, StoredSnapshot
from app.scraping.logging_utils import log_change_detection_error, log_event
from app.scraping.storage.base import SnapshotStore
from change_detection.detector import detect_changes
from change_detection.impact import assess_impact, interpret_change
from change_detection.insights import generate_change_insights, persist_insights
from change_detection.pm_signals import PmSignalDiff, PmSignalSnapshot, detect_pm_signal_changes
from change_detection.types import DetectedChange

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ComparisonOutcome:
    changes: list[DetectedChange] = field(default_factory=list)
    pm_diffs: list[PmSignalDiff] = field(default_factory=list)
    change_ids: list[uuid.UUID] = field(default_factory=list)
    impact_levels: list[str] = field(default_factory=list)
    insights_saved: int = 0

    @property
    def change_count(self) -> int:
        return len(self.change_ids)


def build_change_rows(
    *,
    competitor_id: uuid.UUID,
    page_id: uuid.UUID,
    before_snapshot_id: uuid.UUID,
    after_snapshot_id: uuid.UUID,
    changes: list[DetectedChange],
) -> list[ChangeWrite]:
    rows: list[ChangeWrite] = []
    for change in changes:
        impact = assess_impact(change)
        interpretation = interpret_change(change.category, impact)
        rows.append(
            ChangeWrite(
                competitor_id=competitor_id,
                page_id=page_id,
                before_snapshot_id=before_snapshot_id,
                after_snapshot_id=after_snapshot_id,
                page_url=change.page_url,
                page_type=change.page_type,
                change_type=change.change_type,
                category=change.category,
                impact_level=impact,
                summary=change.summary,
                details=change.details_payload(),
                strategic_interpretation=interpretation.strategic_interpretation,
                monitoring_action=interpretation.monitoring_action,
            )
        )
    return rows


def compare_snapshots(
    store: SnapshotStore,
    *,
    competitor_id: uuid.UUID,
    page_id: uuid.UUID,
    page_url: str,
    page_type: str,
    previous: StoredSnapshot,
    current_snapshot_id: uuid.UUID,
    current: PmSignalSnapshot,
) -> ComparisonOutcome:
    """
    A diff failure is logged and reported as "no changes"; the caller's
    crawl keeps going either way.
    """

    try:
        changes = detect_changes(
            before_html=previous.html,
            after_html=current.html,
            page_url=page_url,
            page_type=page_type,
        )
        pm_diffs = detect_pm_signal_changes(
            PmSignalSnapshot(
                page_type=page_type,
                html=previous.html,
                primary_headline=previous.primary_headline,
                primary_cta_text=previous.primary_cta_text,
                nav_items=list(previous.nav_items),
            ),
            current,
        )
    except Exception as exc:
        log_change_detection_error(
            logger,
            exc,
            page_url=page_url,
            page_type=page_type,
            before_snapshot_id=previous.id,
            after_snapshot_id=current_snapshot_id,
        )
        return ComparisonOutcome()

    rows = build_change_rows(
        competitor_id=competitor_id,
        page_id=page_id,
        before_snapshot_id=previous.id,
        after_snapshot_id=current_snapshot_id,
        changes=changes,
    )
    change_ids = store.save_changes(rows) if rows else []

    insights_saved = 0
    if pm_diffs:
        try:
            insight_rows = generate_change_insights(
                competitor_id=competitor_id,
                page_type=page_type,
                diffs=pm_diffs,
                related_change_ids=[str(change_id) for change_id in change_ids],
            )
            insights_saved = persist_insights(store, insight_rows)
        except Exception as exc:
            log_change_detection_error(
                logger,
                exc,
                page_url=page_url,
                page_type=page_type,
                stage="insights",
            )

    log_event(
        logger,
        logging.INFO,
        "snapshot_compared",
        page_url=page_url,
        page_type=page_type,
        changes=len(change_ids),
        pm_diffs=len(pm_diffs),
        insights=insights_saved,
    )
    return ComparisonOutcome(
        changes=changes,
        pm_diffs=pm_diffs,
        change_ids=list(change_ids),
        impact_levels=[row.impact_level for row in rows],
        insights_saved=insights_saved,
    )
