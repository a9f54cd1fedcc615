"""
Repository for versioned, append-only page snapshots.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import asdict, replace
from typing import Any

from sqlalchemy import func, insert, select
from sqlalchemy.exc import ProgrammingError
from sqlalchemy.orm import Session

from app.domain.crawl import SnapshotWrite, StoredSnapshot
from db.models.page import Page
from db.models.snapshot import MINIMAL_SNAPSHOT_COLUMNS, Snapshot
from db.repositories.errors import SnapshotPersistenceError

logger = logging.getLogger(__name__)

_MISSING_COLUMN_MARKERS = ("undefinedcolumn", "does not exist", "no such column", "unknown column")


def _is_missing_column_error(exc: Exception) -> bool:
    message = f"{type(getattr(exc, 'orig', exc)).__name__} {exc}".lower()
    return "column" in message and any(marker in message for marker in _MISSING_COLUMN_MARKERS)


def to_stored_snapshot(row: Snapshot, *, url: str | None = None) -> StoredSnapshot:
    return StoredSnapshot(
        id=row.id,
        page_id=row.page_id,
        version_number=row.version_number,
        html=row.html,
        captured_at=row.captured_at,
        page_type=row.page_type,
        url=url,
        http_status=row.http_status,
        title=row.title,
        h1_text=row.h1_text,
        h2_headings=list(row.h2_headings or []),
        h3_headings=list(row.h3_headings or []),
        list_items=list(row.list_items or []),
        nav_labels=list(row.nav_labels or []),
        primary_headline=row.primary_headline,
        primary_cta_text=row.primary_cta_text,
        secondary_cta_text=row.secondary_cta_text,
        nav_items=list(row.nav_items or []),
        structured_content=dict(row.structured_content or {}),
    )


class SnapshotRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def next_version(self, *, page_id: uuid.UUID) -> int:
        """
        Allocate the next version for a page.

        The page row is locked FOR UPDATE first so concurrent jobs capturing
        the same page serialize here until the caller's transaction ends.
        """

        self._session.execute(
            select(Page.id).where(Page.id == page_id).with_for_update()
        )
        current = self._session.execute(
            select(func.max(Snapshot.version_number)).where(Snapshot.page_id == page_id)
        ).scalar_one_or_none()
        return int(current or 0) + 1

    def insert_snapshot(self, record: SnapshotWrite) -> tuple[uuid.UUID, int]:
        """
        Insert a snapshot with the next version; fall back to the minimal
        column set when the database schema lags behind the model.
        """

        version = self.next_version(page_id=record.page_id)
        snapshot_id = uuid.uuid4()
        payload: dict[str, Any] = {
            "id": snapshot_id,
            "version_number": version,
            **asdict(record),
        }

        savepoint = self._session.begin_nested()
        try:
            self._session.execute(insert(Snapshot).values(**payload))
            savepoint.commit()
            return snapshot_id, version
        except ProgrammingError as exc:
            savepoint.rollback()
            if not _is_missing_column_error(exc):
                raise
            logger.warning(
                "Snapshot insert hit missing column; retrying with minimal payload page_id=%s: %s",
                record.page_id,
                exc,
            )

        minimal = {key: payload[key] for key in MINIMAL_SNAPSHOT_COLUMNS if key in payload}
        try:
            self._session.execute(insert(Snapshot).values(**minimal))
        except ProgrammingError as exc:
            raise SnapshotPersistenceError(
                f"Snapshot insert failed for page {record.page_id}: {exc}"
            ) from exc
        return snapshot_id, version

    def get_previous(self, *, page_id: uuid.UUID, before_version: int) -> StoredSnapshot | None:
        stmt = (
            select(Snapshot, Page.url)
            .join(Page, Page.id == Snapshot.page_id)
            .where(Snapshot.page_id == page_id, Snapshot.version_number < before_version)
            .order_by(Snapshot.version_number.desc())
            .limit(1)
        )
        row = self._session.execute(stmt).first()
        if row is None:
            return None
        return to_stored_snapshot(row[0], url=row[1])

    def list_versions(self, *, page_id: uuid.UUID) -> list[int]:
        stmt = (
            select(Snapshot.version_number)
            .where(Snapshot.page_id == page_id)
            .order_by(Snapshot.version_number.asc())
        )
        return list(self._session.scalars(stmt).all())

    def latest_for_competitor(self, *, competitor_id: uuid.UUID, limit: int = 60) -> list[StoredSnapshot]:
        """
        Most recent snapshots across the competitor's pages, newest first.
        """

        stmt = (
            select(Snapshot, Page.url, Page.page_type)
            .join(Page, Page.id == Snapshot.page_id)
            .where(Page.competitor_id == competitor_id)
            .order_by(Snapshot.captured_at.desc(), Snapshot.version_number.desc())
            .limit(max(1, limit))
        )
        snapshots: list[StoredSnapshot] = []
        for snapshot, url, page_type in self._session.execute(stmt).all():
            stored = to_stored_snapshot(snapshot, url=url)
            if stored.page_type is None:
                stored = replace(stored, page_type=page_type)
            snapshots.append(stored)
        return snapshots
