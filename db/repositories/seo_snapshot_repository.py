"""
Repository for stored SEO page records and dimension history.
"""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.domain.crawl import SeoSnapshotWrite
from db.models.seo_snapshot import SeoSnapshot


class SeoSnapshotRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def insert(self, row: SeoSnapshotWrite) -> uuid.UUID:
        model = SeoSnapshot(
            id=uuid.uuid4(),
            competitor_id=row.competitor_id,
            crawl_job_id=row.crawl_job_id,
            url=row.url,
            page_record=row.page_record,
        )
        self._session.add(model)
        self._session.flush()
        return model.id

    def record_dimensions(
        self,
        *,
        snapshot_id: uuid.UUID,
        seo_dimensions: dict[str, Any],
        topic_clusters: list[dict[str, Any]],
    ) -> None:
        model = self._session.get(SeoSnapshot, snapshot_id)
        if model is None:
            return
        model.seo_dimensions = seo_dimensions
        model.topic_clusters = topic_clusters

    def list_for_competitor(self, *, competitor_id: uuid.UUID, limit: int = 200) -> list[SeoSnapshot]:
        stmt = (
            select(SeoSnapshot)
            .where(SeoSnapshot.competitor_id == competitor_id)
            .order_by(SeoSnapshot.captured_at.desc())
            .limit(max(1, limit))
        )
        return list(self._session.scalars(stmt).all())
