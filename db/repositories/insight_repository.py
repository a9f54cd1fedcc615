"""
Repository for competitor insight rows.
"""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.domain.crawl import InsightWrite
from db.models.insight import Insight


class InsightRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def insert_insights(self, rows: Sequence[InsightWrite]) -> int:
        if not rows:
            return 0
        self._session.add_all(
            [
                Insight(
                    id=uuid.uuid4(),
                    competitor_id=row.competitor_id,
                    page_type=row.page_type,
                    insight_type=row.insight_type,
                    insight_text=row.insight_text,
                    confidence=row.confidence,
                    related_change_ids=list(row.related_change_ids) or None,
                )
                for row in rows
            ]
        )
        self._session.flush()
        return len(rows)

    def exists_since(
        self,
        *,
        competitor_id: uuid.UUID,
        insight_text: str,
        since: datetime,
        page_type: str | None = None,
        insight_type: str | None = None,
    ) -> bool:
        stmt = select(Insight.id).where(
            Insight.competitor_id == competitor_id,
            Insight.insight_text == insight_text,
            Insight.created_at >= since,
        )
        if page_type is not None:
            stmt = stmt.where(Insight.page_type == page_type)
        if insight_type is not None:
            stmt = stmt.where(Insight.insight_type == insight_type)
        stmt = stmt.limit(1)
        return self._session.scalars(stmt).first() is not None

    def list_by_type(
        self,
        *,
        competitor_id: uuid.UUID,
        insight_type: str,
        limit: int = 50,
    ) -> list[Insight]:
        stmt = (
            select(Insight)
            .where(Insight.competitor_id == competitor_id, Insight.insight_type == insight_type)
            .order_by(Insight.created_at.desc())
            .limit(max(1, limit))
        )
        return list(self._session.scalars(stmt).all())
