"""
Repository for competitor lookups and crawl bookkeeping.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from db.models.competitor import Competitor


class CompetitorRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, competitor_id: uuid.UUID) -> Competitor | None:
        return self._session.get(Competitor, competitor_id)

    def list_active(self) -> list[Competitor]:
        stmt = (
            select(Competitor)
            .where(Competitor.is_active.is_(True), Competitor.url.isnot(None))
            .order_by(Competitor.name.asc())
        )
        return list(self._session.scalars(stmt).all())

    def mark_crawled(self, *, competitor_id: uuid.UUID, crawled_at: datetime) -> None:
        competitor = self.get(competitor_id)
        if competitor is not None:
            competitor.last_crawled_at = crawled_at
