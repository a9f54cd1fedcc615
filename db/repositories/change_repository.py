"""
Repository for detected change rows.
"""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from dataclasses import asdict
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.domain.crawl import ChangeWrite
from db.models.change import Change


class ChangeRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def insert_changes(self, rows: Sequence[ChangeWrite]) -> list[uuid.UUID]:
        if not rows:
            return []
        models = [Change(id=uuid.uuid4(), **asdict(row)) for row in rows]
        self._session.add_all(models)
        self._session.flush()
        return [model.id for model in models]

    def count_since(self, *, competitor_id: uuid.UUID, since: datetime) -> int:
        stmt = select(func.count(Change.id)).where(
            Change.competitor_id == competitor_id,
            Change.created_at >= since,
        )
        return int(self._session.execute(stmt).scalar_one())

    def list_since(
        self,
        *,
        competitor_id: uuid.UUID,
        since: datetime,
        limit: int = 500,
    ) -> list[Change]:
        stmt = (
            select(Change)
            .where(Change.competitor_id == competitor_id, Change.created_at >= since)
            .order_by(Change.created_at.desc())
            .limit(max(1, limit))
        )
        return list(self._session.scalars(stmt).all())
