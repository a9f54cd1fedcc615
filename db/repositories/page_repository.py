"""
Repository for tracked pages.
"""

from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.orm import Session

from db.models.page import Page


class PageRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def upsert_page(self, *, competitor_id: uuid.UUID, url: str, page_type: str) -> uuid.UUID:
        """
        Insert the page or re-classify the existing (competitor, url) row.
        """

        stmt = (
            insert(Page)
            .values(id=uuid.uuid4(), competitor_id=competitor_id, url=url, page_type=page_type)
            .on_conflict_do_update(
                constraint="uq_pages_competitor_url",
                set_={"page_type": page_type},
            )
            .returning(Page.id)
        )
        return self._session.execute(stmt).scalar_one()

    def get(self, page_id: uuid.UUID) -> Page | None:
        return self._session.get(Page, page_id)

    def list_for_competitor(self, competitor_id: uuid.UUID) -> list[Page]:
        stmt = select(Page).where(Page.competitor_id == competitor_id).order_by(Page.url.asc())
        return list(self._session.scalars(stmt).all())
