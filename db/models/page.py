"""
db/models/page.py

A tracked URL within a competitor's site.
"""

from __future__ import annotations

import uuid

from sqlalchemy import ForeignKey, Index, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TimestampMixin


class Page(Base, TimestampMixin):
    __tablename__ = "pages"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    competitor_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("competitors.id", ondelete="CASCADE"),
        nullable=False,
    )
    url: Mapped[str] = mapped_column(Text, nullable=False)
    page_type: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        comment="Taxonomy key; may be re-classified on later crawls",
    )

    __table_args__ = (
        UniqueConstraint("competitor_id", "url", name="uq_pages_competitor_url"),
        Index("ix_pages_competitor_page_type", "competitor_id", "page_type"),
    )
