"""
db/models/snapshot.py

Immutable, versioned capture of one page rendering.

`version_number` is allocated per page under a row lock on the page, so
versions are gapless and strictly increasing per page lineage.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base

# Columns present since the first schema revision. Used for the reduced insert
# when later columns are missing from a drifted database.
MINIMAL_SNAPSHOT_COLUMNS: tuple[str, ...] = (
    "id",
    "page_id",
    "crawl_job_id",
    "version_number",
    "html",
    "html_hash",
    "screenshot_url",
    "captured_at",
)


class Snapshot(Base):
    __tablename__ = "snapshots"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    page_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("pages.id", ondelete="CASCADE"),
        nullable=False,
    )
    crawl_job_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("crawl_jobs.id", ondelete="SET NULL"),
        nullable=True,
    )
    version_number: Mapped[int] = mapped_column(Integer, nullable=False)
    html: Mapped[str] = mapped_column(Text, nullable=False)
    html_hash: Mapped[str] = mapped_column(String(64), nullable=False)
    screenshot_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    captured_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    http_status: Mapped[int | None] = mapped_column(Integer, nullable=True)
    title: Mapped[str | None] = mapped_column(Text, nullable=True)
    page_type: Mapped[str | None] = mapped_column(String(64), nullable=True)
    h1_text: Mapped[str | None] = mapped_column(Text, nullable=True)
    h2_headings: Mapped[list[str] | None] = mapped_column(JSONB, nullable=True)
    h3_headings: Mapped[list[str] | None] = mapped_column(JSONB, nullable=True)
    list_items: Mapped[list[str] | None] = mapped_column(JSONB, nullable=True)
    nav_labels: Mapped[list[str] | None] = mapped_column(JSONB, nullable=True)
    primary_headline: Mapped[str | None] = mapped_column(Text, nullable=True)
    primary_cta_text: Mapped[str | None] = mapped_column(Text, nullable=True)
    secondary_cta_text: Mapped[str | None] = mapped_column(Text, nullable=True)
    nav_items: Mapped[list[str] | None] = mapped_column(JSONB, nullable=True)
    footer_links: Mapped[list[dict[str, Any]] | None] = mapped_column(JSONB, nullable=True)
    structured_content: Mapped[dict[str, Any] | None] = mapped_column(
        JSONB,
        nullable=True,
        comment="Service snapshot, pricing tokens and search_seo record",
    )

    __table_args__ = (
        UniqueConstraint("page_id", "version_number", name="uq_snapshots_page_version"),
        Index("ix_snapshots_page_captured_at", "page_id", "captured_at"),
        Index("ix_snapshots_crawl_job_id", "crawl_job_id"),
    )
