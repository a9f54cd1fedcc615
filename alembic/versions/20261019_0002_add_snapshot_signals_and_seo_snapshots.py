"""add extracted signal columns to snapshots; create seo_snapshots

Revision ID: 20261019_0002
Revises: 20261019_0001
Create Date: 2026-10-19 09:30:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "20261019_0002"
down_revision = "20261019_0001"
branch_labels = None
depends_on = None

_JSONB_COLUMNS = (
    "h2_headings",
    "h3_headings",
    "list_items",
    "nav_labels",
    "nav_items",
    "footer_links",
    "structured_content",
)
_TEXT_COLUMNS = (
    "title",
    "h1_text",
    "primary_headline",
    "primary_cta_text",
    "secondary_cta_text",
)


def upgrade() -> None:
    op.add_column("snapshots", sa.Column("http_status", sa.Integer(), nullable=True))
    op.add_column("snapshots", sa.Column("page_type", sa.String(length=64), nullable=True))
    for name in _TEXT_COLUMNS:
        op.add_column("snapshots", sa.Column(name, sa.Text(), nullable=True))
    for name in _JSONB_COLUMNS:
        op.add_column("snapshots", sa.Column(name, postgresql.JSONB(astext_type=sa.Text()), nullable=True))

    op.create_table(
        "seo_snapshots",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("competitor_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("crawl_job_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("url", sa.Text(), nullable=False),
        sa.Column("page_record", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("seo_dimensions", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("topic_clusters", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("captured_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(
            ["competitor_id"],
            ["competitors.id"],
            name="fk_seo_snapshots_competitor_id_competitors",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["crawl_job_id"],
            ["crawl_jobs.id"],
            name="fk_seo_snapshots_crawl_job_id_crawl_jobs",
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_seo_snapshots"),
    )
    op.create_index(
        "ix_seo_snapshots_competitor_captured_at",
        "seo_snapshots",
        ["competitor_id", "captured_at"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_seo_snapshots_competitor_captured_at", table_name="seo_snapshots")
    op.drop_table("seo_snapshots")
    for name in reversed(_JSONB_COLUMNS):
        op.drop_column("snapshots", name)
    for name in reversed(_TEXT_COLUMNS):
        op.drop_column("snapshots", name)
    op.drop_column("snapshots", "page_type")
    op.drop_column("snapshots", "http_status")
