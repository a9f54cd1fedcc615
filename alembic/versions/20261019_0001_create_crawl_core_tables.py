"""create competitors, pages, crawl_jobs, snapshots, changes, insights

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 09:00:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "competitors",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("url", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("last_crawled_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_competitors"),
    )
    op.create_index("ix_competitors_is_active", "competitors", ["is_active"], unique=False)

    op.create_table(
        "pages",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("competitor_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("url", sa.Text(), nullable=False),
        sa.Column("page_type", sa.String(length=64), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["competitor_id"],
            ["competitors.id"],
            name="fk_pages_competitor_id_competitors",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_pages"),
        sa.UniqueConstraint("competitor_id", "url", name="uq_pages_competitor_url"),
    )
    op.create_index("ix_pages_competitor_page_type", "pages", ["competitor_id", "page_type"], unique=False)

    op.create_table(
        "crawl_jobs",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("competitor_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("status", sa.String(length=32), nullable=False),
        sa.Column("source", sa.String(length=32), nullable=False),
        sa.Column("result_payload", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["competitor_id"],
            ["competitors.id"],
            name="fk_crawl_jobs_competitor_id_competitors",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_crawl_jobs"),
    )
    op.create_index("ix_crawl_jobs_status", "crawl_jobs", ["status"], unique=False)
    op.create_index("ix_crawl_jobs_created_at", "crawl_jobs", ["created_at"], unique=False)
    op.create_index(
        "ix_crawl_jobs_competitor_status",
        "crawl_jobs",
        ["competitor_id", "status"],
        unique=False,
    )

    op.create_table(
        "snapshots",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("page_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("crawl_job_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("version_number", sa.Integer(), nullable=False),
        sa.Column("html", sa.Text(), nullable=False),
        sa.Column("html_hash", sa.String(length=64), nullable=False),
        sa.Column("screenshot_url", sa.Text(), nullable=True),
        sa.Column("captured_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(
            ["page_id"],
            ["pages.id"],
            name="fk_snapshots_page_id_pages",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["crawl_job_id"],
            ["crawl_jobs.id"],
            name="fk_snapshots_crawl_job_id_crawl_jobs",
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_snapshots"),
        sa.UniqueConstraint("page_id", "version_number", name="uq_snapshots_page_version"),
    )
    op.create_index("ix_snapshots_page_captured_at", "snapshots", ["page_id", "captured_at"], unique=False)
    op.create_index("ix_snapshots_crawl_job_id", "snapshots", ["crawl_job_id"], unique=False)

    op.create_table(
        "changes",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("competitor_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("page_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("before_snapshot_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("after_snapshot_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("page_url", sa.Text(), nullable=False),
        sa.Column("page_type", sa.String(length=64), nullable=False),
        sa.Column("change_type", sa.String(length=64), nullable=False),
        sa.Column("category", sa.String(length=64), nullable=False),
        sa.Column("impact_level", sa.String(length=32), nullable=False),
        sa.Column("summary", sa.Text(), nullable=False),
        sa.Column("details", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("strategic_interpretation", sa.Text(), nullable=True),
        sa.Column("monitoring_action", sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["competitor_id"],
            ["competitors.id"],
            name="fk_changes_competitor_id_competitors",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(["page_id"], ["pages.id"], name="fk_changes_page_id_pages", ondelete="CASCADE"),
        sa.ForeignKeyConstraint(
            ["before_snapshot_id"],
            ["snapshots.id"],
            name="fk_changes_before_snapshot_id_snapshots",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["after_snapshot_id"],
            ["snapshots.id"],
            name="fk_changes_after_snapshot_id_snapshots",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_changes"),
    )
    op.create_index(
        "ix_changes_competitor_created_at",
        "changes",
        ["competitor_id", "created_at"],
        unique=False,
    )
    op.create_index("ix_changes_page_id", "changes", ["page_id"], unique=False)
    op.create_index("ix_changes_category", "changes", ["category"], unique=False)

    op.create_table(
        "insights",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("competitor_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("page_type", sa.String(length=64), nullable=True),
        sa.Column("insight_type", sa.String(length=64), nullable=False),
        sa.Column("insight_text", sa.Text(), nullable=False),
        sa.Column("confidence", sa.String(length=16), nullable=False),
        sa.Column("related_change_ids", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["competitor_id"],
            ["competitors.id"],
            name="fk_insights_competitor_id_competitors",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_insights"),
    )
    op.create_index(
        "ix_insights_competitor_created_at",
        "insights",
        ["competitor_id", "created_at"],
        unique=False,
    )
    op.create_index("ix_insights_competitor_type", "insights", ["competitor_id", "insight_type"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_insights_competitor_type", table_name="insights")
    op.drop_index("ix_insights_competitor_created_at", table_name="insights")
    op.drop_table("insights")
    op.drop_index("ix_changes_category", table_name="changes")
    op.drop_index("ix_changes_page_id", table_name="changes")
    op.drop_index("ix_changes_competitor_created_at", table_name="changes")
    op.drop_table("changes")
    op.drop_index("ix_snapshots_crawl_job_id", table_name="snapshots")
    op.drop_index("ix_snapshots_page_captured_at", table_name="snapshots")
    op.drop_table("snapshots")
    op.drop_index("ix_crawl_jobs_competitor_status", table_name="crawl_jobs")
    op.drop_index("ix_crawl_jobs_created_at", table_name="crawl_jobs")
    op.drop_index("ix_crawl_jobs_status", table_name="crawl_jobs")
    op.drop_table("crawl_jobs")
    op.drop_index("ix_pages_competitor_page_type", table_name="pages")
    op.drop_table("pages")
    op.drop_index("ix_competitors_is_active", table_name="competitors")
    op.drop_table("competitors")
