"""
Model package exports.

Import all SQLAlchemy models here so metadata registration and Alembic
autogeneration work without extra imports.
"""

from db.models.change import Change
from db.models.competitor import Competitor
from db.models.crawl_job import CrawlJob, CrawlJobSource, CrawlJobStatus
from db.models.insight import Insight, InsightType
from db.models.page import Page
from db.models.seo_snapshot import SeoSnapshot
from db.models.snapshot import MINIMAL_SNAPSHOT_COLUMNS, Snapshot

__all__ = [
    "Change",
    "Competitor",
    "CrawlJob",
    "CrawlJobSource",
    "CrawlJobStatus",
    "Insight",
    "InsightType",
    "MINIMAL_SNAPSHOT_COLUMNS",
    "Page",
    "SeoSnapshot",
    "Snapshot",
]
