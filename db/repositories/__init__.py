"""
Repository layer exports.
"""

from db.repositories.change_repository import ChangeRepository
from db.repositories.competitor_repository import CompetitorRepository
from db.repositories.crawl_job_repository import STALE_JOB_ERROR, CrawlJobRepository
from db.repositories.errors import (
    CompetitorNotFoundError,
    CrawlJobNotFoundError,
    CrawlRepositoryError,
    SnapshotPersistenceError,
)
from db.repositories.insight_repository import InsightRepository
from db.repositories.page_repository import PageRepository
from db.repositories.seo_snapshot_repository import SeoSnapshotRepository
from db.repositories.snapshot_repository import SnapshotRepository

__all__ = [
    "ChangeRepository",
    "CompetitorNotFoundError",
    "CompetitorRepository",
    "CrawlJobNotFoundError",
    "CrawlJobRepository",
    "CrawlRepositoryError",
    "InsightRepository",
    "PageRepository",
    "STALE_JOB_ERROR",
    "SeoSnapshotRepository",
    "SnapshotPersistenceError",
    "SnapshotRepository",
]
