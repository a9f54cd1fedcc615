"""
app/domain package marker.
"""

from app.domain.crawl import (
    ChangeWrite,
    CrawlSummary,
    InsightWrite,
    SeoSnapshotWrite,
    SnapshotWrite,
    StoredSnapshot,
)

__all__ = [
    "ChangeWrite",
    "CrawlSummary",
    "InsightWrite",
    "SeoSnapshotWrite",
    "SnapshotWrite",
    "StoredSnapshot",
]
