"""
Search/SEO intelligence over captured content pages.
"""

from seo.keywords import is_seo_content_path
from seo.onsite import KeywordProfileCache
from seo.snapshot import build_seo_intelligence
from seo.types import SeoDimensions, SeoIntelligence, SeoPage, SeoSnapshotRecord

__all__ = [
    "KeywordProfileCache",
    "SeoDimensions",
    "SeoIntelligence",
    "SeoPage",
    "SeoSnapshotRecord",
    "build_seo_intelligence",
    "is_seo_content_path",
]
