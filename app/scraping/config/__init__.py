"""
Config helpers for competitor crawling.
"""

from app.scraping.config.loader import get_crawl_settings
from app.scraping.config.models import DEFAULT_USER_AGENTS, CrawlSettings

__all__ = [
    "CrawlSettings",
    "DEFAULT_USER_AGENTS",
    "get_crawl_settings",
]
