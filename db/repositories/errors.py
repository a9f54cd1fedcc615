"""
Repository-layer exceptions for crawl persistence flows.
"""

from __future__ import annotations


class CrawlRepositoryError(Exception):
    """Base exception for crawl persistence failures."""


class CompetitorNotFoundError(CrawlRepositoryError):
    """Raised when a referenced competitor does not exist."""


class CrawlJobNotFoundError(CrawlRepositoryError):
    """Raised when a referenced crawl job does not exist."""


class SnapshotPersistenceError(CrawlRepositoryError):
    """Raised when neither the full nor the reduced snapshot insert succeeds."""
