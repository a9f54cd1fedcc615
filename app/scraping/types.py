"""
Shared crawl runtime data models.
"""

from __future__ import annotations

from dataclasses import dataclass

from app.scraping.errors import CrawlError


@dataclass(frozen=True)
class CrawlTarget:
    url: str
    page_type: str


@dataclass(frozen=True)
class FetchResult:
    """
    Successful render of one target.

    `page_type` is the requested type unless content inference found a more
    specific one.
    """

    url: str
    requested_page_type: str
    page_type: str
    html: str
    title: str | None
    http_status: int | None
    screenshot: bytes | None
    user_agent: str
    attempts: int


@dataclass(frozen=True)
class FetchFailure:
    url: str
    page_type: str
    error: CrawlError
    attempts: int

    @property
    def message(self) -> str:
        return self.error.message


@dataclass(frozen=True)
class RobotsSkip:
    """
    Target not fetched because robots.txt disallows it. Informational only.
    """

    url: str
    page_type: str

    @property
    def reason(self) -> str:
        return f"Skipping {self.url}: blocked by robots.txt"
