"""
Fetch execution with retries, user-agent rotation and robots handling.
"""

from __future__ import annotations

import logging
from typing import Sequence

from app.scraping.config import CrawlSettings
from app.scraping.errors import CrawlError, CrawlErrorCode, to_crawl_error
from app.scraping.fetcher import PageFetcher
from app.scraping.logging_utils import log_event
from app.scraping.robots import RobotsPolicyManager
from app.scraping.taxonomy import PageType, page_type_from_content
from app.scraping.types import CrawlTarget, FetchFailure, FetchResult, RobotsSkip

logger = logging.getLogger(__name__)


class FetchExecutor:
    """
    Runs a `PageFetcher` against crawl targets.

    Attempt `n` uses `user_agents[n % len(user_agents)]`; the fetcher opens
    a fresh browser context per attempt.
    """

    def __init__(
        self,
        fetcher: PageFetcher,
        *,
        settings: CrawlSettings,
        robots: RobotsPolicyManager | None = None,
    ) -> None:
        if not settings.user_agents:
            raise ValueError("At least one user agent is required.")
        self._fetcher = fetcher
        self._settings = settings
        self._user_agents: Sequence[str] = settings.user_agents
        self._robots = robots

    def is_blocked_by_robots(self, target: CrawlTarget, *, pages_fetched: int) -> bool:
        # The homepage is always attempted.
        if not self._settings.respect_robots or self._robots is None:
            return False
        if target.page_type == PageType.HOMEPAGE:
            return False
        user_agent = self._user_agents[pages_fetched % len(self._user_agents)]
        return not self._robots.can_fetch(url=target.url, user_agent=user_agent)

    def fetch_page(
        self,
        target: CrawlTarget,
        *,
        pages_fetched: int = 0,
    ) -> FetchResult | FetchFailure | RobotsSkip:
        if self.is_blocked_by_robots(target, pages_fetched=pages_fetched):
            skip = RobotsSkip(url=target.url, page_type=target.page_type)
            log_event(logger, logging.INFO, "page_skipped_robots", url=target.url, page_type=target.page_type)
            return skip

        total_attempts = max(0, self._settings.retry_count) + 1
        last_error: CrawlError | None = None

        for attempt in range(total_attempts):
            user_agent = self._user_agents[attempt % len(self._user_agents)]
            try:
                rendered = self._fetcher.fetch(target.url, user_agent=user_agent)
            except Exception as exc:
                last_error = to_crawl_error(
                    exc,
                    context={"url": target.url, "page_type": target.page_type, "attempt": attempt + 1},
                )
                log_event(
                    logger,
                    logging.WARNING,
                    "page_fetch_attempt_failed",
                    url=target.url,
                    page_type=target.page_type,
                    attempt=attempt + 1,
                    code=last_error.code.value,
                    error=last_error.message,
                )
                continue

            inferred = page_type_from_content(rendered.html, target.url)
            page_type = target.page_type if inferred == PageType.HOMEPAGE else inferred
            return FetchResult(
                url=target.url,
                requested_page_type=target.page_type,
                page_type=page_type,
                html=rendered.html,
                title=rendered.title,
                http_status=rendered.http_status,
                screenshot=rendered.screenshot,
                user_agent=user_agent,
                attempts=attempt + 1,
            )

        last_message = last_error.message if last_error is not None else "unknown error"
        error = CrawlError(
            last_error.code if last_error is not None else CrawlErrorCode.UNKNOWN,
            f"Failed to crawl {target.page_type} ({target.url}) after {total_attempts} attempt(s): {last_message}",
            retryable=last_error.retryable if last_error is not None else False,
            context={"url": target.url, "page_type": target.page_type},
        )
        return FetchFailure(url=target.url, page_type=target.page_type, error=error, attempts=total_attempts)
