"""
Crawl configuration models.
"""

from __future__ import annotations

from dataclasses import dataclass, field

DEFAULT_USER_AGENTS: tuple[str, ...] = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 14_7_0) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/130.0.0.0 Safari/537.36",
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Firefox/132.0",
)


@dataclass(frozen=True)
class CrawlSettings:
    """
    Runtime settings for competitor crawling.
    """

    max_pages: int = 8
    max_seo_content_pages: int = 3
    navigation_timeout_ms: int = 45_000
    network_idle_timeout_ms: int = 15_000
    retry_count: int = 2
    respect_robots: bool = True
    headless: bool = True
    robots_timeout_seconds: float = 5.0
    user_agents: tuple[str, ...] = field(default=DEFAULT_USER_AGENTS)
    stale_job_minutes: int = 5
    screenshot_dir: str = "data/screenshots"
    screenshot_public_base_url: str = "/screenshots"
    events_enabled: bool = True
    insight_dedupe_days: int = 7
    snapshot_history_limit: int = 60
