"""
Environment loader for crawl settings.
"""

from __future__ import annotations

import os
from functools import lru_cache

from db.config import load_env_files

from app.scraping.config.models import DEFAULT_USER_AGENTS, CrawlSettings

# robots.txt fetches never get less than this, whatever the env says.
MIN_ROBOTS_TIMEOUT_SECONDS = 1.5


def _get_bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    stripped = raw.strip()
    return stripped if stripped else default


def _get_user_agents_env(name: str) -> tuple[str, ...]:
    raw = os.getenv(name)
    if raw is None:
        return DEFAULT_USER_AGENTS
    agents = tuple(item.strip() for item in raw.split("|") if item.strip())
    return agents or DEFAULT_USER_AGENTS


@lru_cache(maxsize=1)
def get_crawl_settings() -> CrawlSettings:
    """
    Return cached crawl settings from environment variables.
    """

    load_env_files()
    return CrawlSettings(
        max_pages=max(1, _get_int_env("CRAWL_MAX_PAGES", 8)),
        max_seo_content_pages=max(0, _get_int_env("CRAWL_MAX_SEO_CONTENT_PAGES", 3)),
        navigation_timeout_ms=max(1_000, _get_int_env("CRAWL_NAVIGATION_TIMEOUT_MS", 45_000)),
        network_idle_timeout_ms=max(0, _get_int_env("CRAWL_NETWORK_IDLE_TIMEOUT_MS", 15_000)),
        retry_count=max(0, _get_int_env("CRAWL_RETRY_COUNT", 2)),
        respect_robots=_get_bool_env("CRAWL_RESPECT_ROBOTS", True),
        headless=_get_bool_env("CRAWL_HEADLESS", True),
        robots_timeout_seconds=max(
            MIN_ROBOTS_TIMEOUT_SECONDS,
            _get_float_env("CRAWL_ROBOTS_TIMEOUT_SECONDS", 5.0),
        ),
        user_agents=_get_user_agents_env("CRAWL_USER_AGENTS"),
        stale_job_minutes=max(1, _get_int_env("CRAWL_STALE_JOB_MINUTES", 5)),
        screenshot_dir=_get_str_env("CRAWL_SCREENSHOT_DIR", "data/screenshots"),
        screenshot_public_base_url=_get_str_env("CRAWL_SCREENSHOT_PUBLIC_BASE_URL", "/screenshots"),
        events_enabled=_get_bool_env("CRAWL_EVENTS_ENABLED", True),
        insight_dedupe_days=max(1, _get_int_env("CRAWL_INSIGHT_DEDUPE_DAYS", 7)),
        snapshot_history_limit=max(1, _get_int_env("CRAWL_SNAPSHOT_HISTORY_LIMIT", 60)),
    )
