"""
app/config.py

Application-level configuration helpers for the API process and the
crawl worker.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from db.config import load_env_files


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_bool_env(name: str, default: bool) -> bool:
    """
    Read a boolean from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


@dataclass(frozen=True)
class AppSettings:
    """
    Top-level API process settings.
    """

    title: str = "Competitor Signals API"
    log_level: str = "INFO"
    check_schema_on_startup: bool = True


@dataclass(frozen=True)
class WorkerSettings:
    """
    Settings for the background crawl worker.
    """

    scheduler_enabled: bool = True
    interval_minutes: int = 5
    max_jobs_per_tick: int = 1
    misfire_grace_seconds: int = 60


@lru_cache(maxsize=1)
def get_app_settings() -> AppSettings:
    """
    Return cached application settings.
    """

    return AppSettings(
        title=_get_str_env("APP_TITLE", "Competitor Signals API"),
        log_level=_get_str_env("LOG_LEVEL", "INFO").upper(),
        check_schema_on_startup=_get_bool_env("APP_CHECK_SCHEMA", True),
    )


@lru_cache(maxsize=1)
def get_worker_settings() -> WorkerSettings:
    """
    Return cached crawl worker settings from environment variables.
    """

    return WorkerSettings(
        scheduler_enabled=_get_bool_env("CRAWL_WORKER_ENABLED", True),
        interval_minutes=max(1, _get_int_env("CRAWL_WORKER_INTERVAL_MINUTES", 5)),
        max_jobs_per_tick=max(1, _get_int_env("CRAWL_WORKER_MAX_JOBS_PER_TICK", 1)),
        misfire_grace_seconds=max(1, _get_int_env("CRAWL_WORKER_MISFIRE_GRACE_SECONDS", 60)),
    )
