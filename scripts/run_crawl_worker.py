"""
Process pending crawl jobs from the CLI, one worker tick at a time.
"""

from __future__ import annotations

import argparse
import logging

from app.config import WorkerSettings, get_worker_settings
from app.scheduler.jobs import run_crawl_worker


def main() -> int:
    parser = argparse.ArgumentParser(description="Process pending competitor crawl jobs.")
    parser.add_argument(
        "--max-jobs",
        dest="max_jobs",
        type=int,
        default=1,
        help="Maximum number of pending jobs to run (default 1).",
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
    defaults = get_worker_settings()
    settings = WorkerSettings(
        scheduler_enabled=defaults.scheduler_enabled,
        interval_minutes=defaults.interval_minutes,
        max_jobs_per_tick=max(1, args.max_jobs),
        misfire_grace_seconds=defaults.misfire_grace_seconds,
    )
    processed = run_crawl_worker(settings=settings)
    print(f"processed={processed}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
