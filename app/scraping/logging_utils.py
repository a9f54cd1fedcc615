"""
Structured logging helpers for crawl workflows.
"""

from __future__ import annotations

import json
import logging
from typing import Any


def log_event(
    logger: logging.Logger,
    level: int,
    event: str,
    **fields: Any,
) -> None:
    """
    Emit one structured log line as compact JSON.
    """

    payload = {"event": event, **fields}
    logger.log(level, json.dumps(payload, default=str, sort_keys=True))


def log_crawl_failure(logger: logging.Logger, error: Exception, **context: Any) -> None:
    log_event(
        logger,
        logging.ERROR,
        "crawl_failure",
        error=str(error),
        error_type=type(error).__name__,
        **context,
    )


def log_snapshot_failure(logger: logging.Logger, error: Exception, **context: Any) -> None:
    log_event(
        logger,
        logging.ERROR,
        "snapshot_failure",
        error=str(error),
        error_type=type(error).__name__,
        **context,
    )


def log_change_detection_error(logger: logging.Logger, error: Exception, **context: Any) -> None:
    log_event(
        logger,
        logging.WARNING,
        "change_detection_error",
        error=str(error),
        error_type=type(error).__name__,
        **context,
    )
