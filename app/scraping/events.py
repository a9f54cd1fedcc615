"""
Crawl event notifications.

Delivery is best effort: a failing emitter is logged and never fails the
crawl that produced the event.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

from app.scraping.logging_utils import log_event

logger = logging.getLogger(__name__)


class CrawlEventType:
    CRAWL_COMPLETED = "crawl_completed"
    HIGH_IMPACT_CHANGE = "high_impact_change"


class EventEmitter(ABC):
    @abstractmethod
    def emit(self, event_type: str, payload: dict[str, Any]) -> None:
        ...


class LoggingEventEmitter(EventEmitter):
    """
    Publishes events as structured log lines.
    """

    def emit(self, event_type: str, payload: dict[str, Any]) -> None:
        log_event(logger, logging.INFO, "crawl_event", event_type=event_type, **payload)


class NullEventEmitter(EventEmitter):
    def emit(self, event_type: str, payload: dict[str, Any]) -> None:
        return None


def emit_safely(emitter: EventEmitter, event_type: str, payload: dict[str, Any]) -> bool:
    try:
        emitter.emit(event_type, payload)
        return True
    except Exception as exc:
        log_event(
            logger,
            logging.WARNING,
            "event_emit_failed",
            event_type=event_type,
            error=str(exc),
            error_type=type(exc).__name__,
        )
        return False
