"""
Crawl error taxonomy.

Arbitrary exceptions raised while rendering, storing or diffing pages are
mapped onto a small set of codes so jobs can report them consistently.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class CrawlErrorCode(str, Enum):
    INVALID_URL = "INVALID_URL"
    NETWORK_ERROR = "NETWORK_ERROR"
    TIMEOUT = "TIMEOUT"
    SCREENSHOT_FAILED = "SCREENSHOT_FAILED"
    HTML_PARSE_ERROR = "HTML_PARSE_ERROR"
    STORAGE_ERROR = "STORAGE_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"
    UNKNOWN = "UNKNOWN"


class CrawlError(Exception):
    """
    Exception carrying a crawl error code and retry hint.
    """

    def __init__(
        self,
        code: CrawlErrorCode,
        message: str,
        *,
        retryable: bool = False,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.retryable = retryable
        self.context = dict(context or {})

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "message": self.message,
            "retryable": self.retryable,
            "context": self.context,
        }


_NETWORK_MARKERS = (
    "enotfound",
    "econnrefused",
    "err_name_not_resolved",
    "err_connection_refused",
    "connection refused",
)


def to_crawl_error(exc: BaseException, context: dict[str, Any] | None = None) -> CrawlError:
    """
    Map an arbitrary exception onto the crawl taxonomy by message inspection.
    """

    if isinstance(exc, CrawlError):
        return exc
    if isinstance(exc, BlobStorageError):
        return CrawlError(CrawlErrorCode.STORAGE_ERROR, str(exc), context=context)

    message = str(exc) or type(exc).__name__
    lowered = message.lower()

    if any(marker in lowered for marker in _NETWORK_MARKERS):
        return CrawlError(CrawlErrorCode.NETWORK_ERROR, message, retryable=True, context=context)
    if "timeout" in lowered or "timed out" in lowered:
        return CrawlError(CrawlErrorCode.TIMEOUT, message, retryable=True, context=context)
    if "screenshot" in lowered:
        return CrawlError(CrawlErrorCode.SCREENSHOT_FAILED, message, context=context)
    if "storage" in lowered or "s3" in lowered or "bucket" in lowered:
        return CrawlError(CrawlErrorCode.STORAGE_ERROR, message, context=context)
    if "database" in lowered or "sql" in lowered:
        return CrawlError(CrawlErrorCode.DATABASE_ERROR, message, context=context)
    if "invalid url" in lowered:
        return CrawlError(CrawlErrorCode.INVALID_URL, message, context=context)
    return CrawlError(CrawlErrorCode.UNKNOWN, message, context=context)


class BlobStorageError(Exception):
    """
    Raised when a screenshot or other blob cannot be written.
    """
