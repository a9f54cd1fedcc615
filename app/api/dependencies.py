"""
app/api/dependencies.py

Shared FastAPI dependencies for request validation.
"""

from __future__ import annotations

import uuid

from fastapi import HTTPException, Path, status


def _parse_uuid(raw: str, *, label: str) -> uuid.UUID:
    try:
        return uuid.UUID(raw.strip())
    except (ValueError, AttributeError) as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid {label} id: {raw!r}.",
        ) from exc


def get_competitor_id(competitor_id: str = Path(..., description="Competitor UUID")) -> uuid.UUID:
    """
    Validate the competitor path parameter as a UUID.
    """

    return _parse_uuid(competitor_id, label="competitor")


def get_job_id(job_id: str = Path(..., description="Crawl job UUID")) -> uuid.UUID:
    """
    Validate the crawl job path parameter as a UUID.
    """

    return _parse_uuid(job_id, label="crawl job")
