"""
app/schemas/competitor_intelligence.py

Response schemas for the competitor analysis endpoints. Nested analyzer
output is passed through as plain JSON objects.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class IntelligenceReportResponse(BaseModel):
    """
    Traits, scores, ranking, narrative and confidence for one competitor.
    """

    competitor_id: str
    raw: dict[str, Any]
    traits: dict[str, Any]
    scores: dict[str, Any]
    ranking: dict[str, Any]
    narrative: dict[str, Any]
    confidence: dict[str, Any]
    trace: list[dict[str, Any]] = Field(default_factory=list)


class BaselineProfileResponse(BaseModel):
    """
    Company baseline profile with its evidence trace.
    """

    competitor_id: str
    profile: dict[str, Any]
    trace: list[dict[str, Any]] = Field(default_factory=list)


class StrategicModelResponse(BaseModel):
    """
    Strategic dimensions, pressure, trajectory, brief and snapshot.
    """

    competitor_id: str
    dimensions_result: dict[str, Any]
    pressure: dict[str, Any]
    saturation: dict[str, Any] | None = None
    trajectory: dict[str, Any]
    brief: dict[str, Any]
    competitive_snapshot: dict[str, Any]


class SeoIntelligenceResponse(BaseModel):
    """
    SEO view of the latest crawl plus the cross-competitor comparison.
    """

    competitor_id: str
    page_count: int = Field(..., ge=0)
    intelligence: dict[str, Any]
    comparison: dict[str, Any]
