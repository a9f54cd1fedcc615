"""
app/schemas package marker.
"""

from app.schemas.competitor_intelligence import (
    BaselineProfileResponse,
    IntelligenceReportResponse,
    SeoIntelligenceResponse,
    StrategicModelResponse,
)
from app.schemas.crawl_jobs import CrawlJobCreateRequest, CrawlJobResponse, CrawlSummaryResponse

__all__ = [
    "BaselineProfileResponse",
    "CrawlJobCreateRequest",
    "CrawlJobResponse",
    "CrawlSummaryResponse",
    "IntelligenceReportResponse",
    "SeoIntelligenceResponse",
    "StrategicModelResponse",
]
