"""
app/services package marker.
"""

from app.services.crawl_job_service import CrawlJobService, get_crawl_job_service
from app.services.intelligence_service import CompetitorIntelligenceService, get_intelligence_service

__all__ = [
    "CompetitorIntelligenceService",
    "CrawlJobService",
    "get_crawl_job_service",
    "get_intelligence_service",
]
