"""
app/api/routers package marker.
"""

from app.api.routers.competitor_intelligence import router as competitor_intelligence_router
from app.api.routers.crawl_jobs import router as crawl_jobs_router

__all__ = [
    "competitor_intelligence_router",
    "crawl_jobs_router",
]
