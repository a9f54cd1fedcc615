"""
app/api/routers/competitor_intelligence.py

Read-only analysis endpoints over stored crawl data.
"""

from __future__ import annotations

import uuid
from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.api.dependencies import get_competitor_id
from app.schemas.competitor_intelligence import (
    BaselineProfileResponse,
    IntelligenceReportResponse,
    SeoIntelligenceResponse,
    StrategicModelResponse,
)
from app.services.intelligence_service import CompetitorIntelligenceService, get_intelligence_service
from db.repositories.errors import CompetitorNotFoundError
from db.session import get_db

router = APIRouter(prefix="/competitors", tags=["competitor-intelligence"])


def _not_found(exc: CompetitorNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


@router.get("/{competitor_id}/intelligence", response_model=IntelligenceReportResponse)
def get_competitor_intelligence(
    competitor_id: uuid.UUID = Depends(get_competitor_id),
    db: Session = Depends(get_db),
    service: CompetitorIntelligenceService = Depends(get_intelligence_service),
) -> IntelligenceReportResponse:
    """
    Run the trait, scoring, ranking, narrative and confidence stages over
    the competitor's latest snapshots.
    """

    try:
        report = service.intelligence_report(db=db, competitor_id=competitor_id)
    except CompetitorNotFoundError as exc:
        raise _not_found(exc) from exc

    return IntelligenceReportResponse(**report.to_dict())


@router.get("/{competitor_id}/baseline-profile", response_model=BaselineProfileResponse)
def get_baseline_profile(
    competitor_id: uuid.UUID = Depends(get_competitor_id),
    db: Session = Depends(get_db),
    service: CompetitorIntelligenceService = Depends(get_intelligence_service),
) -> BaselineProfileResponse:
    try:
        result = service.baseline_profile(db=db, competitor_id=competitor_id)
    except CompetitorNotFoundError as exc:
        raise _not_found(exc) from exc

    return BaselineProfileResponse(competitor_id=str(competitor_id), **result.to_dict())


@router.get("/{competitor_id}/strategic-model", response_model=StrategicModelResponse)
def get_strategic_model(
    competitor_id: uuid.UUID = Depends(get_competitor_id),
    db: Session = Depends(get_db),
    service: CompetitorIntelligenceService = Depends(get_intelligence_service),
) -> StrategicModelResponse:
    """
    Strategic dimensions against active peers, with trajectory from the
    previous snapshot generation.
    """

    try:
        view = service.strategic_view(db=db, competitor_id=competitor_id)
    except CompetitorNotFoundError as exc:
        raise _not_found(exc) from exc

    return StrategicModelResponse(
        competitor_id=str(competitor_id),
        competitive_snapshot=view.snapshot.to_dict(),
        **view.model.to_dict(),
    )


@router.get("/{competitor_id}/seo-intelligence", response_model=SeoIntelligenceResponse)
def get_seo_intelligence(
    competitor_id: uuid.UUID = Depends(get_competitor_id),
    db: Session = Depends(get_db),
    service: CompetitorIntelligenceService = Depends(get_intelligence_service),
) -> SeoIntelligenceResponse:
    try:
        view = service.seo_view(db=db, competitor_id=competitor_id)
    except CompetitorNotFoundError as exc:
        raise _not_found(exc) from exc

    return SeoIntelligenceResponse(
        competitor_id=str(competitor_id),
        page_count=view.page_count,
        intelligence=view.intelligence.to_dict(),
        comparison=asdict(view.comparison),
    )
