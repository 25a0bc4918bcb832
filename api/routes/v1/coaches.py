"""Coach matching endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from api.schemas.coaches import (
    AvailableCoachesFilters,
    AvailableCoachesResponse,
    CoachResponse,
)
from api.services import coaches as coach_service
from api.services.coach_matching import required_seniority
from database.engine import get_db

router = APIRouter(prefix="/coaches", tags=["coaches"])


@router.get(
    "/available",
    response_model=AvailableCoachesResponse,
    response_model_exclude_none=True,
    summary="Get Available Coaches",
    description="Get coaches whose seniority covers the risk score, optionally by language.",
)
async def get_available_coaches(
    risk_score: int = Query(..., description="Risk score (0-100)"),
    language: Optional[str] = Query(None, max_length=10, description="Required coach language"),
    db: AsyncSession = Depends(get_db),
):
    seniority = required_seniority(risk_score)
    coaches = await coach_service.get_available_coaches(db, risk_score, language)

    response = AvailableCoachesResponse(
        data=[CoachResponse.model_validate(coach) for coach in coaches],
        filters=AvailableCoachesFilters(
            risk_score=risk_score,
            required_seniority=seniority,
            language=language,
        ),
    )
    if not coaches:
        response.message = "No coaches available for this risk level"
        if language:
            response.message += f" and language ({language})"
    return response
