"""Slot availability endpoints."""

from typing import List, Optional
import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_coach_ids
from api.schemas.slots import AvailableSlotsFilters, AvailableSlotsResponse
from api.services import slots as slot_service
from core.config import settings
from core.utils.datetime import get_timezone
from database.engine import get_db

router = APIRouter(prefix="/slots", tags=["slots"])


@router.get(
    "/available",
    response_model=AvailableSlotsResponse,
    response_model_exclude_none=True,
    summary="Get Available Slots",
    description=(
        "Get bookable slots for the given coaches within the booking window, "
        "with times converted to the user's timezone."
    ),
)
async def get_available_slots(
    coach_ids: List[uuid.UUID] = Depends(get_coach_ids),
    user_timezone: Optional[str] = Query(None, max_length=50, description="IANA timezone for display"),
    group_by_date: bool = Query(False, description="Also group slots by local date"),
    db: AsyncSession = Depends(get_db),
):
    if user_timezone:
        get_timezone(user_timezone)

    slots = await slot_service.get_available_slots(db, coach_ids)
    formatted = slot_service.format_slots(slots, user_timezone)

    grouped = slot_service.group_slots_by_date(formatted) if group_by_date else None

    response = AvailableSlotsResponse(
        data=formatted,
        grouped_by_date=grouped,
        filters=AvailableSlotsFilters(
            coach_ids=coach_ids,
            days_ahead=settings.availability_days_ahead,
            user_timezone=user_timezone,
        ),
    )
    if not formatted:
        response.message = "No available slots found for the selected coaches"
    return response
