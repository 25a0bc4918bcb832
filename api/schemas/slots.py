"""Slot-related Pydantic schemas."""

from typing import Optional
from uuid import UUID
from pydantic import BaseModel, Field


class SlotDisplay(BaseModel):
    """A bookable slot formatted for the user's timezone."""

    id: UUID
    coach_id: UUID
    coach_name: str
    start_time: str = Field(description="Start time, ISO 8601 UTC")
    end_time: str = Field(description="End time, ISO 8601 UTC")
    start_time_user_tz: str = Field(description="Start time, ISO 8601 in the requested timezone")
    end_time_user_tz: str = Field(description="End time, ISO 8601 in the requested timezone")
    timezone: str = Field(description="Timezone the coach offers the slot in")
    status: str


class AvailableSlotsFilters(BaseModel):
    coach_ids: list[UUID]
    days_ahead: int
    user_timezone: Optional[str] = None


class AvailableSlotsResponse(BaseModel):
    """Available slots, optionally grouped by local date."""

    data: list[SlotDisplay]
    grouped_by_date: Optional[dict[str, list[SlotDisplay]]] = None
    filters: AvailableSlotsFilters
    message: Optional[str] = None
