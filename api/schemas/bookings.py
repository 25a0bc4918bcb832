"""Booking-related Pydantic schemas."""

from datetime import datetime
from uuid import UUID
from pydantic import BaseModel, Field

from api.schemas.common import CreatedAtMixin
from api.schemas.users import UserSummary
from database.models import Booking


class BookSlotRequest(BaseModel):
    """Schema for booking a slot."""

    user_id: UUID
    slot_id: UUID
    # range is enforced by the booking transaction
    quiz_risk_score: int = Field(description="Risk score from the user's quiz (0-100)")


class BookedSlot(BaseModel):
    id: UUID
    coach_id: UUID
    coach_name: str
    start_time: datetime
    end_time: datetime
    timezone: str


class BookingResponse(CreatedAtMixin):
    """Schema for booking response."""

    id: UUID
    user_id: UUID
    slot_id: UUID
    quiz_risk_score: int
    status: str
    slot: BookedSlot
    user: UserSummary

    @classmethod
    def from_booking(cls, booking: Booking) -> "BookingResponse":
        """Build the response from a booking with user, slot and coach loaded."""
        slot = booking.slot
        return cls(
            id=booking.id,
            user_id=booking.user_id,
            slot_id=booking.slot_id,
            quiz_risk_score=booking.quiz_risk_score,
            status=booking.status,
            created_at=booking.created_at,
            slot=BookedSlot(
                id=slot.id,
                coach_id=slot.coach_id,
                coach_name=slot.coach.name if slot.coach else "Unknown",
                start_time=slot.start_time,
                end_time=slot.end_time,
                timezone=slot.timezone,
            ),
            user=UserSummary.model_validate(booking.user),
        )
