"""
Booking endpoints.

``POST /bookings/book-slot`` runs the slot booking transaction; a lost race
returns 409 and a lock wait timeout returns 503 with ``Retry-After``.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.schemas.bookings import BookingResponse, BookSlotRequest
from api.services import bookings as booking_service
from database.engine import get_db

router = APIRouter(prefix="/bookings", tags=["bookings"])


@router.post(
    "/book-slot",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Book Slot",
    description="Book a coach slot. Exactly one of several concurrent requests for a slot succeeds.",
)
async def book_slot(
    request: BookSlotRequest,
    db: AsyncSession = Depends(get_db),
):
    booking = await booking_service.book_slot(
        db,
        user_id=request.user_id,
        slot_id=request.slot_id,
        quiz_risk_score=request.quiz_risk_score,
    )
    return BookingResponse.from_booking(booking)


@router.get(
    "/{booking_id}",
    response_model=BookingResponse,
    summary="Get Booking",
)
async def get_booking(
    booking_id: UUID = Path(..., description="Booking ID"),
    db: AsyncSession = Depends(get_db),
):
    booking = await booking_service.get_booking(db, booking_id)
    return BookingResponse.from_booking(booking)
