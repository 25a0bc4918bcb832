"""
Slot availability service functions.

Availability is a read-only query: no locks are taken here. A slot is
available iff its status is ``available``, no confirmed booking references it
and it starts inside the booking window.
"""

from typing import Any, Dict, Iterable, List, Optional
from datetime import datetime
import logging
import uuid

from sqlalchemy import inspect, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from core.config import settings
from core.exceptions import NotFoundError
from core.utils.datetime import (
    booking_window,
    ensure_utc,
    get_timezone,
    isoformat_utc,
    now as utc_now,
    to_timezone,
)
from database.models import Booking, BookingStatus, Slot, SlotStatus

logger = logging.getLogger(__name__)


async def get_available_slots(
    db: AsyncSession,
    coach_ids: Iterable[uuid.UUID],
    now: Optional[datetime] = None,
    days_ahead: Optional[int] = None,
) -> List[Slot]:
    """
    Get bookable slots for the given coaches.

    Args:
        db: Database session
        coach_ids: Coaches whose slots to include
        now: Query time (defaults to the current UTC time)
        days_ahead: Window length in days (defaults to AVAILABILITY_DAYS_AHEAD)

    Returns:
        Slots ordered by start_time ascending, with ``coach`` loaded
    """
    coach_ids = list(dict.fromkeys(coach_ids))
    if not coach_ids:
        return []

    window_start, window_end = booking_window(
        now or utc_now(), days_ahead or settings.availability_days_ahead
    )

    # 1. Open slots of these coaches starting after now
    result = await db.execute(
        select(Slot)
        .options(selectinload(Slot.coach))
        .where(
            Slot.coach_id.in_(coach_ids),
            Slot.status == SlotStatus.AVAILABLE.value,
            Slot.start_time > window_start,
        )
        .order_by(Slot.start_time.asc())
    )
    slots = result.scalars().all()

    # 2. Inside the window (inclusive end of day)
    in_range = [slot for slot in slots if ensure_utc(slot.start_time) <= window_end]
    if not in_range:
        return []

    # 3. Slots already referenced by a confirmed booking
    booked = await db.execute(
        select(Booking.slot_id).where(
            Booking.slot_id.in_([slot.id for slot in in_range]),
            Booking.status == BookingStatus.CONFIRMED.value,
        )
    )
    booked_slot_ids = set(booked.scalars().all())
    if booked_slot_ids:
        logger.warning(
            f"{len(booked_slot_ids)} slot(s) marked available have confirmed bookings"
        )

    # 4. Exclude them
    return [slot for slot in in_range if slot.id not in booked_slot_ids]


async def get_slot(db: AsyncSession, slot_id: uuid.UUID) -> Slot:
    """
    Get a slot with its coach.

    Raises:
        NotFoundError: If the slot does not exist
    """
    result = await db.execute(
        select(Slot).options(selectinload(Slot.coach)).where(Slot.id == slot_id)
    )
    slot = result.scalar_one_or_none()
    if slot is None:
        raise NotFoundError("Slot")
    return slot


def format_slot(slot: Slot, user_timezone: Optional[str] = None) -> Dict[str, Any]:
    """
    Format a slot for display in the user's timezone.

    Pure transform applied after selection; it never affects availability.

    Args:
        slot: Slot with ``coach`` loaded
        user_timezone: IANA timezone for the ``*_user_tz`` fields (UTC if omitted)

    Returns:
        Dictionary with UTC and user-local ISO 8601 times

    Raises:
        InvalidInputError: If the timezone is unknown
    """
    # never trigger a lazy load from a display helper
    coach = None if "coach" in inspect(slot).unloaded else slot.coach
    return {
        "id": slot.id,
        "coach_id": slot.coach_id,
        "coach_name": coach.name if coach is not None else "Unknown",
        "start_time": isoformat_utc(slot.start_time),
        "end_time": isoformat_utc(slot.end_time),
        "start_time_user_tz": to_timezone(slot.start_time, user_timezone).isoformat(),
        "end_time_user_tz": to_timezone(slot.end_time, user_timezone).isoformat(),
        "timezone": slot.timezone,
        "status": slot.status,
    }


def format_slots(slots: Iterable[Slot], user_timezone: Optional[str] = None) -> List[Dict[str, Any]]:
    """Format slots, validating the timezone once up front."""
    if user_timezone:
        get_timezone(user_timezone)
    return [format_slot(slot, user_timezone) for slot in slots]


def group_slots_by_date(formatted_slots: Iterable[Dict[str, Any]]) -> Dict[str, List[Dict[str, Any]]]:
    """
    Group formatted slots by the local date of ``start_time_user_tz``.

    Order within and across dates follows the input order.
    """
    grouped: Dict[str, List[Dict[str, Any]]] = {}
    for slot in formatted_slots:
        date_key = slot["start_time_user_tz"][:10]
        grouped.setdefault(date_key, []).append(slot)
    return grouped
