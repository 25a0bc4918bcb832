"""
Booking service functions.

``book_slot`` claims a slot for a user in one all-or-nothing transaction.
Two guards keep a slot from being booked twice:

1. the slot row is locked with ``SELECT ... FOR UPDATE`` before any check, so
   concurrent attempts on the same slot serialize on the lock;
2. the partial unique index on ``bookings.slot_id`` (non-cancelled rows)
   rejects a second booking even if the lock is bypassed or the isolation
   level lets both transactions pass the status check.

The slot ``status`` column is kept in step with the booking as a fast-path
filter for availability queries.
"""

from typing import List, Optional
import logging
import uuid

from sqlalchemy import select, text
from sqlalchemy.exc import DBAPIError, IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from core.config import settings
from core.exceptions import (
    ConflictError,
    InternalError,
    NotFoundError,
    SlotBusyError,
)
from api.services.coach_matching import validate_risk_score
from database.models import (
    Booking,
    BookingStatus,
    Slot,
    SlotStatus,
    User,
)

logger = logging.getLogger(__name__)

# lock_not_available (lock_timeout), deadlock_detected
_LOCK_SQLSTATES = {"55P03", "40P01"}
_LOCK_MESSAGES = ("lock timeout", "could not obtain lock", "deadlock detected", "database is locked")


def _is_lock_error(exc: DBAPIError) -> bool:
    """Whether a driver error means the slot lock could not be acquired in time."""
    orig = getattr(exc, "orig", None)
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate in _LOCK_SQLSTATES:
        return True
    message = str(exc).lower()
    return any(fragment in message for fragment in _LOCK_MESSAGES)


async def _set_lock_timeout(db: AsyncSession, timeout_seconds: float) -> None:
    """Bound the wait for row locks in the current transaction."""
    if db.get_bind().dialect.name == "postgresql":
        timeout_ms = max(1, int(timeout_seconds * 1000))
        # SET LOCAL does not take bind parameters
        await db.execute(text(f"SET LOCAL lock_timeout = '{timeout_ms}ms'"))


def _with_relations(statement):
    return statement.options(
        selectinload(Booking.user),
        selectinload(Booking.slot).selectinload(Slot.coach),
    )


async def book_slot(
    db: AsyncSession,
    user_id: uuid.UUID,
    slot_id: uuid.UUID,
    quiz_risk_score: int,
    lock_timeout_seconds: Optional[float] = None,
) -> Booking:
    """
    Book a slot for a user.

    Args:
        db: Database session with no transaction in progress
        user_id: User claiming the slot
        slot_id: Slot to claim
        quiz_risk_score: Risk score snapshot (0-100)
        lock_timeout_seconds: Maximum wait for the slot lock
            (defaults to BOOKING_LOCK_TIMEOUT_SECONDS)

    Returns:
        The confirmed booking with ``user``, ``slot`` and ``slot.coach`` loaded

    Raises:
        NotFoundError: If the user or slot does not exist
        ConflictError: If the slot is already booked or not available
        InvalidInputError: If the risk score is out of range
        SlotBusyError: If the slot lock could not be acquired in time
        InternalError: If the booking was committed but could not be re-read
    """
    timeout = lock_timeout_seconds or settings.booking_lock_timeout_seconds

    try:
        async with db.begin():
            await _set_lock_timeout(db, timeout)

            # 1. Exclusive lock on the slot row; other bookers of this slot wait here
            locked = await db.execute(
                select(Slot)
                .where(Slot.id == slot_id)
                .with_for_update()
                .execution_options(populate_existing=True)
            )
            slot = locked.scalar_one_or_none()

            # 2. User must exist
            user = await db.get(User, user_id)
            if user is None:
                raise NotFoundError("User")

            # 3. Slot must exist
            if slot is None:
                raise NotFoundError("Slot")

            # 4. No live booking may reference the slot
            existing = await db.execute(
                select(Booking.id).where(
                    Booking.slot_id == slot_id,
                    Booking.status != BookingStatus.CANCELLED.value,
                )
            )
            if existing.first() is not None:
                raise ConflictError("Slot already booked")

            # 5. Status must still be available
            if slot.status != SlotStatus.AVAILABLE.value:
                raise ConflictError(f"Slot is not available (status: {slot.status})")

            # 6. Risk score in range
            validate_risk_score(quiz_risk_score)

            # 7. Insert the booking
            booking = Booking(
                user_id=user_id,
                slot_id=slot_id,
                quiz_risk_score=quiz_risk_score,
                status=BookingStatus.CONFIRMED.value,
            )
            db.add(booking)
            await db.flush()

            # 8. Mark the slot taken
            slot.status = SlotStatus.BOOKED.value
            await db.flush()
        # 9. committed on leaving the block; any exception above rolled back
    except IntegrityError as exc:
        logger.info(f"Booking conflict on slot {slot_id}: unique constraint rejected insert")
        raise ConflictError("Slot already booked") from exc
    except DBAPIError as exc:
        if _is_lock_error(exc):
            logger.warning(f"Timed out waiting for lock on slot {slot_id}")
            raise SlotBusyError(
                "Slot is being booked by another request, please retry"
            ) from exc
        raise

    booking_id = booking.id
    logger.info(f"Booked slot {slot_id} for user {user_id} (booking {booking_id})")

    # 10. Read back outside the critical section
    try:
        result = await db.execute(
            _with_relations(select(Booking))
            .where(Booking.id == booking_id)
            .execution_options(populate_existing=True)
        )
        created = result.scalar_one_or_none()
        # close the read transaction so the session can run another booking
        await db.commit()
    except SQLAlchemyError as exc:
        logger.error(f"Failed to reload booking {booking_id}", exc_info=True)
        raise InternalError("Failed to retrieve created booking") from exc

    if created is None:
        raise InternalError("Failed to retrieve created booking")
    return created


async def get_booking(db: AsyncSession, booking_id: uuid.UUID) -> Booking:
    """
    Get a booking with its user, slot and coach.

    Raises:
        NotFoundError: If the booking does not exist
    """
    result = await db.execute(_with_relations(select(Booking)).where(Booking.id == booking_id))
    booking = result.scalar_one_or_none()
    if booking is None:
        raise NotFoundError("Booking")
    return booking


async def list_user_bookings(db: AsyncSession, user_id: uuid.UUID) -> List[Booking]:
    """
    List a user's bookings, newest first.

    Raises:
        NotFoundError: If the user does not exist
    """
    if await db.get(User, user_id) is None:
        raise NotFoundError("User")

    result = await db.execute(
        _with_relations(select(Booking))
        .where(Booking.user_id == user_id)
        .order_by(Booking.created_at.desc())
    )
    return list(result.scalars().all())


__all__ = [
    "book_slot",
    "get_booking",
    "list_user_bookings",
]
