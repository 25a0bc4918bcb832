"""Booking model: the record claiming a slot for a user."""

from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import (
    String,
    Integer,
    ForeignKey,
    DateTime,
    Uuid,
    func,
    text,
    Index,
    CheckConstraint,
)
from database.engine import Base
from datetime import datetime
from enum import Enum as PyEnum
from typing import TYPE_CHECKING
import uuid

if TYPE_CHECKING:
    from database.models.coaches import Slot
    from database.models.users import User


class BookingStatus(str, PyEnum):
    """Status of a booking."""
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


# at most one non-cancelled booking per slot
ACTIVE_SLOT_BOOKING_INDEX = "uq_bookings_active_slot"


class Booking(Base):
    """
    A user's claim on a slot, with the risk score snapshot taken at booking time.
    """

    __tablename__ = "bookings"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    slot_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("slots.id", ondelete="CASCADE"),
        nullable=False,
    )
    quiz_risk_score: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=BookingStatus.CONFIRMED.value,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    user: Mapped["User"] = relationship(back_populates="bookings")
    slot: Mapped["Slot"] = relationship(back_populates="bookings")

    __table_args__ = (
        CheckConstraint(
            "quiz_risk_score >= 0 AND quiz_risk_score <= 100",
            name="chk_bookings_risk_score_range",
        ),
        Index(
            ACTIVE_SLOT_BOOKING_INDEX,
            "slot_id",
            unique=True,
            postgresql_where=text("status != 'cancelled'"),
            sqlite_where=text("status != 'cancelled'"),
        ),
    )

    def __repr__(self) -> str:
        return f"<Booking {self.id} slot={self.slot_id} {self.status}>"
