"""
Coach Module

Coaches and their bookable time slots.
"""

from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import (
    String,
    ForeignKey,
    DateTime,
    Uuid,
    JSON,
    func,
    Index,
    CheckConstraint,
)
from database.engine import Base
from datetime import datetime
from enum import Enum as PyEnum
from typing import TYPE_CHECKING
import uuid

if TYPE_CHECKING:
    from database.models.bookings import Booking


# ==================== Enums ===================== #
class SeniorityLevel(str, PyEnum):
    """Coach experience tier, ordered junior < mid < senior."""

    JUNIOR = "junior"
    MID = "mid"
    SENIOR = "senior"


class SlotStatus(str, PyEnum):
    """Slot lifecycle status."""

    AVAILABLE = "available"
    BOOKED = "booked"
    CANCELLED = "cancelled"


# ==================== Coach Model ===================== #
class Coach(Base):
    """
    Static reference entity: a coach with a seniority tier and languages.
    """

    __tablename__ = "coaches"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    specialization: Mapped[str | None] = mapped_column(String(255))
    seniority_level: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    languages: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    timezone: Mapped[str] = mapped_column(
        String(50), nullable=False, default="Asia/Kolkata"
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    slots: Mapped[list["Slot"]] = relationship(
        back_populates="coach", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Coach {self.name} ({self.seniority_level})>"


# ==================== Slot Model ===================== #
class Slot(Base):
    """
    A fixed consultation window offered by one coach.

    Slots are created by external scheduling; only the booking transaction
    moves a slot to ``booked``.
    """

    __tablename__ = "slots"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    coach_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("coaches.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    timezone: Mapped[str] = mapped_column(String(50), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=SlotStatus.AVAILABLE.value, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    coach: Mapped["Coach"] = relationship(back_populates="slots")
    bookings: Mapped[list["Booking"]] = relationship(back_populates="slot")

    __table_args__ = (
        CheckConstraint("end_time > start_time", name="chk_slots_end_after_start"),
        Index("idx_slots_time_range", "start_time", "end_time"),
    )

    def __repr__(self) -> str:
        return f"<Slot {self.id} {self.start_time} {self.status}>"
