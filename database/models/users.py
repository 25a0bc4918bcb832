from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, DateTime, Uuid, func
from database.engine import Base
from datetime import datetime
from enum import Enum as PyEnum
from typing import TYPE_CHECKING
import uuid

if TYPE_CHECKING:
    from database.models.bookings import Booking
    from database.models.quiz import QuizResponse


# ==================== Language ===================== #
class LanguagePreference(str, PyEnum):
    ENGLISH = "en"
    HINDI = "hi"


class User(Base):
    """
    Person taking the quiz and booking a consultation.
    Created once, immutable afterwards.
    """

    __tablename__: str = "users"
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    email: Mapped[str] = mapped_column(
        String(255), unique=True, nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    timezone: Mapped[str] = mapped_column(String(50), nullable=False, default="UTC")
    language_preference: Mapped[str] = mapped_column(
        String(10), nullable=False, default=LanguagePreference.ENGLISH.value
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    quiz_responses: Mapped[list["QuizResponse"]] = relationship(
        back_populates="user", cascade="all, delete-orphan"
    )
    bookings: Mapped[list["Booking"]] = relationship(back_populates="user")

    def __repr__(self) -> str:
        return f"<User {self.id} {self.email}>"
