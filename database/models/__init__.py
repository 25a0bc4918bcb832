"""Database models. Importing this package registers every table on ``Base.metadata``."""

from database.models.users import User, LanguagePreference
from database.models.coaches import Coach, Slot, SeniorityLevel, SlotStatus
from database.models.bookings import Booking, BookingStatus, ACTIVE_SLOT_BOOKING_INDEX
from database.models.quiz import (
    QuizQuestion,
    QuizResponse,
    QuestionType,
    CHOICE_QUESTION_TYPES,
)

__all__ = [
    "User",
    "LanguagePreference",
    "Coach",
    "Slot",
    "SeniorityLevel",
    "SlotStatus",
    "Booking",
    "BookingStatus",
    "ACTIVE_SLOT_BOOKING_INDEX",
    "QuizQuestion",
    "QuizResponse",
    "QuestionType",
    "CHOICE_QUESTION_TYPES",
]
