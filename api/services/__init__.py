"""
API Services Layer.

Database operations and domain logic behind the API endpoints. Every
function takes the request's ``AsyncSession`` and raises ``ServiceError``
subclasses from ``core.exceptions``.
"""

from api.services.risk_score import (
    Answer,
    AnswerKind,
    QuizAnswer,
    calculate_risk_score,
)

from api.services.coach_matching import (
    match_coaches,
    required_seniority,
)

from api.services.users import (
    create_user,
    get_user,
)

from api.services.coaches import (
    list_coaches,
    get_available_coaches,
)

from api.services.quiz import (
    get_quiz_schema,
    get_question,
    submit_quiz,
    get_quiz_progress,
)

from api.services.slots import (
    get_available_slots,
    get_slot,
    format_slot,
    format_slots,
    group_slots_by_date,
)

from api.services.bookings import (
    book_slot,
    get_booking,
    list_user_bookings,
)

__all__ = [
    # Risk score
    "Answer",
    "AnswerKind",
    "QuizAnswer",
    "calculate_risk_score",
    # Coach matching
    "match_coaches",
    "required_seniority",
    # Users
    "create_user",
    "get_user",
    # Coaches
    "list_coaches",
    "get_available_coaches",
    # Quiz
    "get_quiz_schema",
    "get_question",
    "submit_quiz",
    "get_quiz_progress",
    # Slots
    "get_available_slots",
    "get_slot",
    "format_slot",
    "format_slots",
    "group_slots_by_date",
    # Bookings
    "book_slot",
    "get_booking",
    "list_user_bookings",
]
