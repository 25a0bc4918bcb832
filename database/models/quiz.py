"""
Quiz Module

Seeded quiz questions and per-user answers.
"""

from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import (
    String,
    Integer,
    Text,
    ForeignKey,
    DateTime,
    Uuid,
    JSON,
    func,
    UniqueConstraint,
)
from database.engine import Base
from datetime import datetime
from enum import Enum as PyEnum
from typing import Any, TYPE_CHECKING
import uuid

if TYPE_CHECKING:
    from database.models.users import User


class QuestionType(str, PyEnum):
    RADIO = "radio"
    CHECKBOX = "checkbox"
    SELECT = "select"
    TEXT = "text"
    NUMBER = "number"


# question types that cannot be rendered without options
CHOICE_QUESTION_TYPES = frozenset(
    {QuestionType.RADIO.value, QuestionType.CHECKBOX.value, QuestionType.SELECT.value}
)


class QuizQuestion(Base):
    """
    One quiz question, identified by a stable ``question_id``.

    ``translations`` overlays the base text and options per language:
    {"question_text": {"hi": "..."}, "options": {"hi": [{"value": ..., "label": ...}]}}
    """

    __tablename__ = "quiz_schema"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    question_id: Mapped[str] = mapped_column(
        String(100), unique=True, nullable=False, index=True
    )
    question_text: Mapped[str] = mapped_column(Text, nullable=False)
    question_type: Mapped[str] = mapped_column(String(50), nullable=False)
    branching_rules: Mapped[dict[str, Any] | None] = mapped_column(JSON)
    options: Mapped[list[dict[str, str]] | None] = mapped_column(JSON)
    translations: Mapped[dict[str, Any] | None] = mapped_column(JSON)
    order_index: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )


class QuizResponse(Base):
    """A user's answer to one question; upserted as the user progresses."""

    __tablename__ = "quiz_responses"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    question_id: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    # string, list of strings, or number
    answer: Mapped[Any] = mapped_column(JSON, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    user: Mapped["User"] = relationship(back_populates="quiz_responses")

    __table_args__ = (
        UniqueConstraint("user_id", "question_id", name="uq_quiz_responses_user_question"),
    )
