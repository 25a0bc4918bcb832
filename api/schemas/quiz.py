"""Quiz-related Pydantic schemas."""

from datetime import datetime
from typing import Any, Optional, Union
from uuid import UUID
from pydantic import BaseModel, Field, field_validator


AnswerValue = Union[list[str], str, int, float]


class QuizResponseItem(BaseModel):
    """One answer: a string, a list of strings, or a number."""

    question_id: str = Field(min_length=1, max_length=100)
    answer: AnswerValue

    @field_validator("answer", mode="before")
    @classmethod
    def reject_booleans(cls, v: Any) -> Any:
        if isinstance(v, bool):
            raise ValueError("Boolean answers are not supported")
        return v


class SubmitQuizRequest(BaseModel):
    """Schema for submitting quiz answers."""

    user_id: UUID
    responses: list[QuizResponseItem] = Field(description="Answers; must not be empty")


class SubmitQuizResponse(BaseModel):
    risk_score: int = Field(ge=0, le=100)
    user_id: UUID
    submitted_at: datetime


class QuizOption(BaseModel):
    value: str
    label: str


class QuizQuestionResponse(BaseModel):
    """A quiz question rendered in the requested language."""

    id: UUID
    question_id: str
    question_text: str
    question_type: str
    options: Optional[list[QuizOption]] = None
    branching_rules: Optional[dict[str, Any]] = None
    order_index: int
    created_at: Optional[datetime] = None


class QuizSchemaResponse(BaseModel):
    data: list[QuizQuestionResponse]
    language: str
    message: Optional[str] = None


class QuizProgressResponse(BaseModel):
    """Where a user left off in the quiz."""

    total_questions: int
    completed_questions: int
    answered_question_ids: list[str]
    last_answered_question_id: Optional[str] = None
    next_question: Optional[QuizQuestionResponse] = None
    is_completed: bool
    message: Optional[str] = None
