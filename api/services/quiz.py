"""
Quiz service functions for API endpoints.

The quiz schema is reference data seeded at startup and read on every quiz
page load, so the translated schema is cached in Redis per language.
Responses are upserted per (user, question) so a user can resume a quiz and
resubmit answers without creating duplicates.
"""

from typing import Any, Dict, Iterable, List, Optional, Tuple
import logging
import uuid

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.cache import cache, redis_cache
from core.config import settings
from core.exceptions import ConflictError, InternalError, InvalidInputError, NotFoundError
from api.services.risk_score import QuizAnswer, calculate_risk_score
from database.models import CHOICE_QUESTION_TYPES, QuizQuestion, QuizResponse, User

logger = logging.getLogger(__name__)


def _schema_cache_key(func, db, language: Optional[str] = None) -> str:
    return f"quiz_schema:{language or settings.default_language}"


def translate_question(question: QuizQuestion, language: Optional[str] = None) -> Dict[str, Any]:
    """
    Render a question in the requested language.

    Translated text and options replace the base ones when present for the
    language; otherwise the base values are kept.

    Raises:
        InternalError: If a choice question ends up without options
    """
    translations = question.translations or {}
    question_text = question.question_text
    options = question.options

    if language:
        question_text = (translations.get("question_text") or {}).get(language) or question_text
        options = (translations.get("options") or {}).get(language) or options

    if question.question_type in CHOICE_QUESTION_TYPES and not options:
        logger.error(f"Question {question.question_id} ({question.question_type}) has no options")
        raise InternalError(
            f"Question {question.question_id} of type {question.question_type} has no options"
        )

    return {
        "id": str(question.id),
        "question_id": question.question_id,
        "question_text": question_text,
        "question_type": question.question_type,
        "options": options,
        "branching_rules": question.branching_rules,
        "order_index": question.order_index,
        "created_at": question.created_at.isoformat() if question.created_at else None,
    }


async def list_questions(db: AsyncSession) -> List[QuizQuestion]:
    result = await db.execute(select(QuizQuestion).order_by(QuizQuestion.order_index.asc()))
    return list(result.scalars().all())


@cache(ttl=settings.quiz_schema_cache_ttl, key_builder=_schema_cache_key)
async def get_quiz_schema(db: AsyncSession, language: Optional[str] = None) -> List[Dict[str, Any]]:
    """
    Get all quiz questions ordered by order_index, translated.

    Args:
        db: Database session
        language: Language code for the translation overlay

    Returns:
        List of JSON-ready question dictionaries (empty if none are seeded)

    Raises:
        InternalError: If a choice question has no options
    """
    questions = await list_questions(db)
    return [translate_question(question, language) for question in questions]


async def invalidate_quiz_schema_cache() -> int:
    """Drop cached quiz schemas for every language."""
    if not redis_cache.is_ready:
        return 0
    deleted = await redis_cache.delete_pattern("quiz_schema:*")
    logger.info(f"Invalidated {deleted} cached quiz schema(s)")
    return deleted


async def get_question(db: AsyncSession, question_id: str) -> QuizQuestion:
    """
    Get a single question by its question_id.

    Raises:
        NotFoundError: If the question does not exist
    """
    result = await db.execute(
        select(QuizQuestion).where(QuizQuestion.question_id == question_id)
    )
    question = result.scalar_one_or_none()
    if question is None:
        raise NotFoundError("Question")
    return question


def parse_responses(responses: Iterable[Tuple[str, Any]]) -> List[QuizAnswer]:
    """
    Tag raw (question_id, answer) pairs.

    Raises:
        InvalidInputError: If the list is empty or an answer has an unsupported shape
    """
    parsed = []
    for question_id, raw in responses:
        try:
            parsed.append(QuizAnswer.from_raw(question_id, raw))
        except ValueError as e:
            raise InvalidInputError(f"Invalid answer for {question_id}: {e}")
    if not parsed:
        raise InvalidInputError("At least one quiz response is required")
    return parsed


async def submit_quiz(
    db: AsyncSession,
    user_id: uuid.UUID,
    responses: Iterable[Tuple[str, Any]],
) -> int:
    """
    Store a user's answers and calculate their risk score.

    All answers are written in one transaction; an answer to a question the
    user already answered replaces the stored one.

    Args:
        db: Database session with no transaction in progress
        user_id: User submitting the quiz
        responses: (question_id, answer) pairs; a later pair for the same
            question wins

    Returns:
        Risk score from 0 to 100

    Raises:
        InvalidInputError: If there are no responses or an answer is malformed
        NotFoundError: If the user does not exist
        ConflictError: If a concurrent submission wrote the same answers first
    """
    answers = parse_responses(responses)
    latest = {answer.question_id: answer for answer in answers}

    try:
        async with db.begin():
            if await db.get(User, user_id) is None:
                raise NotFoundError("User")

            result = await db.execute(
                select(QuizResponse).where(
                    QuizResponse.user_id == user_id,
                    QuizResponse.question_id.in_(list(latest)),
                )
            )
            stored = {row.question_id: row for row in result.scalars().all()}

            for question_id, answer in latest.items():
                value = answer.answer.value
                if answer.answer.choices is not None:
                    value = list(value)
                row = stored.get(question_id)
                if row is None:
                    db.add(QuizResponse(user_id=user_id, question_id=question_id, answer=value))
                else:
                    row.answer = value
            await db.flush()
    except IntegrityError as exc:
        logger.info(f"Concurrent quiz submission for user {user_id}")
        raise ConflictError("Quiz responses were modified concurrently, please retry") from exc

    risk_score = calculate_risk_score(answers)
    logger.info(f"Stored {len(latest)} quiz responses for user {user_id}, risk score {risk_score}")
    return risk_score


async def get_quiz_progress(
    db: AsyncSession,
    user_id: uuid.UUID,
    language: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Get a user's quiz progress for resuming.

    The next question is the first unanswered question by order_index.

    Returns:
        Dictionary with total/completed counts, answered ids, the last
        answered question id, the next question (or None) and completion flag

    Raises:
        NotFoundError: If the user does not exist
    """
    if await db.get(User, user_id) is None:
        raise NotFoundError("User")

    questions = await list_questions(db)
    result = await db.execute(
        select(QuizResponse)
        .where(QuizResponse.user_id == user_id)
        .order_by(QuizResponse.updated_at.asc(), QuizResponse.created_at.asc())
    )
    responses = result.scalars().all()

    known_ids = {question.question_id for question in questions}
    answered = [r.question_id for r in responses if r.question_id in known_ids]
    answered_ids = set(answered)

    next_question = next(
        (q for q in questions if q.question_id not in answered_ids),
        None,
    )

    return {
        "total_questions": len(questions),
        "completed_questions": len(answered_ids),
        "answered_question_ids": [q.question_id for q in questions if q.question_id in answered_ids],
        "last_answered_question_id": answered[-1] if answered else None,
        "next_question": translate_question(next_question, language) if next_question else None,
        "is_completed": bool(questions) and next_question is None,
    }
