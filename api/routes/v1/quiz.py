"""
Quiz endpoints.

Serves the translated quiz, stores answers and returns the risk score.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_language
from api.schemas.quiz import (
    QuizProgressResponse,
    QuizSchemaResponse,
    SubmitQuizRequest,
    SubmitQuizResponse,
)
from api.services import quiz as quiz_service
from core.utils.datetime import now
from database.engine import get_db

router = APIRouter(prefix="/quiz", tags=["quiz"])


@router.get(
    "/schema",
    response_model=QuizSchemaResponse,
    response_model_exclude_none=True,
    summary="Get Quiz Schema",
    description="Get all quiz questions in order, translated into the requested language.",
)
async def get_quiz_schema(
    language: str = Depends(get_language),
    db: AsyncSession = Depends(get_db),
):
    questions = await quiz_service.get_quiz_schema(db, language)
    response = QuizSchemaResponse(data=questions, language=language)
    if not questions:
        response.message = "No quiz questions found. Please seed the database."
    return response


@router.post(
    "/submit",
    response_model=SubmitQuizResponse,
    summary="Submit Quiz",
    description="Store quiz answers and calculate the user's risk score.",
)
async def submit_quiz(
    request: SubmitQuizRequest,
    db: AsyncSession = Depends(get_db),
):
    risk_score = await quiz_service.submit_quiz(
        db,
        request.user_id,
        [(item.question_id, item.answer) for item in request.responses],
    )
    return SubmitQuizResponse(
        risk_score=risk_score,
        user_id=request.user_id,
        submitted_at=now(),
    )


@router.get(
    "/progress/{user_id}",
    response_model=QuizProgressResponse,
    summary="Get Quiz Progress",
    description="Get the answered questions and the question to resume from.",
)
async def get_quiz_progress(
    user_id: UUID = Path(..., description="User ID"),
    language: str = Depends(get_language),
    db: AsyncSession = Depends(get_db),
):
    progress = await quiz_service.get_quiz_progress(db, user_id, language)
    response = QuizProgressResponse(**progress)

    if response.is_completed:
        response.message = "Quiz completed. You can now proceed to booking."
    elif response.completed_questions > 0 and response.next_question:
        response.message = f"Resume from question {response.next_question.order_index}"
    else:
        response.message = "Quiz not started. Begin with the first question."
    return response
