"""
Coach service functions for API endpoints.
"""

from typing import List, Optional
import logging

from sqlalchemy import case, select
from sqlalchemy.ext.asyncio import AsyncSession

from api.services.coach_matching import SENIORITY_RANK, match_coaches
from database.models import Coach

logger = logging.getLogger(__name__)


async def list_coaches(db: AsyncSession) -> List[Coach]:
    """List all coaches, most senior first, then by name."""
    rank = case(SENIORITY_RANK, value=Coach.seniority_level, else_=0)
    result = await db.execute(select(Coach).order_by(rank.desc(), Coach.name.asc()))
    return list(result.scalars().all())


async def get_available_coaches(
    db: AsyncSession,
    risk_score: int,
    language: Optional[str] = None,
) -> List[Coach]:
    """
    Get coaches qualified for a risk score.

    Args:
        db: Database session
        risk_score: Risk score (0-100)
        language: Optional language code the coach must speak

    Returns:
        Matching coaches, most senior first

    Raises:
        InvalidInputError: If the risk score is out of range
    """
    coaches = await list_coaches(db)
    matched = match_coaches(coaches, risk_score, language)
    logger.debug(
        f"Matched {len(matched)}/{len(coaches)} coaches for risk score {risk_score}"
        + (f" and language {language}" if language else "")
    )
    return matched
