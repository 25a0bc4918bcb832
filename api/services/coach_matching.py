"""
Coach matching.

Routes a risk score to a coach seniority tier:
    61-100 -> senior
    31-60  -> mid
    0-30   -> junior

A coach qualifies when their tier is at or above the required tier, so a
senior coach is also offered to low-risk users.
"""

from typing import Iterable, Optional, Protocol, Sequence, TypeVar

from core.exceptions import InvalidInputError
from database.models.coaches import SeniorityLevel


SENIORITY_RANK: dict[str, int] = {
    SeniorityLevel.JUNIOR.value: 1,
    SeniorityLevel.MID.value: 2,
    SeniorityLevel.SENIOR.value: 3,
}

SENIOR_THRESHOLD = 61
MID_THRESHOLD = 31


class CoachLike(Protocol):
    seniority_level: str
    languages: Sequence[str]


C = TypeVar("C", bound=CoachLike)


def validate_risk_score(risk_score: int) -> int:
    """Raise InvalidInputError unless 0 <= risk_score <= 100."""
    if isinstance(risk_score, bool) or not isinstance(risk_score, int):
        raise InvalidInputError("Risk score must be an integer")
    if risk_score < 0 or risk_score > 100:
        raise InvalidInputError("Risk score must be between 0 and 100")
    return risk_score


def required_seniority(risk_score: int) -> str:
    """Get the minimum coach seniority for a risk score."""
    validate_risk_score(risk_score)
    if risk_score >= SENIOR_THRESHOLD:
        return SeniorityLevel.SENIOR.value
    if risk_score >= MID_THRESHOLD:
        return SeniorityLevel.MID.value
    return SeniorityLevel.JUNIOR.value


def seniority_rank(seniority_level: str) -> int:
    """Rank of a seniority level; unknown levels rank below junior."""
    return SENIORITY_RANK.get(seniority_level, 0)


def filter_by_seniority(coaches: Iterable[C], risk_score: int) -> list[C]:
    required_rank = SENIORITY_RANK[required_seniority(risk_score)]
    return [c for c in coaches if seniority_rank(c.seniority_level) >= required_rank]


def filter_by_language(coaches: Iterable[C], language: Optional[str]) -> list[C]:
    if not language:
        return list(coaches)
    return [c for c in coaches if language in (c.languages or [])]


def match_coaches(
    coaches: Iterable[C],
    risk_score: int,
    language: Optional[str] = None,
) -> list[C]:
    """
    Match coaches to a risk score and optional language.

    Seniority is filtered first, language second. Input order is preserved.

    Args:
        coaches: Candidate coaches, in the caller's preferred order
        risk_score: Risk score (0-100)
        language: Optional language code the coach must speak

    Returns:
        Matched coaches
    """
    matched = filter_by_seniority(coaches, risk_score)
    return filter_by_language(matched, language)
