"""FastAPI dependencies for dependency injection."""

from typing import List, Optional
import json
import uuid

from fastapi import Query

from core.config import settings
from core.exceptions import InvalidInputError


def _split_coach_ids(raw_values: List[str]) -> List[str]:
    """
    Flatten coach_ids given as repeated params, a JSON array or a
    comma-separated list (or any mix of them).
    """
    values: List[str] = []
    for raw in raw_values:
        raw = raw.strip()
        if raw.startswith("["):
            try:
                decoded = json.loads(raw)
            except ValueError:
                raise InvalidInputError("coach_ids must be a valid JSON array")
            if not isinstance(decoded, list):
                raise InvalidInputError("coach_ids must be a valid JSON array")
            values.extend(str(item).strip() for item in decoded)
        else:
            values.extend(part.strip() for part in raw.split(","))
    return [value for value in values if value]


def parse_coach_ids(raw_values: Optional[List[str]]) -> List[uuid.UUID]:
    """
    Parse and validate coach ids.

    Args:
        raw_values: Raw query values

    Returns:
        Unique coach ids in request order

    Raises:
        InvalidInputError: If no ids are given or one is not a valid UUID
    """
    values = _split_coach_ids(raw_values or [])
    if not values:
        raise InvalidInputError("coach_ids is required and must not be empty")

    coach_ids: List[uuid.UUID] = []
    for value in values:
        try:
            coach_id = uuid.UUID(value)
        except ValueError:
            raise InvalidInputError(f"Invalid coach id: {value}")
        if coach_id not in coach_ids:
            coach_ids.append(coach_id)
    return coach_ids


def get_coach_ids(
    coach_ids: Optional[List[str]] = Query(
        None,
        description="Coach ids: repeated, comma-separated or a JSON array",
    ),
) -> List[uuid.UUID]:
    return parse_coach_ids(coach_ids)


def get_language(
    language: Optional[str] = Query(
        None,
        max_length=10,
        description="Language code for translated content",
    ),
) -> str:
    """Requested language, or the default language."""
    return (language or settings.default_language).strip().lower()
