"""
User service functions for API endpoints.

Users are created once and never updated; creating an existing email returns
the stored user unchanged.
"""

from typing import Optional
import logging
import uuid

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.exceptions import NotFoundError
from core.utils.datetime import get_timezone
from database.models import User

logger = logging.getLogger(__name__)


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == email.lower()))
    return result.scalar_one_or_none()


async def create_user(
    db: AsyncSession,
    email: str,
    name: str,
    timezone: Optional[str] = None,
    language_preference: Optional[str] = None,
) -> User:
    """
    Create a user, or return the existing user with this email.

    Args:
        db: Database session
        email: Email address (stored lower-cased)
        name: Display name
        timezone: IANA timezone (defaults to DEFAULT_TIMEZONE)
        language_preference: Language code (defaults to DEFAULT_LANGUAGE)

    Returns:
        The created or existing user

    Raises:
        InvalidInputError: If the timezone is unknown
    """
    existing = await get_user_by_email(db, email)
    if existing is not None:
        logger.debug(f"User {existing.id} already exists, returning it")
        return existing

    timezone = timezone or settings.default_timezone
    get_timezone(timezone)

    user = User(
        email=email.lower(),
        name=name,
        timezone=timezone,
        language_preference=language_preference or settings.default_language,
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        # lost a race with a concurrent create for the same email
        await db.rollback()
        existing = await get_user_by_email(db, email)
        if existing is None:
            raise
        return existing

    await db.refresh(user)
    logger.info(f"Created user {user.id}")
    return user


async def get_user(db: AsyncSession, user_id: uuid.UUID) -> User:
    """
    Get a user by id.

    Raises:
        NotFoundError: If the user does not exist
    """
    user = await db.get(User, user_id)
    if user is None:
        raise NotFoundError("User")
    return user
