"""
User endpoints.

Users are created before taking the quiz; there is no authentication.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.schemas.bookings import BookingResponse
from api.schemas.users import UserCreate, UserResponse
from api.services import bookings as booking_service
from api.services import users as user_service
from database.engine import get_db

router = APIRouter(prefix="/users", tags=["users"])


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create User",
    description="Create a user. Creating an existing email returns the existing user.",
)
async def create_user(
    request: UserCreate,
    db: AsyncSession = Depends(get_db),
):
    user = await user_service.create_user(
        db,
        email=request.email,
        name=request.name,
        timezone=request.timezone,
        language_preference=request.language_preference,
    )
    return UserResponse.model_validate(user)


@router.get(
    "/{user_id}",
    response_model=UserResponse,
    summary="Get User",
)
async def get_user(
    user_id: UUID = Path(..., description="User ID"),
    db: AsyncSession = Depends(get_db),
):
    user = await user_service.get_user(db, user_id)
    return UserResponse.model_validate(user)


@router.get(
    "/{user_id}/bookings",
    response_model=list[BookingResponse],
    summary="List User Bookings",
    description="List a user's bookings, newest first.",
)
async def list_user_bookings(
    user_id: UUID = Path(..., description="User ID"),
    db: AsyncSession = Depends(get_db),
):
    bookings = await booking_service.list_user_bookings(db, user_id)
    return [BookingResponse.from_booking(booking) for booking in bookings]
