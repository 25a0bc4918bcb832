"""User-related Pydantic schemas."""

from typing import Literal, Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from api.schemas.common import CreatedAtMixin


LanguageCode = Literal["en", "hi"]


class UserCreate(BaseModel):
    """Schema for creating a user."""

    email: EmailStr
    name: str = Field(min_length=1, max_length=255, description="User's display name")
    timezone: Optional[str] = Field(None, max_length=50, description="IANA timezone, e.g. Asia/Kolkata")
    language_preference: Optional[LanguageCode] = Field(None, description="Preferred quiz language")

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v: str) -> str:
        """Strip whitespace from the name."""
        if isinstance(v, str):
            return v.strip()
        return v


class UserSummary(BaseModel):
    """User fields embedded in other resources."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    name: str


class UserResponse(UserSummary, CreatedAtMixin):
    """Schema for user response."""

    timezone: str
    language_preference: str
