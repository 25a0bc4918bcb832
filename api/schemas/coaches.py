"""Coach-related Pydantic schemas."""

from typing import Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field


class CoachResponse(BaseModel):
    """Schema for coach response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    specialization: Optional[str] = None
    seniority_level: str = Field(description="junior, mid or senior")
    languages: list[str] = Field(default_factory=list, description="Language codes the coach speaks")
    timezone: str


class AvailableCoachesFilters(BaseModel):
    risk_score: int
    required_seniority: str
    language: Optional[str] = None


class AvailableCoachesResponse(BaseModel):
    """Coaches qualified for a risk score."""

    data: list[CoachResponse]
    filters: AvailableCoachesFilters
    message: Optional[str] = None
