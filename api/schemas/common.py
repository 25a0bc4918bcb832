"""Common Pydantic schemas shared across the API."""

from datetime import datetime
from typing import Any, Optional
from pydantic import BaseModel, Field


class ErrorBody(BaseModel):
    """Error payload."""

    code: str = Field(description="Error code for programmatic handling")
    message: str = Field(description="Human readable error message")
    path: Optional[str] = Field(None, description="Request path")
    method: Optional[str] = Field(None, description="Request method")
    request_id: Optional[str] = Field(None, description="Request id from the logging middleware")
    details: Optional[list[dict[str, Any]]] = Field(None, description="Per-field validation errors")


class ErrorResponse(BaseModel):
    """Error response model."""

    error: ErrorBody


class CreatedAtMixin(BaseModel):
    """Mixin for the creation timestamp."""

    created_at: datetime = Field(description="Timestamp when the resource was created")


class HealthResponse(BaseModel):
    status: str
    service: str
    version: Optional[str] = None
    database: Optional[str] = None
    cache: Optional[str] = None
