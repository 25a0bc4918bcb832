"""
Service-level exceptions.

Every error the booking core can surface belongs to one of these classes.
The HTTP layer renders them through ``core.middleware.error_handling``.
"""

from fastapi import status


class ServiceError(Exception):
    """Base exception for errors raised by the service layer."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code: str = "INTERNAL_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInputError(ServiceError):
    """Raised when request data is malformed or out of range."""

    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "INVALID_INPUT"


class NotFoundError(ServiceError):
    """Raised when a referenced user, slot, booking or question is absent."""

    status_code = status.HTTP_404_NOT_FOUND
    error_code = "NOT_FOUND"

    def __init__(self, resource: str, message: str | None = None):
        super().__init__(message or f"{resource} not found")
        self.resource = resource


class ConflictError(ServiceError):
    """Raised when a slot race is lost or the slot is already taken."""

    status_code = status.HTTP_409_CONFLICT
    error_code = "CONFLICT"


class SlotBusyError(ServiceError):
    """Raised when the slot lock cannot be acquired within the configured wait."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    error_code = "SLOT_BUSY"
    retry_after_seconds = 1


class InternalError(ServiceError):
    """Raised on unexpected storage or logic failures."""
    pass
