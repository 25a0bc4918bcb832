"""
Error handling: maps exceptions to the JSON error envelope.

    {"error": {"code", "message", "path", "method", "request_id"?, "details"?}}

Service errors carry their own status and code. Storage errors that escape
the services are mapped by type, and their messages are never sent to the
client.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.exceptions import ServiceError, SlotBusyError

logger = logging.getLogger(__name__)

# Patterns for data that must never reach a response or a log line
SENSITIVE_PATTERNS = [
    re.compile(r'password["\s:=]+[^"\s,}]+', re.IGNORECASE),
    re.compile(r'token["\s:=]+[^"\s,}]+', re.IGNORECASE),
    re.compile(r'secret["\s:=]+[^"\s,}]+', re.IGNORECASE),
    # credentials embedded in connection URLs
    re.compile(r"(?<=://)[^/\s:@]+:[^/\s@]+(?=@)"),
]


def sanitize_error_message(message: Any) -> str:
    """Remove credentials from an error message."""
    sanitized = str(message)
    for pattern in SENSITIVE_PATTERNS:
        sanitized = pattern.sub("[REDACTED]", sanitized)
    return sanitized


@dataclass
class ErrorInfo:
    status_code: int
    code: str
    message: str
    details: Optional[list[dict[str, Any]]] = None
    headers: dict[str, str] = field(default_factory=dict)


def format_validation_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    return [
        {
            "field": ".".join(str(loc) for loc in error["loc"]),
            "message": sanitize_error_message(error["msg"]),
            "type": error["type"],
        }
        for error in exc.errors()
    ]


def classify_exception(exc: Exception) -> ErrorInfo:
    """Map an exception to its HTTP status, error code and client message."""
    if isinstance(exc, ServiceError):
        info = ErrorInfo(exc.status_code, exc.error_code, sanitize_error_message(exc.message))
        if isinstance(exc, SlotBusyError):
            info.headers["Retry-After"] = str(exc.retry_after_seconds)
        return info

    if isinstance(exc, StarletteHTTPException):
        return ErrorInfo(exc.status_code, "HTTP_EXCEPTION", sanitize_error_message(exc.detail))

    if isinstance(exc, RequestValidationError):
        return ErrorInfo(
            status.HTTP_400_BAD_REQUEST,
            "VALIDATION_ERROR",
            "Request validation failed",
            details=format_validation_errors(exc),
        )

    if isinstance(exc, IntegrityError):
        return ErrorInfo(
            status.HTTP_409_CONFLICT, "CONFLICT", "Request conflicts with existing data"
        )

    if isinstance(exc, OperationalError):
        return ErrorInfo(
            status.HTTP_503_SERVICE_UNAVAILABLE,
            "DATABASE_UNAVAILABLE",
            "Database service temporarily unavailable",
        )

    if isinstance(exc, SQLAlchemyError):
        return ErrorInfo(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "DATABASE_ERROR", "A database error occurred"
        )

    return ErrorInfo(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_ERROR", "An unexpected error occurred"
    )


def error_response(
    info: ErrorInfo,
    path: str,
    method: str,
    request_id: Optional[str] = None,
) -> JSONResponse:
    body: dict[str, Any] = {
        "code": info.code,
        "message": info.message,
        "path": path,
        "method": method,
    }
    if request_id:
        body["request_id"] = request_id
    if info.details is not None:
        body["details"] = info.details
    return JSONResponse(status_code=info.status_code, content={"error": body}, headers=info.headers or None)


def _log_error(info: ErrorInfo, exc: Exception, method: str, path: str) -> None:
    summary = f"{method} {path} -> {info.status_code} {info.code}: {info.message}"
    if info.status_code >= 500 and not isinstance(exc, ServiceError):
        logger.error(
            f"Unhandled {type(exc).__name__}: {summary} ({sanitize_error_message(exc)})",
            exc_info=exc,
        )
    elif info.status_code >= 500:
        logger.error(summary)
    else:
        logger.warning(summary)


class ErrorHandlingMiddleware:
    """
    Outermost safety net for exceptions the route handlers did not handle.

    Turns any escaping exception into the JSON error envelope instead of a
    bare 500 from the server.
    """

    def __init__(self, app: Callable, debug: bool = False):
        self.app = app
        self.debug = debug

    async def __call__(self, scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        try:
            await self.app(scope, receive, send)
        except Exception as exc:
            path = scope.get("path", "unknown")
            method = scope.get("method", "unknown")
            info = classify_exception(exc)
            if self.debug and info.details is None and not isinstance(exc, ServiceError):
                info.details = [{"type": type(exc).__name__, "message": sanitize_error_message(exc)}]
            _log_error(info, exc, method, path)

            response = error_response(info, path, method, self._request_id(scope))
            await response(scope, receive, send)

    @staticmethod
    def _request_id(scope: dict) -> Optional[str]:
        state = scope.get("state") or {}
        if state.get("request_id"):
            return state["request_id"]
        for name, value in scope.get("headers", []):
            if name == b"x-request-id":
                return value.decode()
        return None


def setup_error_handlers(app):
    """
    Register exception handlers on the FastAPI application.

    Args:
        app: FastAPI application instance
    """

    async def handle(request: Request, exc: Exception) -> JSONResponse:
        info = classify_exception(exc)
        _log_error(info, exc, request.method, request.url.path)
        return error_response(
            info,
            request.url.path,
            request.method,
            getattr(request.state, "request_id", None),
        )

    app.add_exception_handler(ServiceError, handle)
    app.add_exception_handler(StarletteHTTPException, handle)
    app.add_exception_handler(RequestValidationError, handle)
    app.add_exception_handler(SQLAlchemyError, handle)
