"""
Core middleware package.

- Error handling: maps service and storage errors to the JSON error envelope
- Structured logging: per-request JSON logs with request ids and PII masking
"""

from core.middleware.error_handling import (
    ErrorHandlingMiddleware,
    classify_exception,
    setup_error_handlers,
    sanitize_error_message,
)

from core.middleware.logging import (
    StructuredLoggingMiddleware,
    StructuredFormatter,
    mask_sensitive_data,
    setup_logging,
)

__all__ = [
    # Error handling
    "ErrorHandlingMiddleware",
    "classify_exception",
    "setup_error_handlers",
    "sanitize_error_message",
    # Logging
    "StructuredLoggingMiddleware",
    "StructuredFormatter",
    "mask_sensitive_data",
    "setup_logging",
]
