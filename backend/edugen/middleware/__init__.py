"""
Middleware Package

Provides FastAPI middleware for error handling.

Usage:
    from edugen.middleware import setup_error_handling, InvalidRequestError

    setup_error_handling(app, debug=settings.DEBUG)
"""

from edugen.middleware.error_handling import (
    ErrorHandlingMiddleware,
    InvalidRequestError,
    LLMError,
    NotFoundError,
    ServiceError,
    setup_error_handling,
)

__all__ = [
    "ErrorHandlingMiddleware",
    "InvalidRequestError",
    "LLMError",
    "NotFoundError",
    "ServiceError",
    "setup_error_handling",
]
