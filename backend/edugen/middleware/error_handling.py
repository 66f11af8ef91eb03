"""
Error Handling Middleware

Turns engine errors into one JSON error envelope:

    {"error": "invalid_request", "message": "...", "error_id": "1a2b3c4d",
     "details": {...}, "timestamp": "..."}

Which errors reach the client:
    - InvalidRequestError (400): malformed generation or submission requests
    - NotFoundError (404): unknown exercise or subject
    - anything else: sanitized 500 (details only in debug mode)

    Backend failures during generation never get here; the model chain and
    the static fallback absorb them.

Usage:
    from edugen.middleware.error_handling import InvalidRequestError, setup_error_handling

    setup_error_handling(app, debug=settings.DEBUG)

    raise InvalidRequestError("subject and topic are required")
"""

import logging
import traceback
from datetime import datetime, timezone
from typing import Any, Optional
from uuid import uuid4

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


# =============================================================================
# Error Envelope
# =============================================================================


class ErrorResponse(BaseModel):
    """Body of every error response."""

    error: str  # Machine-readable code, e.g. "not_found"
    message: str
    error_id: str  # Also logged, for correlation
    details: Optional[dict] = None
    timestamp: datetime


def _envelope(
    error: str, message: str, error_id: str, details: Optional[dict] = None
) -> dict[str, Any]:
    return ErrorResponse(
        error=error,
        message=message,
        error_id=error_id,
        details=details,
        timestamp=datetime.now(timezone.utc),
    ).model_dump(mode="json")


# =============================================================================
# Engine Exceptions
# =============================================================================


class ServiceError(Exception):
    """
    Base class for errors that map to an HTTP status.

    Subclasses set ``status_code`` and ``error_code``; both can be overridden
    per instance. ``details`` is a JSON-safe dict describing the problem.
    """

    status_code: int = 500
    error_code: str = "service_error"

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
        details: Optional[dict] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code or self.status_code
        self.error_code = error_code or self.error_code
        self.details = details


class InvalidRequestError(ServiceError):
    """
    The caller sent a request the engine cannot act on.

    Missing subject/topic, unsupported subject, invalid field values, or a
    submission without exerciseId/answer. Raised before any generation work.
    """

    status_code = 400
    error_code = "invalid_request"


class NotFoundError(ServiceError):
    """No stored exercise (or catalog subject) has the requested id."""

    status_code = 404
    error_code = "not_found"


class LLMError(ServiceError):
    """
    A provider answered without any usable completion.

    Raised by the inference client; the generator counts it as a failed
    attempt and moves on to the next model.
    """

    status_code = 502
    error_code = "llm_error"


# =============================================================================
# Middleware
# =============================================================================


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """
    Catch engine and unexpected errors and answer with the error envelope.

    Every error gets a short id that appears in both the log line and the
    response body.
    """

    def __init__(self, app, debug: bool = False):
        super().__init__(app)
        self.debug = debug

    async def dispatch(self, request: Request, call_next):
        error_id = uuid4().hex[:8]
        log_context = {
            "error_id": error_id,
            "path": request.url.path,
            "method": request.method,
        }

        try:
            return await call_next(request)

        except HTTPException:
            raise

        except ServiceError as e:
            client_error = e.status_code < 500
            (logger.warning if client_error else logger.error)(
                f"[{error_id}] {request.method} {request.url.path} -> "
                f"{e.status_code} {e.error_code}: {e.message}",
                extra={**log_context, "error_code": e.error_code, "details": e.details},
            )
            # Client errors describe the caller's own input
            details = e.details if (client_error or self.debug) else None
            return JSONResponse(
                status_code=e.status_code,
                content=_envelope(e.error_code, e.message, error_id, details),
            )

        except Exception as e:
            trace = traceback.format_exc()
            logger.error(
                f"[{error_id}] Unhandled {type(e).__name__} on "
                f"{request.method} {request.url.path}: {e}",
                extra={**log_context, "traceback": trace},
            )
            details = (
                {"exception": type(e).__name__, "message": str(e), "traceback": trace}
                if self.debug
                else None
            )
            return JSONResponse(
                status_code=500,
                content=_envelope(
                    "internal_server_error", "An unexpected error occurred", error_id, details
                ),
            )


def setup_error_handling(app: FastAPI, debug: bool = False) -> None:
    """
    Install the error envelope middleware.

    Args:
        app: FastAPI application instance
        debug: Include exception details and stack traces in 500 responses
    """
    app.add_middleware(ErrorHandlingMiddleware, debug=debug)
    logger.info(f"Error handling middleware enabled (debug={debug})")
