"""
API error handling utilities

Sanitizes error messages outside development so database internals never
reach the client, and maps error text to HTTP status codes.
"""

import logging
import secrets
import string
import time
from typing import Optional

from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from . import config

logger = logging.getLogger(__name__)

# (substrings, safe message) - first match wins
SAFE_MESSAGES = [
    (("unique constraint", "duplicate"), "A record with this information already exists"),
    (("foreign key", "reference"), "Related data dependency error"),
    (("not found", "no rows"), "Requested resource not found"),
    (("permission", "denied", "unauthorized"), "Permission denied"),
    (("timeout", "timed out"), "Request timeout"),
    (("connection", "connect"), "Service temporarily unavailable"),
]
DEFAULT_SAFE_MESSAGE = "An unexpected error occurred"

STATUS_PATTERNS = [
    (("not found",), 404),
    (("unauthorized", "permission"), 403),
    (("invalid", "validation"), 400),
    (("conflict", "duplicate"), 409),
    (("timeout",), 408),
    (("too many",), 429),
]

DB_ERROR_PATTERNS = (
    "constraint",
    "foreign key",
    "unique",
    "relation",
    "column",
    "table",
    "syntax",
    "query",
)


def _message(error: object) -> str:
    return str(error).lower()


def sanitize_error_message(error: object) -> str:
    """
    Return a message that is safe to show to API clients.

    In development the raw message is returned; otherwise a generic message
    is picked by matching known substrings of the error text.
    """
    if config.IS_DEVELOPMENT:
        return str(error)

    if isinstance(error, Exception):
        message = _message(error)
        for patterns, safe_message in SAFE_MESSAGES:
            if any(p in message for p in patterns):
                return safe_message

    return DEFAULT_SAFE_MESSAGE


def get_status_code_from_error(error: object) -> int:
    """Map common error messages to HTTP status codes"""
    if not isinstance(error, Exception):
        return 500

    message = _message(error)
    for patterns, status_code in STATUS_PATTERNS:
        if any(p in message for p in patterns):
            return status_code
    return 500


def is_database_error(error: object) -> bool:
    if isinstance(error, SQLAlchemyError):
        return True
    if not isinstance(error, Exception):
        return False
    message = _message(error)
    return any(p in message for p in DB_ERROR_PATTERNS)


def generate_request_id() -> str:
    """Unique id used to correlate a client-visible error with the server log"""
    suffix = "".join(secrets.choice(string.ascii_lowercase + string.digits) for _ in range(9))
    return f"req_{int(time.time() * 1000)}_{suffix}"


def create_error_response(
    error: object,
    status_code: int = 500,
    custom_message: Optional[str] = None,
) -> JSONResponse:
    """
    Build a standardized error response.

    The full error is logged server-side; the body only carries the
    sanitized message, plus the request id in production for support.
    """
    request_id = generate_request_id()
    logger.error(f"[API Error {request_id}]: {error!r}")

    content = {
        "error": custom_message or "Request failed",
        "message": sanitize_error_message(error),
    }
    if config.IS_PRODUCTION:
        content["requestId"] = request_id

    return JSONResponse(status_code=status_code, content=content)
