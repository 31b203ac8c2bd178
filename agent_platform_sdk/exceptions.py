"""Exception hierarchy and HTTP error mapping for the Agent Platform SDK.

All SDK exceptions inherit from AgentPlatformError, allowing callers to catch
broad or specific failure modes. API failures carry the documented error
``code`` so callers can branch on it without inspecting the HTTP status.
"""

from __future__ import annotations

from typing import Any

# --- Error codes ---

UNAUTHORIZED = "UNAUTHORIZED"
FORBIDDEN = "FORBIDDEN"
NOT_FOUND = "NOT_FOUND"
VALIDATION_ERROR = "VALIDATION_ERROR"
RATE_LIMITED = "RATE_LIMITED"
INTERNAL_ERROR = "INTERNAL_ERROR"
TRANSPORT_ERROR = "TRANSPORT_ERROR"
UNKNOWN_ERROR = "UNKNOWN_ERROR"

STATUS_TO_CODE: dict[int, str] = {
    401: UNAUTHORIZED,
    403: FORBIDDEN,
    404: NOT_FOUND,
    422: VALIDATION_ERROR,
    429: RATE_LIMITED,
    500: INTERNAL_ERROR,
}

CODE_TO_STATUS: dict[str, int] = {code: status for status, code in STATUS_TO_CODE.items()}


class AgentPlatformError(Exception):
    """Base exception for all SDK errors."""

    code: str = UNKNOWN_ERROR

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        details: Any = None,
        status_code: int | None = None,
        request_id: str | None = None,
    ) -> None:
        self.message = message
        if code is not None:
            self.code = code
        self.details = details
        self.status_code = status_code
        self.request_id = request_id
        super().__init__(message)

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


# --- Local errors (raised before or around the HTTP call) ---


class ConfigurationError(AgentPlatformError):
    """Invalid or missing client configuration."""

    code = "CONFIGURATION_ERROR"


class TransportError(AgentPlatformError):
    """Network failure or timeout; no HTTP response was received."""

    code = TRANSPORT_ERROR


class PaginationError(AgentPlatformError):
    """Pagination stopped by the page cap or a cursor that did not advance."""

    code = "PAGINATION_ERROR"


class TaskTimeoutError(AgentPlatformError):
    """Task did not reach a terminal status within the wait timeout."""

    code = "TASK_TIMEOUT"


# --- API errors (the server answered with a failure) ---


class ApiStatusError(AgentPlatformError):
    """Failure response from the API without a more specific mapping."""


class AuthenticationError(ApiStatusError):
    """Missing or rejected credentials (401)."""

    code = UNAUTHORIZED


class AuthorizationError(ApiStatusError):
    """Credentials valid but not permitted for this resource (403)."""

    code = FORBIDDEN


class NotFoundError(ApiStatusError):
    """Requested resource does not exist (404)."""

    code = NOT_FOUND


class ValidationError(ApiStatusError):
    """Request payload rejected by the server (422)."""

    code = VALIDATION_ERROR


class RateLimitError(ApiStatusError):
    """Request quota exceeded (429)."""

    code = RATE_LIMITED

    def __init__(self, message: str, *, retry_after: float | None = None, **kwargs: Any) -> None:
        self.retry_after = retry_after
        super().__init__(message, **kwargs)


class ServerError(ApiStatusError):
    """Server-side failure (5xx)."""

    code = INTERNAL_ERROR


_CODE_TO_EXCEPTION: dict[str, type[ApiStatusError]] = {
    UNAUTHORIZED: AuthenticationError,
    FORBIDDEN: AuthorizationError,
    NOT_FOUND: NotFoundError,
    VALIDATION_ERROR: ValidationError,
    RATE_LIMITED: RateLimitError,
    INTERNAL_ERROR: ServerError,
}


def code_for_status(status_code: int) -> str:
    """Map an HTTP status to its documented error code."""
    if status_code in STATUS_TO_CODE:
        return STATUS_TO_CODE[status_code]
    if status_code >= 500:
        return INTERNAL_ERROR
    return UNKNOWN_ERROR


def status_for_code(code: str) -> int | None:
    """Map a documented error code back to its HTTP status."""
    return CODE_TO_STATUS.get(code)


def exception_for_code(code: str) -> type[ApiStatusError]:
    return _CODE_TO_EXCEPTION.get(code, ApiStatusError)


def _parse_retry_after(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        seconds = float(value)
    except (TypeError, ValueError):
        return None
    return seconds if seconds >= 0 else None


def error_from_response(
    status_code: int,
    payload: Any,
    headers: dict[str, str] | None = None,
) -> ApiStatusError:
    """Build the typed exception for a failed API response.

    ``payload`` is the decoded JSON body (or anything else when the body was
    not JSON). The envelope's ``error.code`` wins over the HTTP status when it
    names a known code, so a 200 with ``success: false`` still maps correctly.
    """
    headers = {k.lower(): v for k, v in (headers or {}).items()}
    body = payload if isinstance(payload, dict) else {}
    error = body.get("error")
    if not isinstance(error, dict):
        error = {"message": error} if isinstance(error, str) else {}

    code = error.get("code")
    if code not in _CODE_TO_EXCEPTION:
        code = code_for_status(status_code)
    message = error.get("message") or body.get("message") or f"HTTP {status_code}"
    details = error.get("details")
    request_id = body.get("requestId") or headers.get("x-request-id")

    exc_type = exception_for_code(code)
    kwargs: dict[str, Any] = {
        "code": code,
        "details": details,
        "status_code": status_code,
        "request_id": request_id,
    }
    if exc_type is RateLimitError:
        retry_after = _parse_retry_after(headers.get("retry-after"))
        if retry_after is None and isinstance(details, dict):
            retry_after = _parse_retry_after(details.get("retryAfter"))
        return RateLimitError(message, retry_after=retry_after, **kwargs)
    return exc_type(message, **kwargs)
