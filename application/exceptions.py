"""
Application-layer exceptions.

Part of HQ-12: Typed API errors

Every non-2xx backend response is raised as an APIError subclass chosen by
status code. Transport failures (no response at all) raise TransportError.
These exceptions are used across application and infrastructure layers.
"""

from typing import Any, Dict, List, Optional, Type

from pydantic import ValidationError

DEFAULT_ERROR_MESSAGE = "An error occurred"
SERVER_ERROR_MESSAGE = "Something went wrong on our end. Please try again later."
TRANSPORT_ERROR_MESSAGE = "Unable to reach the server. Check your connection and try again."
INVALID_RESPONSE_MESSAGE = "The server sent a response that could not be read."


class APIError(Exception):
    """Raised when the backend answers with a non-2xx status."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details


class APIValidationError(APIError):
    """422: the backend rejected the request body."""

    @property
    def field_errors(self) -> Dict[str, str]:
        """Map of dotted field location -> message, from a FastAPI-style detail."""
        errors: Dict[str, str] = {}
        detail = self.details.get("detail") if isinstance(self.details, dict) else None
        if isinstance(detail, list):
            for item in detail:
                if not isinstance(item, dict):
                    continue
                loc = [str(p) for p in item.get("loc", []) if p != "body"]
                errors[".".join(loc) or "__root__"] = item.get("msg", "")
        return errors


class UnauthorizedError(APIError):
    """401: credentials missing, invalid or expired."""


class ForbiddenError(APIError):
    """403: authenticated but not allowed (e.g. disabled account)."""


class NotFoundError(APIError):
    """404."""


class ConflictError(APIError):
    """409: e.g. duplicate registration."""


class RateLimitedError(APIError):
    """429: too many attempts."""


class ServerError(APIError):
    """5xx."""


class TransportError(APIError):
    """Raised when the backend is unreachable or the request timed out."""

    def __init__(self, message: str = TRANSPORT_ERROR_MESSAGE, details: Any = None):
        super().__init__(message, status_code=None, details=details)


class InvalidResponseError(APIError):
    """Raised when a 2xx response body is not JSON."""

    def __init__(
        self,
        message: str = INVALID_RESPONSE_MESSAGE,
        status_code: Optional[int] = None,
        details: Any = None,
    ):
        super().__init__(message, status_code=status_code, details=details)


class AvatarValidationError(ValueError):
    """Raised when an avatar file is refused before upload."""


_STATUS_ERRORS: Dict[int, Type[APIError]] = {
    401: UnauthorizedError,
    403: ForbiddenError,
    404: NotFoundError,
    409: ConflictError,
    422: APIValidationError,
    429: RateLimitedError,
}


def extract_error_message(body: Any, fallback: str = DEFAULT_ERROR_MESSAGE) -> str:
    """
    Pull a human-readable message out of a backend error envelope.

    Looks at `detail` (a string, or a validation-error list whose `msg`
    values are joined), then `message`, then `error.message`.
    """
    if not isinstance(body, dict):
        return fallback

    detail = body.get("detail")
    if isinstance(detail, str) and detail:
        return detail
    if isinstance(detail, list):
        messages: List[str] = [
            str(item.get("msg")) for item in detail
            if isinstance(item, dict) and item.get("msg")
        ]
        if messages:
            return "; ".join(messages)

    message = body.get("message")
    if isinstance(message, str) and message:
        return message

    error = body.get("error")
    if isinstance(error, dict) and isinstance(error.get("message"), str):
        return error["message"]
    if isinstance(error, str) and error:
        return error

    return fallback


def error_for_status(status_code: int, message: str, details: Any = None) -> APIError:
    """Build the APIError subclass matching an HTTP status."""
    if status_code >= 500:
        return ServerError(message, status_code, details)
    error_class = _STATUS_ERRORS.get(status_code, APIError)
    return error_class(message, status_code, details)


def user_message(exc: BaseException) -> str:
    """Text to show the user for a failed request."""
    if isinstance(exc, TransportError):
        return TRANSPORT_ERROR_MESSAGE
    if isinstance(exc, ServerError):
        return SERVER_ERROR_MESSAGE
    if isinstance(exc, APIError):
        return exc.message or DEFAULT_ERROR_MESSAGE
    if isinstance(exc, ValidationError):
        # A response body that does not fit the domain models.
        return INVALID_RESPONSE_MESSAGE
    return str(exc) or DEFAULT_ERROR_MESSAGE
