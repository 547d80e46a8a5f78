"""
Error Definitions

Defines the error taxonomy surfaced to clients and the classifier that maps
backend failures onto it.
"""

import re
from typing import Any, Optional


class AppError(Exception):
    """
    Application Base Exception

    Base class for all custom exceptions, containing error message, type and HTTP status.
    """

    def __init__(
        self,
        message: str,
        error_type: str = "api_error",
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None,
    ):
        """
        Initialize exception

        Args:
            message: Error message
            error_type: Error type reported to the client
            status_code: HTTP status code
            details: Extra error details (logged, never sent to the client)
        """
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """
        Convert to the Messages API error body

        Returns:
            dict: Error information dictionary
        """
        return {
            "type": "error",
            "error": {
                "type": self.error_type,
                "message": self.message,
            },
        }


class AuthenticationError(AppError):
    """
    Authentication Error

    Raised when the bearer credential is invalid or expired.
    """

    def __init__(self, message: str = "Authentication failed", details: Optional[dict[str, Any]] = None):
        super().__init__(message, error_type="authentication_error", status_code=401, details=details)


class RateLimitError(AppError):
    """Raised when the backend quota is exhausted."""

    def __init__(self, message: str = "Rate limited. Please wait and try again.", details: Optional[dict[str, Any]] = None):
        super().__init__(message, error_type="rate_limit_error", status_code=429, details=details)


class InvalidRequestError(AppError):
    """Raised for malformed client input or a backend INVALID_ARGUMENT."""

    def __init__(self, message: str = "Invalid request", details: Optional[dict[str, Any]] = None):
        super().__init__(message, error_type="invalid_request_error", status_code=400, details=details)


class PermissionDeniedError(AppError):
    """Raised when the backend denies the license or entitlement."""

    def __init__(self, message: str = "Permission denied", details: Optional[dict[str, Any]] = None):
        super().__init__(message, error_type="permission_error", status_code=403, details=details)


class NotFoundError(AppError):
    """Raised for routes the proxy does not serve."""

    def __init__(self, message: str = "Resource not found", details: Optional[dict[str, Any]] = None):
        super().__init__(message, error_type="not_found_error", status_code=404, details=details)


class UpstreamError(AppError):
    """
    Upstream Service Error

    Generic failure reported by a backend host.
    """

    def __init__(
        self,
        message: str = "Upstream service error",
        details: Optional[dict[str, Any]] = None,
        status_code: int = 500,
    ):
        super().__init__(message, error_type="api_error", status_code=status_code, details=details)


class EndpointsExhaustedError(UpstreamError):
    """
    Raised when every backend host failed.

    The message carries the detail of the last recorded failure so the
    classifier can still recognise rate limits or auth failures behind it.
    """

    def __init__(self, last_error: Optional[str] = None, details: Optional[dict[str, Any]] = None):
        message = "All endpoints failed"
        if last_error:
            message = f"{message}: {last_error}"
        super().__init__(message, details=details, status_code=503)
        self.last_error = last_error


class CredentialUnavailableError(AppError):
    """Raised by a credential provider that cannot produce a bearer token."""

    def __init__(self, message: str = "No credential available"):
        super().__init__(message, error_type="authentication_error", status_code=401)


_QUOTA_RESET_RE = re.compile(r"quota will reset after (\d+h\d+m\d+s|\d+s)", re.IGNORECASE)
_BACKEND_MESSAGE_RE = re.compile(r'"message"\s*:\s*"([^"]+)"')


def classify_error(exc: BaseException) -> AppError:
    """
    Map a failure onto the client-facing error taxonomy

    Inspects the error text the way the backend reports it: HTTP status codes
    and Google RPC status names embedded in the message.

    Args:
        exc: Any exception raised while serving a request

    Returns:
        AppError: The classified error, with a client-facing message
    """
    if isinstance(exc, CredentialUnavailableError):
        return AuthenticationError(exc.message)
    if isinstance(exc, AppError) and not isinstance(exc, UpstreamError):
        return exc

    text = str(exc)

    if "401" in text or "UNAUTHENTICATED" in text:
        return AuthenticationError(
            "Authentication failed. Make sure Antigravity is running with a valid token.",
            details={"upstream": text},
        )

    if "429" in text or "RESOURCE_EXHAUSTED" in text:
        match = _QUOTA_RESET_RE.search(text)
        if match:
            message = f"Rate limited. Quota will reset after {match.group(1)}."
        else:
            message = "Rate limited. Please wait and try again."
        return RateLimitError(message, details={"upstream": text})

    if "invalid_request_error" in text or "INVALID_ARGUMENT" in text:
        match = _BACKEND_MESSAGE_RE.search(text)
        return InvalidRequestError(match.group(1) if match else text, details={"upstream": text})

    if "PERMISSION_DENIED" in text:
        return PermissionDeniedError(
            "Permission denied. Check your Antigravity license.",
            details={"upstream": text},
        )

    if isinstance(exc, EndpointsExhaustedError) or "All endpoints failed" in text:
        return UpstreamError(
            "Unable to connect to Claude API. Check that Antigravity is running.",
            details={"upstream": text},
            status_code=503,
        )

    if isinstance(exc, UpstreamError):
        return exc
    return UpstreamError(text or exc.__class__.__name__)
