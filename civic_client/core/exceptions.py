"""
Client-side error taxonomy.

Every failure a screen can hit maps onto one of these, and every one of them
ends the same way: a blocking alert with a human-readable message and the
screen back in its pre-action state.
"""

from typing import Optional


class CivicClientError(Exception):
    """Base class for all client errors."""

    default_message = "Something went wrong"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NetworkError(CivicClientError):
    """The request never produced a response (connection refused, timeout, DNS)."""

    default_message = "Network error. Please try again."


class ServerError(CivicClientError):
    """The backend answered with a non-2xx status."""

    default_message = "Request failed"

    def __init__(self, status_code: int, message: Optional[str] = None, payload: Optional[dict] = None):
        self.status_code = status_code
        self.payload = payload or {}
        # None when the body carried no usable message
        self.server_message = message
        super().__init__(message)

    def __str__(self) -> str:
        return f"{self.message} ({self.status_code})"


class PermissionDeniedError(CivicClientError):
    """A device permission (camera, location) was not granted."""

    default_message = "Permission denied"

    def __init__(self, permission: str, message: Optional[str] = None):
        self.permission = permission
        super().__init__(message or f"{permission.capitalize()} permission is required")


class ValidationError(CivicClientError):
    """A required form field is missing or invalid."""

    default_message = "Please fill in all required fields"


class InvalidResponseError(CivicClientError):
    """The backend answered 2xx but the body does not have the expected shape."""

    default_message = "Unexpected response from server"
