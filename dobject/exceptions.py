"""Exceptions for the dobject SDK."""

from typing import Any, Optional


class DigitalObjectError(Exception):
    """Base exception for all dobject errors."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        """Initialize DigitalObjectError.

        Args:
            message: Error message
            status_code: HTTP status code if applicable
        """
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ConnectionError(DigitalObjectError):
    """Raised when the server cannot be reached (DNS, refused, TLS)."""

    pass


class TimeoutError(DigitalObjectError):
    """Raised when a request times out."""

    pass


class AuthenticationError(DigitalObjectError):
    """Raised on a rejected login or a bad, expired or revoked token."""

    def __init__(self, message: str = "Authentication failed", status_code: int = 401) -> None:
        super().__init__(message, status_code=status_code)


class PermissionError(DigitalObjectError):
    """Raised when an authenticated principal is not allowed the action."""

    def __init__(self, message: str) -> None:
        super().__init__(message, status_code=403)


class NotFoundError(DigitalObjectError):
    """Raised for an unknown handle or schema, or one the caller may not see."""

    def __init__(self, message: str, status_code: Optional[int] = 404) -> None:
        super().__init__(message, status_code=status_code)


class PrincipalNotFoundError(NotFoundError):
    """Raised when no User or Group carries a reader/writer name."""

    def __init__(self, name: str) -> None:
        super().__init__(f'No User or Group named "{name}"', status_code=None)
        self.name = name


class ConflictError(DigitalObjectError):
    """Raised when a handle or schema name already exists."""

    def __init__(self, message: str) -> None:
        super().__init__(message, status_code=409)


class ValidationError(DigitalObjectError):
    """Raised when the server rejects content, e.g. on a schema violation.

    The server's message is kept verbatim; its whole error body is in
    ``details``.
    """

    def __init__(self, message: str, details: Optional[Any] = None) -> None:
        super().__init__(message, status_code=400)
        self.details = details


class ServerError(DigitalObjectError):
    """Raised when server returns an error."""

    pass


class UsageError(DigitalObjectError):
    """Raised for a local precondition violation, before any request is sent."""

    pass
