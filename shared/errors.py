"""
Shared error handling for the Portal card API.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error response format."""

    success: bool = False
    statusCode: int
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    path: str
    method: str
    message: str
    error: Any = None
    requestId: str = "unknown"


class PortalException(Exception):
    """Base exception for Portal services, carrying the HTTP status to answer with."""

    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None, error: Any = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.error = error if error is not None else message
        super().__init__(message)


class UpstreamError(PortalException):
    """Normalized failure of a call to the card platform."""

    def __init__(self, message: str, status: int = 500):
        super().__init__(message, status_code=status)

    @property
    def status(self) -> int:
        return self.status_code

    @property
    def is_transient(self) -> bool:
        return self.status_code >= 500


class AuthenticationError(PortalException):
    """Authentication-related errors."""

    status_code = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class AuthorizationError(PortalException):
    """Authorization-related errors."""

    status_code = 403

    def __init__(self, message: str = "Forbidden resource"):
        super().__init__(message)


class NotFoundError(PortalException):
    status_code = 404

    def __init__(self, message: str = "Not found"):
        super().__init__(message)


class ConflictError(PortalException):
    status_code = 409

    def __init__(self, message: str = "Conflict"):
        super().__init__(message)


class ValidationError(PortalException):
    """Validation-related errors."""

    status_code = 400

    def __init__(self, message: str = "Validation failed", error: Any = None):
        super().__init__(message, error=error)


class ConfigurationError(PortalException):
    """A required integration setting is missing."""

    status_code = 500

    def __init__(self, message: str = "Service misconfigured"):
        super().__init__(message)
