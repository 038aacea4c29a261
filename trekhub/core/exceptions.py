"""
Custom exceptions for the TrekHub API.

Every error the service reports to a caller derives from ``TrekHubException``
so the error handlers can render one envelope shape for all of them.
"""

from typing import Optional, Dict, Any, List
from enum import Enum


class ErrorCode(str, Enum):
    """Standardized error codes for the application."""

    # Input errors
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Authentication / authorization errors
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    DUPLICATE_EMAIL = "DUPLICATE_EMAIL"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"

    # Resource errors
    NOT_FOUND = "NOT_FOUND"

    # Infrastructure errors
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"


class TrekHubException(Exception):
    """Base exception for the TrekHub API."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code


class ValidationError(TrekHubException):
    """
    Raised when user input is missing, malformed or out of range.

    ``fields`` carries one ``{"field": ..., "message": ...}`` entry per
    failing field, never just the first one.
    """

    def __init__(self, fields: List[Dict[str, str]], message: str = "Validation failed"):
        super().__init__(
            message=message,
            error_code=ErrorCode.VALIDATION_ERROR,
            details={"fields": fields},
            status_code=400
        )
        self.fields = fields

    @property
    def field_names(self) -> List[str]:
        return [entry["field"] for entry in self.fields]


class UnauthorizedError(TrekHubException):
    """Raised when the token is missing, invalid or expired."""

    def __init__(self, message: str = "Token is not valid"):
        super().__init__(
            message=message,
            error_code=ErrorCode.UNAUTHORIZED,
            status_code=401
        )


class ForbiddenError(TrekHubException):
    """Raised when an authenticated caller does not own the record."""

    def __init__(self, message: str = "Not authorized"):
        super().__init__(
            message=message,
            error_code=ErrorCode.FORBIDDEN,
            status_code=403
        )


class NotFoundError(TrekHubException):
    """Raised when the requested record does not exist."""

    def __init__(self, resource: str = "Resource", resource_id: Optional[Any] = None):
        details = {"resource": resource}
        if resource_id is not None:
            details["id"] = resource_id
        super().__init__(
            message=f"{resource} not found",
            error_code=ErrorCode.NOT_FOUND,
            details=details,
            status_code=404
        )


class DuplicateEmailError(TrekHubException):
    """Raised when signing up with an email that is already registered."""

    def __init__(self):
        super().__init__(
            message="User already exists",
            error_code=ErrorCode.DUPLICATE_EMAIL,
            details={"fields": [{"field": "email", "message": "Email already registered"}]},
            status_code=400
        )


class InvalidCredentialsError(TrekHubException):
    """
    Raised on any failed login.

    Unknown email and wrong password produce the same instance shape so the
    caller cannot tell which one happened.
    """

    def __init__(self):
        super().__init__(
            message="Invalid credentials",
            error_code=ErrorCode.INVALID_CREDENTIALS,
            status_code=400
        )


class StoreUnavailableError(TrekHubException):
    """Raised when the database cannot be reached or a call times out."""

    def __init__(self, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message="Data store is temporarily unavailable",
            error_code=ErrorCode.STORE_UNAVAILABLE,
            details=details,
            status_code=503
        )
