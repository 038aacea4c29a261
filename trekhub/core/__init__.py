"""
Core building blocks for the TrekHub API: persistence, security, tokens,
errors and logging.
"""

from .exceptions import (
    ErrorCode,
    TrekHubException,
    ValidationError,
    UnauthorizedError,
    ForbiddenError,
    NotFoundError,
    DuplicateEmailError,
    InvalidCredentialsError,
    StoreUnavailableError,
)

__all__ = [
    "ErrorCode",
    "TrekHubException",
    "ValidationError",
    "UnauthorizedError",
    "ForbiddenError",
    "NotFoundError",
    "DuplicateEmailError",
    "InvalidCredentialsError",
    "StoreUnavailableError",
]
