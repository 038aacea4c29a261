"""Request/response schemas for the TrekHub API."""

from .base import ErrorResponse, Message, to_field_errors
from .user import UserCreate, UserRead, LoginRequest, Token
from .trek import TrekCreate, TrekUpdate, TrekRead, TrekPage, validate_trek_payload

__all__ = [
    "ErrorResponse",
    "Message",
    "to_field_errors",
    "UserCreate",
    "UserRead",
    "LoginRequest",
    "Token",
    "TrekCreate",
    "TrekUpdate",
    "TrekRead",
    "TrekPage",
    "validate_trek_payload",
]
