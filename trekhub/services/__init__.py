# Business logic services

from .user_service import UserService, normalize_email
from .trek_service import TrekService, is_owner

__all__ = [
    "UserService",
    "normalize_email",
    "TrekService",
    "is_owner",
]
