"""
ORM models for the TrekHub API.

Importing this package registers every mapped class on ``Base.metadata``.
"""

from .user import User
from .trek import Trek, TrekDifficulty

__all__ = [
    "User",
    "Trek",
    "TrekDifficulty",
]
