"""
Middleware package for FastAPI application.
"""

from .auth import AuthenticationMiddleware, resolve_identity
from .request_context import RequestContextMiddleware

__all__ = ["AuthenticationMiddleware", "RequestContextMiddleware", "resolve_identity"]
