"""
Authentication middleware for session-token protected routes.

Each request is either unauthenticated or authenticated as one user id. The
decision is made by ``resolve_identity``, a pure function of the request
headers, the signing secret and the clock.
"""

from datetime import datetime
from starlette.datastructures import Headers
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
import logging
from typing import Mapping, Optional, Tuple

from trekhub.config.settings import get_settings
from trekhub.core.error_handlers import error_handler
from trekhub.core.exceptions import UnauthorizedError
from trekhub.core.jwt import decode_access_token

logger = logging.getLogger(__name__)

PROTECTED_PREFIXES: Tuple[str, ...] = ("/treks", "/auth/me")


def resolve_identity(
    headers: Mapping[str, str],
    secret: Optional[str] = None,
    now: Optional[datetime] = None,
    header_name: Optional[str] = None,
) -> int:
    """
    Return the user id proven by the token header.

    Args:
        headers: Request headers (case-insensitive mapping or plain dict)
        secret: Signing secret; defaults to the configured one
        now: Clock used for the expiry check
        header_name: Token header; defaults to the configured one

    Raises:
        UnauthorizedError: if the token is missing, invalid or expired
    """
    header_name = header_name or get_settings().security.token_header
    if not isinstance(headers, Headers):
        headers = Headers(headers=dict(headers))
    token = headers.get(header_name)
    if not token or not token.strip():
        raise UnauthorizedError("No token, authorization denied")
    return decode_access_token(token.strip(), secret=secret, now=now)


def is_protected(path: str) -> bool:
    return any(path == prefix or path.startswith(prefix + "/") for prefix in PROTECTED_PREFIXES)


class AuthenticationMiddleware(BaseHTTPMiddleware):
    """
    Rejects unauthenticated requests to protected paths before they reach a
    handler, and stores the caller's id in ``request.state.user_id``.
    """

    def __init__(self, app, secret: Optional[str] = None):
        super().__init__(app)
        self.secret = secret

    async def dispatch(self, request: Request, call_next):
        # CORS preflight carries no credentials
        if request.method == "OPTIONS" or not is_protected(request.url.path):
            return await call_next(request)

        try:
            request.state.user_id = resolve_identity(request.headers, secret=self.secret)
        except UnauthorizedError as exc:
            logger.warning(
                f"Rejected unauthenticated request {getattr(request.state, 'request_id', 'unknown')}",
                extra={
                    'request_id': getattr(request.state, 'request_id', 'unknown'),
                    'path': request.url.path,
                    'client_ip': request.client.host if request.client else 'unknown',
                }
            )
            return error_handler.render(request, exc)

        logger.debug(
            f"Request {getattr(request.state, 'request_id', 'unknown')} authenticated as user {request.state.user_id}"
        )
        return await call_next(request)
