"""JWT issue / verify utilities for session tokens"""
from datetime import datetime, timedelta, timezone
from typing import Dict, Any, Optional
import jwt

from trekhub.config.settings import get_settings
from trekhub.core.exceptions import UnauthorizedError

REQUIRED_CLAIMS = ["sub", "iat", "exp"]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _build_payload(user_id: int, expires_minutes: int, now: datetime) -> Dict[str, Any]:
    return {
        "sub": str(user_id),
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=expires_minutes)).timestamp()),
    }


def create_access_token(
    user_id: int,
    secret: Optional[str] = None,
    expires_minutes: Optional[int] = None,
    now: Optional[datetime] = None,
) -> str:
    security = get_settings().security
    payload = _build_payload(
        user_id,
        expires_minutes if expires_minutes is not None else security.token_expire_minutes,
        now or _utcnow(),
    )
    return jwt.encode(payload, secret or security.jwt_secret, algorithm=security.jwt_algorithm)


def decode_access_token(
    token: str,
    secret: Optional[str] = None,
    now: Optional[datetime] = None,
) -> int:
    """
    Return the user id bound to ``token``.

    The signature is checked by PyJWT (``hmac.compare_digest``); expiry is
    checked here against ``now`` so callers can decide with a fixed clock.

    Raises:
        UnauthorizedError: bad signature, malformed payload or expired token
    """
    security = get_settings().security
    try:
        payload = jwt.decode(
            token,
            secret or security.jwt_secret,
            algorithms=[security.jwt_algorithm],
            options={"require": REQUIRED_CLAIMS, "verify_exp": False, "verify_iat": False},
        )
    except jwt.PyJWTError:
        raise UnauthorizedError()

    try:
        user_id = int(payload["sub"])
        expires_at = int(payload["exp"])
    except (TypeError, ValueError):
        raise UnauthorizedError()

    if (now or _utcnow()).timestamp() >= expires_at:
        raise UnauthorizedError()
    return user_id
