from typing import Optional
import bcrypt

from trekhub.config.settings import get_settings

# bcrypt only reads the first 72 bytes of a password
BCRYPT_MAX_PASSWORD_BYTES = 72

# Checked against when the email is unknown so a failed login costs the same
# either way.
_DUMMY_HASH = bcrypt.hashpw(b"trekhub-dummy-password", bcrypt.gensalt(rounds=4)).decode("utf-8")


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    """Hash a password with bcrypt; the salt is generated per call and embedded in the result."""
    if rounds is None:
        rounds = get_settings().security.bcrypt_rounds
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, hashed: Optional[str]) -> bool:
    """
    Verify a password against a stored bcrypt hash.

    A missing hash or an over-long password still costs one bcrypt check and
    then fails, so neither case can be told apart from a wrong password.
    """
    candidate = password.encode("utf-8")
    if len(candidate) > BCRYPT_MAX_PASSWORD_BYTES:
        # No stored password can be this long
        candidate, hashed = candidate[:BCRYPT_MAX_PASSWORD_BYTES], None

    try:
        if not hashed:
            bcrypt.checkpw(candidate, _DUMMY_HASH.encode("utf-8"))
            return False
        return bcrypt.checkpw(candidate, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False
