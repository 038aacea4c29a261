import jwt
import pytest
from datetime import datetime, timedelta, timezone

from trekhub.core.exceptions import UnauthorizedError
from trekhub.core.jwt import create_access_token, decode_access_token
from trekhub.core.security import hash_password, verify_password

NOW = datetime(2026, 10, 19, 9, 0, tzinfo=timezone.utc)


def test_password_hash_and_verify():
    raw = "SuperSecurePass123!"
    hashed = hash_password(raw)
    assert hashed != raw
    assert hashed.startswith("$2")
    assert verify_password(raw, hashed)
    assert not verify_password("wrong", hashed)


def test_same_password_gets_a_fresh_salt():
    assert hash_password("repeatable") != hash_password("repeatable")


def test_verify_password_without_stored_hash():
    assert not verify_password("anything", None)
    assert not verify_password("anything", "not-a-bcrypt-hash")


def test_issue_and_verify_token():
    token = create_access_token(42, now=NOW)
    assert decode_access_token(token, now=NOW + timedelta(minutes=5)) == 42


def test_token_carries_only_subject_and_times():
    token = create_access_token(42, now=NOW)
    claims = jwt.decode(token, options={"verify_signature": False})
    assert set(claims) == {"sub", "iat", "exp"}
    assert claims["exp"] - claims["iat"] == 60 * 60


def test_token_fails_after_expiry():
    token = create_access_token(7, expires_minutes=30, now=NOW)
    assert decode_access_token(token, now=NOW + timedelta(minutes=29)) == 7
    with pytest.raises(UnauthorizedError):
        decode_access_token(token, now=NOW + timedelta(minutes=30))
    with pytest.raises(UnauthorizedError):
        decode_access_token(token, now=NOW + timedelta(days=1))


def test_token_signed_with_other_secret_is_rejected():
    token = create_access_token(7, secret="someone-else", now=NOW)
    with pytest.raises(UnauthorizedError):
        decode_access_token(token, now=NOW)


def test_tampered_token_is_rejected():
    token = create_access_token(7, now=NOW)
    header, payload, signature = token.split(".")
    forged_payload = jwt.encode(
        {"sub": "8", "iat": int(NOW.timestamp()), "exp": int(NOW.timestamp()) + 3600},
        "test-secret",
    ).split(".")[1]
    with pytest.raises(UnauthorizedError):
        decode_access_token(f"{header}.{forged_payload}.{signature}", now=NOW)


@pytest.mark.parametrize("token", ["", "abc", "a.b.c"])
def test_malformed_token_is_rejected(token):
    with pytest.raises(UnauthorizedError):
        decode_access_token(token, now=NOW)


def test_token_with_non_numeric_subject_is_rejected():
    token = jwt.encode(
        {"sub": "alice", "iat": int(NOW.timestamp()), "exp": int(NOW.timestamp()) + 60},
        "test-secret",
        algorithm="HS256",
    )
    with pytest.raises(UnauthorizedError):
        decode_access_token(token, now=NOW)


def test_token_without_expiry_is_rejected():
    token = jwt.encode({"sub": "1", "iat": int(NOW.timestamp())}, "test-secret", algorithm="HS256")
    with pytest.raises(UnauthorizedError):
        decode_access_token(token, now=NOW)


def test_overlong_password_never_verifies():
    stored = hash_password("a" * 72)
    assert not verify_password("a" * 80, stored)
    assert not verify_password("a" * 80, None)
