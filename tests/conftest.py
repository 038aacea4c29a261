"""
Shared fixtures: an in-memory SQLite store, an app client and users with tokens.
"""
import os

# Must be set before trekhub builds its settings and engine
os.environ["ENVIRONMENT"] = "testing"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECURITY_JWT_SECRET"] = "test-secret"
os.environ["SECURITY_BCRYPT_ROUNDS"] = "4"

import pytest
from fastapi.testclient import TestClient

from trekhub.core.db import Base, SessionLocal, engine, init_db
from trekhub.core.error_handlers import error_handler
from trekhub.core.jwt import create_access_token
from trekhub.main import app
from trekhub.services.user_service import UserService

TEST_PASSWORD = "Passw0rd!"


@pytest.fixture(autouse=True)
def _fresh_database():
    Base.metadata.drop_all(engine)
    init_db()
    error_handler.reset()
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def db_session():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def test_user(db_session):
    return UserService(db_session).register("Test User", "test@example.com", TEST_PASSWORD)


@pytest.fixture
def other_user(db_session):
    return UserService(db_session).register("Other User", "other@example.com", TEST_PASSWORD)


@pytest.fixture
def auth_headers(test_user):
    return {"x-auth-token": create_access_token(test_user.id)}


@pytest.fixture
def other_headers(other_user):
    return {"x-auth-token": create_access_token(other_user.id)}


@pytest.fixture
def trek_payload():
    return {
        "name": "Everest Base Camp",
        "location": "Khumbu, Nepal",
        "difficulty": "Hard",
        "price": 1450.0,
        "images": ["https://example.com/ebc-1.jpg", "https://example.com/ebc-2.jpg"],
    }


@pytest.fixture
def test_password():
    return TEST_PASSWORD
