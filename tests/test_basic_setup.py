"""
Basic test to verify the project setup is working correctly.
"""

from trekhub.main import app, create_app


def test_app_creation():
    """Test that the FastAPI app can be created successfully."""
    assert app is not None
    assert app.title == "TrekHub API"
    assert create_app() is not app


def test_root_endpoint(client):
    """Test the root endpoint returns expected response."""
    response = client.get("/")

    assert response.status_code == 200
    data = response.json()
    assert "message" in data
    assert "version" in data
    assert data["status"] == "running"


def test_health_endpoint(client):
    """Health reports the database and error counters."""
    client.get("/treks")  # one rejected request

    response = client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["details"]["database"]["connection"] == "ok"
    assert data["error_statistics"]["error_counts"] == {"UNAUTHORIZED": 1}


def test_routes_registered():
    paths = {route.path for route in app.routes}
    assert {"/auth/signup", "/auth/login", "/auth/me", "/treks", "/treks/{trek_id}"} <= paths
