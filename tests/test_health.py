"""Tests for health endpoint."""

from fastapi.testclient import TestClient

from futurely.main import app

client = TestClient(app)


def test_health_endpoint():
    """Test that health endpoint returns healthy status."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert "version" in data
    assert "environment" in data


def test_cors_allows_subdomain_origin():
    """Preflight from an unbeated.com subdomain is allowed by the origin regex."""
    response = client.options(
        "/health",
        headers={
            "Origin": "https://app.unbeated.com",
            "Access-Control-Request-Method": "GET",
        },
    )
    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "https://app.unbeated.com"
    assert response.headers["access-control-max-age"] == "86400"


def test_cors_rejects_unknown_origin():
    """Preflight from an unrelated origin is not allowed."""
    response = client.options(
        "/health",
        headers={
            "Origin": "https://evil.example.com",
            "Access-Control-Request-Method": "GET",
        },
    )
    assert "access-control-allow-origin" not in response.headers
