"""
Tests for the main application endpoints.
"""
import pytest

from medassist.config import settings, validate_runtime_config, PLACEHOLDER_SECRET_KEY


def test_root_endpoint(client):
    """
    Test the root endpoint returns a welcome message.
    """
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Welcome to Medical Assistance API"
    assert data["version"] == "1.0.0"


def test_health_check(client):
    """
    Test the health check endpoint returns a healthy status.
    """
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["database"] == "connected"


def test_request_id_is_echoed(client):
    response = client.get("/", headers={"X-Request-ID": "req-42"})

    assert response.headers["X-Request-ID"] == "req-42"
    assert "X-Process-Time" in response.headers


def test_request_id_is_generated(client):
    response = client.get("/")

    assert response.headers["X-Request-ID"]


def test_production_refuses_placeholder_secret(monkeypatch):
    monkeypatch.setattr(settings, "app_env", "production")
    monkeypatch.setattr(settings, "secret_key", PLACEHOLDER_SECRET_KEY)

    with pytest.raises(RuntimeError):
        validate_runtime_config()


def test_production_accepts_configured_secret(monkeypatch):
    monkeypatch.setattr(settings, "app_env", "production")
    monkeypatch.setattr(settings, "secret_key", "a-real-secret")

    validate_runtime_config()
