"""Shared fixtures: an application over a temporary data directory."""

import pytest
from fastapi.testclient import TestClient

from admin_dashboard_api.app.core.config import Settings
from admin_dashboard_api.app.main import create_app

ADMIN = {"email": "admin@example.com", "password": "admin123"}
USER = {"email": "user1@example.com", "password": "user123"}


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture()
def settings(tmp_path):
    return Settings(
        data_dir=str(tmp_path / "data"),
        upload_dir=str(tmp_path / "uploads"),
        secret_key="test-secret",
        log_level="WARNING",
        log_file="",
    )


@pytest.fixture()
def client(settings):
    """A running application; leaving the block drains the activity log."""
    with TestClient(create_app(settings)) as test_client:
        yield test_client


def login(client, credentials) -> str:
    resp = client.post("/api/v1/auth/login", json=credentials)
    assert resp.status_code == 200, resp.text
    return resp.json()["token"]


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def admin_headers(client):
    return bearer(login(client, ADMIN))


@pytest.fixture()
def user_headers(client):
    return bearer(login(client, USER))
