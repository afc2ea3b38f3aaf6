"""API tests for /auth endpoints."""

from admin_dashboard_api.app.core.security import create_access_token

from conftest import ADMIN, USER, bearer, login


def test_login_returns_token_and_public_user(client):
    resp = client.post("/api/v1/auth/login", json=ADMIN)
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["token"]
    assert body["expiresIn"] == 7 * 24 * 60 * 60
    assert body["user"]["email"] == "admin@example.com"
    assert body["user"]["role"] == "admin"
    assert body["user"]["lastLogin"] is not None
    assert "password" not in body["user"]


def test_login_email_is_case_insensitive(client):
    resp = client.post("/api/v1/auth/login", json={"email": " Admin@Example.com ", "password": "admin123"})
    assert resp.status_code == 200


def test_login_failures_share_one_message(client):
    wrong_password = client.post("/api/v1/auth/login", json={"email": ADMIN["email"], "password": "nope"})
    unknown_email = client.post("/api/v1/auth/login", json={"email": "ghost@example.com", "password": "nope"})
    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json() == {"success": False, "message": "Invalid credentials"}


def test_login_rejects_inactive_account(client, admin_headers):
    client.put("/api/v1/users/2", json={"status": "inactive"}, headers=admin_headers)
    resp = client.post("/api/v1/auth/login", json=USER)
    assert resp.status_code == 401
    assert resp.json()["message"] == "Account is not active"


def test_login_validation_error(client):
    resp = client.post("/api/v1/auth/login", json={"email": "not-an-email", "password": "x"})
    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert body["errors"][0]["field"] == "email"


def test_register_creates_user_role(client):
    resp = client.post(
        "/api/v1/auth/register",
        json={"name": "Jane Doe", "email": "jane@example.com", "password": "secret1", "role": "admin"},
    )
    assert resp.status_code == 201
    user = resp.json()["user"]
    assert user["role"] == "user"
    assert user["username"] == "jane"
    assert user["status"] == "active"

    me = client.get("/api/v1/auth/me", headers=bearer(resp.json()["token"]))
    assert me.json()["email"] == "jane@example.com"


def test_register_duplicate_email(client):
    resp = client.post(
        "/api/v1/auth/register", json={"name": "Admin Two", "email": "admin@example.com", "password": "secret1"}
    )
    assert resp.status_code == 400
    assert resp.json()["message"] == "User already exists"


def test_register_short_password(client):
    resp = client.post("/api/v1/auth/register", json={"name": "Jo", "email": "jo@example.com", "password": "123"})
    assert resp.status_code == 400


def test_me_requires_token(client):
    resp = client.get("/api/v1/auth/me")
    assert resp.status_code == 401
    assert resp.json()["message"] == "Authentication required"
    assert resp.headers["www-authenticate"] == "Bearer"


def test_me_with_garbage_token(client):
    resp = client.get("/api/v1/auth/me", headers=bearer("garbage"))
    assert resp.status_code == 401
    assert resp.json()["message"] == "Invalid or expired token"


def test_refresh_accepts_expired_token(client, settings):
    expired = create_access_token(1, "admin", expires_delta=60, secret=settings.secret_key, now=1_000)
    resp = client.post("/api/v1/auth/refresh", headers=bearer(expired))
    assert resp.status_code == 200
    fresh = resp.json()["token"]
    assert client.get("/api/v1/auth/me", headers=bearer(fresh)).status_code == 200


def test_refresh_rejects_missing_and_forged_tokens(client):
    assert client.post("/api/v1/auth/refresh").json()["message"] == "Token required"
    forged = create_access_token(1, "admin", secret="not-the-server-secret")
    resp = client.post("/api/v1/auth/refresh", headers=bearer(forged))
    assert resp.status_code == 401
    assert resp.json()["message"] == "Invalid token"


def test_refresh_for_deleted_account(client, admin_headers, settings):
    token = create_access_token(2, "user", secret=settings.secret_key)
    client.delete("/api/v1/users/2", headers=admin_headers)
    resp = client.post("/api/v1/auth/refresh", headers=bearer(token))
    assert resp.status_code == 401
    assert resp.json()["message"] == "User not found or inactive"


def test_logout(client):
    token = login(client, USER)
    resp = client.post("/api/v1/auth/logout", headers=bearer(token))
    assert resp.json() == {"success": True, "message": "Logged out successfully"}
