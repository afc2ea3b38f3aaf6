"""API tests for /users endpoints."""

from conftest import USER, bearer, login


def _create(client, headers, **overrides):
    payload = {"name": "Test User", "email": "test@example.com", "password": "secret1"}
    payload.update(overrides)
    return client.post("/api/v1/users", json=payload, headers=headers)


# ---- listing -------------------------------------------------------------------


def test_list_requires_admin(client, user_headers):
    resp = client.get("/api/v1/users", headers=user_headers)
    assert resp.status_code == 403
    assert resp.json() == {"success": False, "message": "Admin access required"}


def test_list_without_token(client):
    assert client.get("/api/v1/users").status_code == 401


def test_list_paginates_and_hides_passwords(client, admin_headers):
    for i in range(12):
        _create(client, admin_headers, name=f"Person {i}", email=f"p{i}@example.com")
    resp = client.get("/api/v1/users", params={"page": 2, "limit": 5, "sortBy": "id", "sortOrder": "asc"},
                      headers=admin_headers)
    body = resp.json()
    assert resp.status_code == 200
    assert [u["id"] for u in body["data"]] == [6, 7, 8, 9, 10]
    assert body["pagination"] == {"total": 14, "page": 2, "limit": 5, "totalPages": 3}
    assert all("password" not in u for u in body["data"])


def test_list_search_and_filters(client, admin_headers):
    _create(client, admin_headers, name="Grace Hopper", email="grace@example.com", role="admin")
    by_search = client.get("/api/v1/users", params={"search": "HOPPER"}, headers=admin_headers).json()
    assert [u["email"] for u in by_search["data"]] == ["grace@example.com"]
    admins = client.get("/api/v1/users", params={"role": "admin", "sortBy": "id", "sortOrder": "asc"},
                        headers=admin_headers).json()
    assert [u["id"] for u in admins["data"]] == [1, 3]


def test_list_rejects_bad_paging(client, admin_headers):
    assert client.get("/api/v1/users", params={"page": 0}, headers=admin_headers).status_code == 400
    assert client.get("/api/v1/users", params={"sortOrder": "up"}, headers=admin_headers).status_code == 400


# ---- create / read -------------------------------------------------------------


def test_admin_creates_user_with_role(client, admin_headers):
    resp = _create(client, admin_headers, role="admin")
    assert resp.status_code == 201
    data = resp.json()["data"]
    assert data["role"] == "admin"
    assert data["id"] == 3
    assert "password" not in data
    assert _create(client, admin_headers).json()["message"] == "User already exists"


def test_user_reads_self_but_not_others(client, user_headers):
    assert client.get("/api/v1/users/2", headers=user_headers).json()["data"]["email"] == USER["email"]
    resp = client.get("/api/v1/users/1", headers=user_headers)
    assert resp.status_code == 403


def test_unknown_user(client, admin_headers):
    resp = client.get("/api/v1/users/999", headers=admin_headers)
    assert resp.status_code == 404
    assert resp.json()["message"] == "User not found"


# ---- update ------------------------------------------------------------------


def test_user_updates_own_profile(client, user_headers):
    resp = client.put("/api/v1/users/2", json={"name": "Johnny", "password": "ignored"}, headers=user_headers)
    assert resp.status_code == 200
    assert resp.json()["data"]["name"] == "Johnny"
    # password is not an updatable profile field
    assert login(client, USER)


def test_user_cannot_change_role(client, user_headers):
    resp = client.put("/api/v1/users/2", json={"role": "admin"}, headers=user_headers)
    assert resp.status_code == 403
    assert resp.json()["message"] == "Only admin can change roles"


def test_admin_changes_role(client, admin_headers):
    resp = client.put("/api/v1/users/2", json={"role": "admin"}, headers=admin_headers)
    assert resp.json()["data"]["role"] == "admin"


def test_update_to_taken_email(client, user_headers):
    resp = client.put("/api/v1/users/2", json={"email": "admin@example.com"}, headers=user_headers)
    assert resp.status_code == 400


def test_update_unknown_user(client, admin_headers):
    assert client.put("/api/v1/users/50", json={"name": "Nobody"}, headers=admin_headers).status_code == 404


# ---- delete ------------------------------------------------------------------


def test_admin_cannot_delete_self(client, admin_headers):
    resp = client.delete("/api/v1/users/1", headers=admin_headers)
    assert resp.status_code == 400
    assert resp.json()["message"] == "Cannot delete your own account"
    assert client.get("/api/v1/users/1", headers=admin_headers).status_code == 200


def test_delete_user(client, admin_headers, user_headers):
    assert client.delete("/api/v1/users/2", headers=user_headers).status_code == 403
    assert client.delete("/api/v1/users/2", headers=admin_headers).json()["success"] is True
    assert client.delete("/api/v1/users/2", headers=admin_headers).status_code == 404
    # the deleted account's token no longer authenticates
    resp = client.get("/api/v1/auth/me", headers=user_headers)
    assert resp.status_code == 401
    assert resp.json()["message"] == "User not found"


# ---- password ----------------------------------------------------------------


def test_change_own_password_requires_current(client, user_headers):
    resp = client.put("/api/v1/users/2/password", json={"currentPassword": "wrong", "newPassword": "newpass1"},
                      headers=user_headers)
    assert resp.status_code == 400
    assert resp.json()["message"] == "Current password is incorrect"

    resp = client.put("/api/v1/users/2/password", json={"currentPassword": "user123", "newPassword": "newpass1"},
                      headers=user_headers)
    assert resp.status_code == 200
    assert client.post("/api/v1/auth/login", json=USER).status_code == 401
    assert login(client, {"email": USER["email"], "password": "newpass1"})


def test_admin_resets_other_password(client, admin_headers):
    resp = client.put("/api/v1/users/2/password", json={"newPassword": "reset99"}, headers=admin_headers)
    assert resp.status_code == 200
    token = login(client, {"email": USER["email"], "password": "reset99"})
    assert client.get("/api/v1/auth/me", headers=bearer(token)).status_code == 200


def test_new_password_too_short(client, admin_headers):
    resp = client.put("/api/v1/users/2/password", json={"newPassword": "123"}, headers=admin_headers)
    assert resp.status_code == 400
