"""Users API: registration, verification, sessions, profile and recovery."""

from __future__ import annotations

from conftest import PASSWORD, read_envelope, register_and_login


def _envelope_ok(response, status=200):
    assert read_envelope(response, status).type == "success"
    return response.get_json()


def test_register_returns_public_fields(client):
    response = client.post(
        "/api/v1/users/",
        json={"name": "Ana", "lastname": "García", "email": "ANA@example.com", "password": PASSWORD},
    )
    body = _envelope_ok(response, 201)
    assert set(body["data"]) == {"id", "name", "lastname", "email"}
    assert body["data"]["email"] == "ana@example.com"


def test_register_validation_errors_are_field_level(client):
    response = client.post("/api/v1/users/", json={"name": "Ana", "email": "not-an-email"})
    body = response.get_json()
    assert response.status_code == 422
    assert body["type"] == "error"
    assert {"lastname", "email", "password"} <= set(body["errors"])


def test_register_rejects_short_password_and_duplicates(client):
    payload = {"name": "Ana", "lastname": "García", "email": "ana@example.com", "password": "short"}
    assert client.post("/api/v1/users/", json=payload).status_code == 400

    payload["password"] = PASSWORD
    assert client.post("/api/v1/users/", json=payload).status_code == 201
    assert client.post("/api/v1/users/", json=payload).status_code == 400


def test_non_object_body_is_rejected(client):
    response = client.post("/api/v1/users/login", json=["ana@example.com"])
    assert response.status_code == 400
    assert response.get_json()["type"] == "error"


def test_login_before_verification_is_unauthorized(client):
    client.post(
        "/api/v1/users/",
        json={"name": "Ana", "lastname": "García", "email": "ana@example.com", "password": PASSWORD},
    )
    response = client.post("/api/v1/users/login", json={"email": "ana@example.com", "password": PASSWORD})
    assert response.status_code == 401
    assert response.get_json()["type"] == "error"


def test_password_surrounding_spaces_are_significant(client):
    padded = "  secret-pass  "
    register_and_login(client, password=padded)

    trimmed = client.post("/api/v1/users/login", json={"email": "ana@example.com", "password": "secret-pass"})
    assert trimmed.status_code == 401

    exact = client.post("/api/v1/users/login", json={"email": "ana@example.com", "password": padded})
    assert exact.status_code == 200


def test_full_login_flow_and_logout(client):
    auth = register_and_login(client)

    me = client.get(f"/api/v1/users/{auth['user_id']}", headers=auth["headers"])
    body = _envelope_ok(me)
    assert body["data"]["devices"] == []
    assert body["data"]["configurations"] == []
    assert "password_hash" not in body["data"]

    _envelope_ok(client.post("/api/v1/users/logout", headers=auth["headers"]))
    assert client.get(f"/api/v1/users/{auth['user_id']}", headers=auth["headers"]).status_code == 401


def test_user_listing_is_public_and_hides_credentials(client, auth):
    body = _envelope_ok(client.get("/api/v1/users/"))
    assert [user["email"] for user in body["data"]] == ["ana@example.com"]
    assert all("password_hash" not in user and "verification_code" not in user for user in body["data"])


def test_protected_routes_require_a_token(client):
    assert client.get("/api/v1/habits/").status_code == 401
    response = client.get("/api/v1/habits/", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401
    assert response.get_json()["message"] == "Invalid or expired token"


def test_get_missing_user_is_not_found(client, auth):
    assert client.get("/api/v1/users/404", headers=auth["headers"]).status_code == 404


def test_resend_verification_code(client, container):
    response = client.post(
        "/api/v1/users/",
        json={"name": "Ana", "lastname": "García", "email": "ana@example.com", "password": PASSWORD},
    )
    user_id = response.get_json()["data"]["id"]

    _envelope_ok(client.post(f"/api/v1/users/{user_id}/verification-code"))
    assert container.user_repo.get_user(user_id, with_credentials=True)["verification_code"]
    assert client.post("/api/v1/users/404/verification-code").status_code == 404


def test_update_profile_partially(client, auth):
    body = _envelope_ok(client.put("/api/v1/users/me", json={"name": "Anita"}, headers=auth["headers"]))
    assert body["data"]["name"] == "Anita"
    assert body["data"]["lastname"] == "García"


def test_change_password_keeps_current_session(client, auth):
    response = client.put(
        "/api/v1/users/me/password",
        json={"old_password": PASSWORD, "new_password": "another-long-pass"},
        headers=auth["headers"],
    )
    _envelope_ok(response)
    assert client.get("/api/v1/habits/", headers=auth["headers"]).status_code == 200

    wrong = client.put(
        "/api/v1/users/me/password",
        json={"old_password": PASSWORD, "new_password": "yet-another-pass"},
        headers=auth["headers"],
    )
    assert wrong.status_code == 401


def test_delete_other_user_is_forbidden(client, auth, login_user):
    bea = login_user("bea@example.com")

    response = client.delete(f"/api/v1/users/{bea['user_id']}", headers=auth["headers"])
    assert response.status_code == 403
    assert client.delete("/api/v1/users/404", headers=auth["headers"]).status_code == 404

    _envelope_ok(client.delete(f"/api/v1/users/{bea['user_id']}", headers=bea["headers"]))


def test_delete_me_cascades_devices(client, auth, container):
    client.post("/api/v1/devices/provision", json={"category": "pesa", "name": "Scale"}, headers=auth["headers"])

    body = _envelope_ok(client.delete("/api/v1/users/me", headers=auth["headers"]))
    assert body["data"]["id"] == auth["user_id"]
    assert container.device_repo.list_devices() == []
    assert container.sensor_repo.list_sensors() == []


def test_password_recovery_flow(client, auth, container):
    assert client.post("/api/v1/users/password-recovery", json={"email": "nobody@example.com"}).status_code == 400

    _envelope_ok(client.post("/api/v1/users/password-recovery", json={"email": "ana@example.com"}))
    code = container.user_repo.get_user(auth["user_id"], with_credentials=True)["verification_code"]

    bad = client.post(
        "/api/v1/users/password-recovery/reset",
        json={"email": "ana@example.com", "verification_code": "x", "new_password": "recovered-pass"},
    )
    assert bad.status_code == 401

    response = client.post(
        "/api/v1/users/password-recovery/reset",
        json={"email": "ana@example.com", "verification_code": code, "new_password": "recovered-pass"},
    )
    _envelope_ok(response)

    # Every token was revoked by the reset.
    assert client.get("/api/v1/habits/", headers=auth["headers"]).status_code == 401
    login = client.post("/api/v1/users/login", json={"email": "ana@example.com", "password": "recovered-pass"})
    assert login.status_code == 200
