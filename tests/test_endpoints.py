"""Tests for the /auth HTTP endpoints."""

from contextlib import closing

import pytest

from ztauth_core.db import get_core


def _register(client, email="ann@example.com", password="Abc123", name="Ann"):
    return client.post(
        "/auth/register",
        json={"email": email, "password": password, "name": name},
    )


def _login(client, email="ann@example.com", password="Abc123"):
    response = client.post("/auth/login", json={"email": email, "password": password})
    return response.json["access_token"]


def _auth(token):
    return {"Authorization": f"Bearer {token}"}


def _set_options(**columns):
    clause = ", ".join(f"{name} = ?" for name in columns)
    with closing(get_core()) as core:
        core.connection.execute(
            f"UPDATE global_options SET {clause} WHERE id = 1",
            list(columns.values())
        )
        core.commit()


def _reset_token(transport):
    html = transport.sent[-1].html
    start = html.index("token=") + len("token=")
    return html[start:html.index('"', start)]


class TestRegisterEndpoint:

    def test_register(self, client):
        response = _register(client)

        assert response.status_code == 201
        user = response.json["user"]
        assert user["email"] == "ann@example.com"
        assert user["role"] == "ADMIN"
        assert "hash" not in user
        assert "password" not in user

    def test_second_user(self, client):
        _register(client)
        response = _register(client, email="bob@example.com", name="Bob")

        assert response.json["user"]["role"] == "USER"

    def test_form_data_accepted(self, client):
        response = client.post(
            "/auth/register",
            data={"email": "ann@example.com", "password": "Abc123", "name": "Ann"},
        )
        assert response.status_code == 201

    def test_invalid_email(self, client):
        response = _register(client, email="not-an-email")

        assert response.status_code == 400
        assert response.json["error"]["type"] == "ValidationError"
        assert response.json["error"]["details"]["errors"][0]["loc"] == ["email"]

    def test_short_name(self, client):
        assert _register(client, name="Al").status_code == 400

    def test_weak_password(self, client):
        response = _register(client, password="abcdef")

        assert response.status_code == 400
        assert response.json["error"]["type"] == "PolicyViolation"
        assert response.json["error"]["message"] == "Password does not meet the requirements!"

    def test_duplicate_email(self, client):
        _register(client)
        response = _register(client, email="ANN@example.com")

        assert response.status_code == 409
        assert response.json["error"]["type"] == "Conflict"

    def test_registration_disabled(self, client):
        _set_options(enable_registration=0)

        response = _register(client)

        assert response.status_code == 400
        assert response.json["error"]["type"] == "RegistrationDisabled"

    def test_body_must_be_object(self, client):
        response = client.post("/auth/register", json=["ann@example.com"])
        assert response.status_code == 400

    def test_admin_notified(self, client, transport):
        _register(client)
        _set_options(user_registration_notification=1)

        response = _register(client, email="bob@example.com", name="Bob")

        assert response.status_code == 201
        assert [m.to for m in transport.sent] == ["ann@example.com"]

    def test_notification_failure_still_registers(self, client, transport):
        _register(client)
        _set_options(user_registration_notification=1)
        transport.fail_for.add("ann@example.com")

        response = _register(client, email="bob@example.com", name="Bob")

        assert response.status_code == 201

    def test_broken_template_is_server_error(self, client):
        _register(client)
        _set_options(user_registration_notification=1, notification_template="[]")

        response = _register(client, email="bob@example.com", name="Bob")

        assert response.status_code == 500
        assert response.json["error"]["type"] == "TemplateError"


class TestLoginEndpoint:

    def test_login(self, client):
        _register(client)

        response = client.post("/auth/login", json={"email": "ann@example.com", "password": "Abc123"})

        assert response.status_code == 200
        assert response.json["token_type"] == "bearer"
        assert response.json["access_token"]
        assert response.json["user"]["email"] == "ann@example.com"

    def test_wrong_password(self, client):
        _register(client)

        response = client.post("/auth/login", json={"email": "ann@example.com", "password": "Nope123"})

        assert response.status_code == 401


class TestMeEndpoint:

    def test_get_me(self, client):
        _register(client)
        token = _login(client)

        response = client.get("/auth/me", headers=_auth(token))

        assert response.status_code == 200
        assert response.json["name"] == "Ann"
        assert response.json["last_login"] is not None

    def test_requires_token(self, client):
        response = client.get("/auth/me")

        assert response.status_code == 401
        assert response.json["error"]["details"]["code"] == "missing_auth"

    def test_update_name(self, client):
        _register(client)
        token = _login(client)

        response = client.put("/auth/me", json={"name": "Ann Lee"}, headers=_auth(token))

        assert response.status_code == 200
        assert response.json["name"] == "Ann Lee"

    def test_update_requires_token(self, client):
        response = client.put("/auth/me", json={"name": "Ann Lee"})
        assert response.status_code == 401

    def test_partial_password_fields(self, client):
        _register(client)
        token = _login(client)

        response = client.put("/auth/me", json={"new_password": "Xyz789"}, headers=_auth(token))

        assert response.status_code == 400
        assert response.json["error"]["message"] == "Please fill all fields!"

    def test_wrong_old_password(self, client):
        _register(client)
        token = _login(client)

        response = client.put("/auth/me", json={
            "password": "Wrong99",
            "new_password": "Xyz789",
            "repeat_new_password": "Xyz789",
        }, headers=_auth(token))

        assert response.status_code == 401
        assert response.json["error"]["message"] == "Old password is incorrect!"

    def test_change_password(self, client):
        _register(client)
        token = _login(client)

        response = client.put("/auth/me", json={
            "password": "Abc123",
            "new_password": "Xyz789",
            "repeat_new_password": "Xyz789",
        }, headers=_auth(token))

        assert response.status_code == 200
        assert client.post(
            "/auth/login", json={"email": "ann@example.com", "password": "Xyz789"}
        ).status_code == 200

    def test_email_taken(self, client):
        _register(client)
        _register(client, email="bob@example.com", name="Bob")
        token = _login(client)

        response = client.put("/auth/me", json={"email": "bob@example.com"}, headers=_auth(token))

        assert response.status_code == 409


class TestPasswordResetEndpoints:

    def test_request_is_enumeration_safe(self, client, transport):
        _register(client)

        known = client.post("/auth/password-reset", json={"email": "ann@example.com"})
        unknown = client.post("/auth/password-reset", json={"email": "nobody@example.com"})

        assert known.status_code == unknown.status_code == 200
        assert known.json == unknown.json == {"message": "Mail sent if email exist!"}
        assert len(transport.sent) == 1

    def test_delivery_failure_still_succeeds(self, client, transport):
        _register(client)
        transport.fail_for.add("ann@example.com")

        response = client.post("/auth/password-reset", json={"email": "ann@example.com"})

        assert response.status_code == 200

    def test_redeem(self, client, transport):
        _register(client)
        client.post("/auth/password-reset", json={"email": "ann@example.com"})
        token = _reset_token(transport)

        response = client.post("/auth/password-reset/confirm", json={
            "token": token, "password": "Xyz789", "new_password": "Xyz789",
        })

        assert response.status_code == 200
        assert response.json == {"message": "Password has been reset"}
        assert _login(client, password="Xyz789")

    def test_redeem_twice(self, client, transport):
        _register(client)
        client.post("/auth/password-reset", json={"email": "ann@example.com"})
        body = {"token": _reset_token(transport), "password": "Xyz789", "new_password": "Xyz789"}

        client.post("/auth/password-reset/confirm", json=body)
        response = client.post("/auth/password-reset/confirm", json=body)

        assert response.status_code == 401
        assert response.json["error"]["message"] == "token is not valid, please try again!"

    @pytest.mark.parametrize("token", ["garbage", "a.b.c"])
    def test_redeem_invalid_token(self, client, token):
        response = client.post("/auth/password-reset/confirm", json={
            "token": token, "password": "Xyz789", "new_password": "Xyz789",
        })

        assert response.status_code == 401
        assert response.json["error"]["message"] == "token is not valid, please try again!"

    def test_redeem_mismatch(self, client):
        response = client.post("/auth/password-reset/confirm", json={
            "token": "whatever", "password": "Xyz789", "new_password": "Xyz788",
        })

        assert response.status_code == 400
