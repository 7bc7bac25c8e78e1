"""Tests for the Flask application wiring."""


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json == {"status": "ok"}


def test_auth_routes_registered(client):
    from ztauth_core.main import app

    rules = {(rule.rule, method) for rule in app.url_map.iter_rules() for method in rule.methods}

    assert ("/auth/register", "POST") in rules
    assert ("/auth/login", "POST") in rules
    assert ("/auth/me", "GET") in rules
    assert ("/auth/me", "PUT") in rules
    assert ("/auth/password-reset", "POST") in rules
    assert ("/auth/password-reset/confirm", "POST") in rules
    assert ("/api/v1/users", "POST") in rules


def test_unknown_route(client):
    assert client.get("/nope").status_code == 404
