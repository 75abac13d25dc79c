from __future__ import annotations

import pytest
from flask import Flask
from flask.testing import FlaskClient

from authapi.app import create_app
from authapi.infrastructure.db import ENGINE, Base, SessionLocal
from authapi.infrastructure.db.models import User

ALICE = {
    "name": "Alice",
    "email": "alice@example.com",
    "password": "secret123",
    "passwordConf": "secret123",
}


@pytest.fixture(autouse=True)
def reset_database() -> None:
    Base.metadata.drop_all(bind=ENGINE)
    Base.metadata.create_all(bind=ENGINE)
    yield
    Base.metadata.drop_all(bind=ENGINE)


@pytest.fixture()
def app() -> Flask:
    return create_app()


def _register_and_login(client: FlaskClient, body: dict = ALICE) -> str:
    assert client.post("/api/auth/register", json=body).status_code == 201
    login = client.post(
        "/api/auth/login", json={"email": body["email"], "password": body["password"]}
    )
    assert login.status_code == 200
    return login.get_json()["accessToken"]


def test_register_login_logout_flow(app: Flask) -> None:
    with app.test_client() as client:
        access_token = _register_and_login(client)
        assert client.get_cookie("access_token").value == access_token
        assert client.get_cookie("refresh_token") is not None
        assert client.get_cookie("logged_in").value == "true"

        assert client.get("/api/users").status_code == 200

        logout = client.get("/api/auth/logout")
        assert logout.status_code == 200
        assert logout.get_json() == {"status": "success"}
        assert client.get_cookie("access_token") is None

        reused = client.get(
            "/api/users", headers={"Authorization": f"Bearer {access_token}"}
        )
        assert reused.status_code == 401
        assert reused.get_json()["error"] == "session_expired"

    session = SessionLocal()
    try:
        assert session.query(User).count() == 1
        assert session.query(User).one().password_hash != "secret123"
    finally:
        session.close()


def test_register_duplicate_email_returns_409(app: Flask) -> None:
    with app.test_client() as client:
        assert client.post("/api/auth/register", json=ALICE).status_code == 201
        duplicate = client.post(
            "/api/auth/register", json={**ALICE, "email": "ALICE@example.com"}
        )

    assert duplicate.status_code == 409
    assert duplicate.get_json()["message"] == "User with that email already exist"


def test_login_with_wrong_password_returns_400(app: Flask) -> None:
    with app.test_client() as client:
        client.post("/api/auth/register", json=ALICE)
        response = client.post(
            "/api/auth/login", json={"email": "alice@example.com", "password": "wrong-pass"}
        )

    assert response.status_code == 400
    assert response.get_json()["message"] == "Invalid email or password"
    assert "Set-Cookie" not in response.headers


def test_refresh_until_session_is_evicted(app: Flask) -> None:
    container = app.extensions["authapi.container"]

    with app.test_client() as client:
        _register_and_login(client)

        refreshed = client.get("/api/auth/refresh")
        assert refreshed.status_code == 200
        new_token = refreshed.get_json()["accessToken"]
        assert client.get_cookie("access_token").value == new_token
        assert client.get("/api/users").status_code == 200

        container.session_cache.clear()

        rejected = client.get("/api/auth/refresh")
        assert rejected.status_code == 403
        assert rejected.get_json()["message"] == "Could not refresh access token"


def test_change_password_round_trip(app: Flask) -> None:
    with app.test_client() as client:
        _register_and_login(client)

        wrong = client.put(
            "/api/auth/reset",
            json={"oldPassword": "not-my-pass", "password": "another-pass", "passwordConf": "another-pass"},
        )
        assert wrong.status_code == 403
        assert wrong.get_json()["message"] == "Invalid password"

        same = client.put(
            "/api/auth/reset",
            json={"oldPassword": "secret123", "password": "secret123", "passwordConf": "secret123"},
        )
        assert same.status_code == 400

        changed = client.put(
            "/api/auth/reset",
            json={"oldPassword": "secret123", "password": "another-pass", "passwordConf": "another-pass"},
        )
        assert changed.status_code == 200
        assert changed.get_json()["data"]["user"]["email"] == "alice@example.com"

        old = client.post(
            "/api/auth/login", json={"email": "alice@example.com", "password": "secret123"}
        )
        assert old.status_code == 400
        new = client.post(
            "/api/auth/login", json={"email": "alice@example.com", "password": "another-pass"}
        )
        assert new.status_code == 200


def test_users_crud(app: Flask) -> None:
    with app.test_client() as client:
        _register_and_login(client)

        created = client.post(
            "/api/users",
            json={
                "name": "Bob",
                "email": "bob@example.com",
                "password": "bobs-secret",
                "passwordConf": "bobs-secret",
            },
        )
        assert created.status_code == 201
        bob_id = created.get_json()["data"]["user"]["id"]

        listing = client.get("/api/users").get_json()
        assert listing["results"] == 2
        filtered = client.get("/api/users?name=Bob").get_json()
        assert [u["id"] for u in filtered["data"]["users"]] == [bob_id]

        fetched = client.get(f"/api/users/{bob_id}")
        assert fetched.status_code == 200
        assert fetched.get_json()["data"]["user"]["name"] == "Bob"

        updated = client.put(f"/api/users/{bob_id}", json={"name": "Robert"})
        assert updated.status_code == 200
        assert updated.get_json()["data"]["user"]["name"] == "Robert"

        clash = client.put(f"/api/users/{bob_id}", json={"email": "alice@example.com"})
        assert clash.status_code == 409

        deleted = client.delete(f"/api/users/{bob_id}")
        assert deleted.status_code == 204
        assert deleted.data == b""

        missing = client.get(f"/api/users/{bob_id}")
        assert missing.status_code == 404
        assert missing.get_json()["message"] == "User not found"


def test_users_routes_require_session(app: Flask) -> None:
    with app.test_client() as client:
        response = client.get("/api/users")

    assert response.status_code == 401
    assert response.get_json()["status"] == "fail"


def test_deleted_user_token_stops_working(app: Flask) -> None:
    with app.test_client() as client:
        _register_and_login(client)
        me = client.get("/api/users").get_json()["data"]["users"][0]["id"]

        assert client.delete(f"/api/users/{me}").status_code == 204

        after = client.get("/api/users")
        assert after.status_code == 401
        assert after.get_json()["error"] == "session_expired"


def test_healthchecker(app: Flask) -> None:
    with app.test_client() as client:
        response = client.get("/api/healthchecker")

    assert response.status_code == 200
    payload = response.get_json()
    assert payload == {"status": "success", "database": "ok", "cache": "ok"}


def test_unknown_route_returns_json_404(app: Flask) -> None:
    with app.test_client() as client:
        response = client.get("/api/nope")

    assert response.status_code == 404
    assert response.get_json()["message"] == "Route /api/nope not found"


def test_security_headers(app: Flask) -> None:
    with app.test_client() as client:
        response = client.get("/api/healthchecker")

    assert response.headers["X-Frame-Options"] == "DENY"
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert "Strict-Transport-Security" not in response.headers


def test_request_id_is_echoed(app: Flask) -> None:
    with app.test_client() as client:
        response = client.get("/api/healthchecker", headers={"X-Request-ID": "req-123"})

    assert response.headers["X-Request-ID"] == "req-123"
