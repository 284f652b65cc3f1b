"""Tests for the authentication token endpoint."""

from __future__ import annotations

from college_portal.infrastructure.repositories import UserRepository
from college_portal.infrastructure.security import get_password_hash


def test_login_returns_token_usable_for_notifications(client, add_user) -> None:
    user = add_user("student", semester=2, password=get_password_hash("StrongPass123"))

    response = client.post(
        "/auth/token",
        data={"username": user.email, "password": "StrongPass123"},
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["token_type"] == "bearer"
    assert payload["role"] == "student"

    listing = client.get(
        "/notifications/", headers={"Authorization": f"Bearer {payload['access_token']}"}
    )
    assert listing.status_code == 200


def test_login_rejects_wrong_password(client, add_user) -> None:
    user = add_user("teacher", password=get_password_hash("StrongPass123"))

    response = client.post("/auth/token", data={"username": user.email, "password": "nope"})

    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"
    assert response.json() == {"detail": "Incorrect email or password"}


def test_login_unknown_email_looks_like_wrong_password(client) -> None:
    response = client.post(
        "/auth/token", data={"username": "ghost@example.com", "password": "StrongPass123"}
    )

    assert response.status_code == 401
    assert response.json() == {"detail": "Incorrect email or password"}


def test_login_refuses_deactivated_account(client, add_user) -> None:
    user = add_user("student", active=False, password=get_password_hash("StrongPass123"))

    response = client.post(
        "/auth/token", data={"username": user.email, "password": "StrongPass123"}
    )

    assert response.status_code == 403
    assert response.json() == {"detail": "Inactive user"}


def test_deactivated_user_token_is_revoked(client, add_user, auth_headers, session) -> None:
    user = add_user("teacher")
    headers = auth_headers(user)
    assert client.get("/notifications/", headers=headers).status_code == 200

    user.is_active = False
    UserRepository(session).update(user)

    assert client.get("/notifications/", headers=headers).status_code == 401
