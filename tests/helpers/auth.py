"""Authentication helpers for tests."""

from __future__ import annotations

from typing import Any

DEFAULT_PASSWORD = "Secret123"


def bearer(token: str) -> dict[str, str]:
    """Authorization header carrying ``token``."""

    return {"Authorization": f"Bearer {token}"}


def register(
    client: Any,
    email: str = "a@b.com",
    username: str = "alice",
    password: str = DEFAULT_PASSWORD,
    **extra: Any,
):
    """POST /auth/register and return the response."""

    payload = {"email": email, "username": username, "password": password, **extra}
    return client.post("/api/v1/auth/register", json=payload)


def login(client: Any, email: str = "a@b.com", password: str = DEFAULT_PASSWORD):
    """POST /auth/login and return the response."""

    return client.post("/api/v1/auth/login", json={"email": email, "password": password})


def signup(client: Any, email: str, username: str, password: str = DEFAULT_PASSWORD) -> dict[str, Any]:
    """Register and log in; return the login body (tokens and user)."""

    resp = register(client, email=email, username=username, password=password)
    assert resp.status_code == 201, resp.get_json()
    resp = login(client, email=email, password=password)
    assert resp.status_code == 200, resp.get_json()
    return resp.get_json()
