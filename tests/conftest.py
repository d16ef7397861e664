"""Global pytest fixtures for the blog API."""

from __future__ import annotations

from collections.abc import Generator
from typing import Any, Callable

import pytest
from flask import Flask

from api import create_app
from models import storage
from models.user import User
from utils.security import hash_password

from tests.helpers.auth import DEFAULT_PASSWORD, bearer, signup


@pytest.fixture()
def app() -> Generator[Flask, None, None]:
    """Fresh application on its own in-memory SQLite database."""

    application = create_app("testing")
    yield application
    storage.close()


@pytest.fixture()
def client(app: Flask) -> Any:
    """Return a Flask test client."""

    return app.test_client()


@pytest.fixture()
def settings(app: Flask):
    """The AuthSettings bound to ``app``."""

    return app.extensions["auth_settings"]


@pytest.fixture()
def make_user(app: Flask) -> Callable[..., User]:
    """Factory persisting a user straight through the storage layer."""

    def _make(email: str = "writer@example.com", username: str = "writer", password: str = DEFAULT_PASSWORD) -> User:
        user = User(email=email, username=username, password_hash=hash_password(password))
        storage.new(user)
        storage.save()
        return user

    return _make


@pytest.fixture()
def alice(client: Any) -> dict[str, Any]:
    """Registered and logged-in user ``alice`` (login response body)."""

    return signup(client, email="a@b.com", username="alice")


@pytest.fixture()
def bob(client: Any) -> dict[str, Any]:
    """Registered and logged-in user ``bob`` (login response body)."""

    return signup(client, email="bob@example.com", username="bob")


@pytest.fixture()
def alice_headers(alice: dict[str, Any]) -> dict[str, str]:
    return bearer(alice["access_token"])


@pytest.fixture()
def bob_headers(bob: dict[str, Any]) -> dict[str, str]:
    return bearer(bob["access_token"])


@pytest.fixture()
def freeze_time() -> Callable[[str | None], Any]:
    """Factory returning :func:`freezegun.freeze_time`.

    Examples
    --------
    >>> def test_with_frozen_time(freeze_time):
    ...     with freeze_time("2024-01-01 12:00:00") as frozen:
    ...         frozen.tick(60)
    """

    from freezegun import freeze_time as _freeze_time

    def _factory(target: str | None = None) -> Any:
        return _freeze_time(target or "2024-01-01 12:00:00")

    return _factory
