"""Unit tests for the auth gate decorators."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest

from models.blacklisted_token import BlacklistedToken
from utils.decorators import Identity, authenticate_request, jwt_optional, jwt_required
from utils.exceptions import Unauthenticated
from utils.tokens import issue_access_token, issue_refresh_token


@jwt_required()
def protected(identity):
    return identity


@jwt_optional()
def maybe(identity):
    return identity


@pytest.fixture()
def token(settings) -> str:
    return issue_access_token(settings, 42, "a@b.com", "alice")


def _gate(app, header):
    headers = {"Authorization": header} if header is not None else {}
    with app.test_request_context(headers=headers):
        return authenticate_request(header)


def test_valid_token_yields_identity(app, token) -> None:
    identity = _gate(app, f"Bearer {token}")

    assert identity == Identity(user_id=42, email="a@b.com", username="alice")


@pytest.mark.parametrize(
    "header, message",
    [
        (None, "Authorization header required"),
        ("", "Authorization header required"),
        ("Token abc", "Authorization header format must be Bearer {token}"),
        ("bearer abc", "Authorization header format must be Bearer {token}"),
        ("Bearer ", "Authorization header format must be Bearer {token}"),
        ("Bearer not-a-jwt", "Invalid or expired token"),
    ],
)
def test_gate_failures(app, header, message) -> None:
    with pytest.raises(Unauthenticated) as excinfo:
        _gate(app, header)

    assert excinfo.value.message == message


def test_token_is_taken_verbatim_after_prefix(app, token) -> None:
    with pytest.raises(Unauthenticated, match="Invalid or expired token"):
        _gate(app, f"Bearer   {token}")


def test_expired_token_is_rejected(app, settings, freeze_time) -> None:
    with freeze_time("2024-01-01 12:00:00") as frozen:
        token = issue_access_token(settings, 1, "a@b.com", "alice")
        frozen.tick(timedelta(minutes=16))
        with pytest.raises(Unauthenticated, match="Invalid or expired token"):
            _gate(app, f"Bearer {token}")


def test_token_signed_with_other_secret_is_rejected(app, settings) -> None:
    forged = issue_access_token(replace(settings, jwt_secret="x" * 48), 1, "a@b.com", "alice")

    with pytest.raises(Unauthenticated, match="Invalid or expired token"):
        _gate(app, f"Bearer {forged}")


def test_refresh_token_is_not_an_access_token(app, settings) -> None:
    refresh, _ = issue_refresh_token(settings, 1)

    with pytest.raises(Unauthenticated, match="Invalid or expired token"):
        _gate(app, f"Bearer {refresh}")


def test_revoked_token_is_rejected(app, token) -> None:
    BlacklistedToken.revoke(token, datetime.now(timezone.utc) + timedelta(minutes=15))

    with pytest.raises(Unauthenticated, match="Token has been revoked"):
        _gate(app, f"Bearer {token}")


def test_required_injects_identity(app, token) -> None:
    with app.test_request_context(headers={"Authorization": f"Bearer {token}"}):
        assert protected().user_id == 42


def test_required_raises_without_header(app) -> None:
    with app.test_request_context():
        with pytest.raises(Unauthenticated):
            protected()


def test_optional_passes_identity_or_none(app, token) -> None:
    with app.test_request_context(headers={"Authorization": f"Bearer {token}"}):
        assert maybe().username == "alice"
    with app.test_request_context():
        assert maybe() is None
    with app.test_request_context(headers={"Authorization": "Bearer junk"}):
        assert maybe() is None
