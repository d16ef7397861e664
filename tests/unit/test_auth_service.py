"""Unit tests for AuthService use cases."""

from __future__ import annotations

from datetime import timedelta

import pytest
from marshmallow import ValidationError

from models import storage
from models.blacklisted_token import BlacklistedToken
from models.refresh_token import RefreshToken
from models.user import User
from services.auth_service import AuthService
from utils.exceptions import Conflict, NotFound, Unauthenticated
from utils.tokens import issue_refresh_token, validate_access_token

PASSWORD = "Secret123"


@pytest.fixture()
def service(settings) -> AuthService:
    return AuthService(settings)


@pytest.fixture()
def registered(service) -> User:
    return service.register(email="Alice@Example.com", password=PASSWORD, username="alice", full_name="Alice")


def test_register_normalises_email_and_hashes_password(registered) -> None:
    assert registered.id is not None
    assert registered.email == "alice@example.com"
    assert registered.password_hash != PASSWORD
    assert registered.password_hash.startswith("$argon2")
    assert registered.full_name == "Alice"


def test_register_issues_no_tokens(registered) -> None:
    assert storage.get_session().query(RefreshToken).count() == 0


def test_register_duplicate_email_any_case_conflicts(service, registered) -> None:
    with pytest.raises(Conflict, match="Email or username already exists"):
        service.register(email="ALICE@example.COM", password=PASSWORD, username="alice2")


def test_register_duplicate_username_conflicts(service, registered) -> None:
    with pytest.raises(Conflict):
        service.register(email="someone@example.com", password=PASSWORD, username="alice")


@pytest.mark.parametrize("password", ["short1A", "alllowercase1", "ALLUPPERCASE1", "NoDigitsHere"])
def test_register_rejects_weak_password(service, password) -> None:
    with pytest.raises(ValidationError) as excinfo:
        service.register(email="weak@example.com", password=password, username="weakling")

    assert "password" in excinfo.value.messages


@pytest.mark.parametrize("username", ["ab", "x" * 31, "has space", "dash-name", "alice\n"])
def test_register_rejects_bad_username(service, username) -> None:
    with pytest.raises(ValidationError) as excinfo:
        service.register(email="name@example.com", password=PASSWORD, username=username)

    assert "username" in excinfo.value.messages


def test_login_returns_tokens_matching_user(service, settings, registered) -> None:
    result = service.login("ALICE@example.com", PASSWORD)

    assert result.access_token and result.refresh_token
    assert result.access_token != result.refresh_token
    claims = validate_access_token(settings, result.access_token)
    assert (claims.user_id, claims.email, claims.username) == (registered.id, "alice@example.com", "alice")
    assert storage.get_session().query(RefreshToken).filter_by(token=result.refresh_token).count() == 1


def test_login_failures_are_indistinguishable(service, registered) -> None:
    with pytest.raises(Unauthenticated) as wrong_password:
        service.login("alice@example.com", "Wrong1234")
    with pytest.raises(Unauthenticated) as unknown_user:
        service.login("nobody@example.com", PASSWORD)

    assert wrong_password.value.message == unknown_user.value.message == "Invalid email or password"


def test_login_ignores_removed_accounts(service, registered) -> None:
    registered.soft_delete()

    with pytest.raises(Unauthenticated):
        service.login("alice@example.com", PASSWORD)


def test_refresh_mints_new_access_token(service, settings, registered) -> None:
    session = service.login("alice@example.com", PASSWORD)

    access = service.refresh_access_token(session.refresh_token)

    assert access != session.access_token
    assert validate_access_token(settings, access).user_id == registered.id


def test_refresh_token_is_reusable_until_logout(service, registered) -> None:
    session = service.login("alice@example.com", PASSWORD)

    service.refresh_access_token(session.refresh_token)
    service.refresh_access_token(session.refresh_token)


def test_refresh_rejects_unpersisted_but_valid_token(service, settings, registered) -> None:
    forged, _ = issue_refresh_token(settings, registered.id)

    with pytest.raises(Unauthenticated, match="Refresh token not found or expired"):
        service.refresh_access_token(forged)


def test_refresh_rejects_garbage(service) -> None:
    with pytest.raises(Unauthenticated, match="Invalid or expired refresh token"):
        service.refresh_access_token("garbage")


def test_refresh_rejects_expired_token(service, registered, freeze_time) -> None:
    with freeze_time("2024-01-01 12:00:00") as frozen:
        session = service.login("alice@example.com", PASSWORD)
        frozen.tick(timedelta(days=8))
        with pytest.raises(Unauthenticated, match="Invalid or expired refresh token"):
            service.refresh_access_token(session.refresh_token)


def test_refresh_for_vanished_user_is_not_found(service, registered) -> None:
    session = service.login("alice@example.com", PASSWORD)
    registered.soft_delete()

    with pytest.raises(NotFound):
        service.refresh_access_token(session.refresh_token)


def test_logout_revokes_access_and_drops_refresh(service, registered) -> None:
    session = service.login("alice@example.com", PASSWORD)

    service.logout(session.access_token, session.refresh_token)

    assert BlacklistedToken.is_revoked(session.access_token)
    with pytest.raises(Unauthenticated, match="Refresh token not found or expired"):
        service.refresh_access_token(session.refresh_token)


def test_logout_twice_succeeds(service, registered) -> None:
    session = service.login("alice@example.com", PASSWORD)

    service.logout(session.access_token, session.refresh_token)
    service.logout(session.access_token, session.refresh_token)

    count = storage.get_session().query(BlacklistedToken).filter_by(token=session.access_token).count()
    assert count == 1


def test_logout_with_invalid_access_token_changes_nothing(service, registered) -> None:
    session = service.login("alice@example.com", PASSWORD)

    with pytest.raises(Unauthenticated, match="Invalid access token"):
        service.logout("not-a-token", session.refresh_token)

    assert service.refresh_access_token(session.refresh_token)
    assert storage.get_session().query(BlacklistedToken).count() == 0
