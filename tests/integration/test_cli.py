"""Tests for the maintenance CLI."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from models.blacklisted_token import BlacklistedToken
from models.refresh_token import RefreshToken


def test_purge_tokens_removes_expired_rows(app, make_user) -> None:
    user = make_user()
    now = datetime.now(timezone.utc)
    BlacklistedToken.revoke("stale-access", now - timedelta(minutes=5))
    BlacklistedToken.revoke("fresh-access", now + timedelta(minutes=5))
    RefreshToken.persist(user.id, "stale-refresh", now - timedelta(days=1))
    RefreshToken.persist(user.id, "fresh-refresh", now + timedelta(days=1))

    result = app.test_cli_runner().invoke(args=["purge-tokens"])

    assert result.exit_code == 0
    assert "Purged 1 revoked access token(s) and 1 refresh token(s)." in result.output
    assert BlacklistedToken.is_revoked("stale-access") is False
    assert BlacklistedToken.is_revoked("fresh-access") is True
    assert RefreshToken.lookup("fresh-refresh", user.id, now) is not None


def test_purge_tokens_on_empty_store(app) -> None:
    result = app.test_cli_runner().invoke(args=["purge-tokens"])

    assert result.exit_code == 0
    assert "Purged 0 revoked access token(s) and 0 refresh token(s)." in result.output
