"""
JWT issuance and validation via PyJWT.

Access tokens carry the identity claims (user_id, email, username) so the
auth gate needs no database round-trip besides the revocation check.
Refresh tokens carry only the registered subject; they are always checked
against the refresh_tokens table as well.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict

import jwt

from utils.exceptions import (
    ConfigurationError,
    ExpiredTokenError,
    InvalidSignatureError,
    MalformedTokenError,
    TokenError,
)
from utils.settings import AuthSettings

ACCESS_REQUIRED_CLAIMS = ["user_id", "email", "username", "exp", "iat", "nbf"]
REFRESH_REQUIRED_CLAIMS = ["sub", "exp", "iat", "nbf"]


@dataclass(frozen=True)
class AccessClaims:
    user_id: int
    email: str
    username: str
    issued_at: datetime
    expires_at: datetime


@dataclass(frozen=True)
class RefreshClaims:
    user_id: int
    issued_at: datetime
    expires_at: datetime


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _ts(value: Any) -> datetime:
    return datetime.fromtimestamp(int(value), tz=timezone.utc)


def generate_jti() -> str:
    """Generate a unique JTI (JWT ID).
    """
    return uuid.uuid4().hex


def _require_secret(settings: AuthSettings) -> str:
    if not settings.jwt_secret:
        raise ConfigurationError("JWT_SECRET not set in environment")
    return settings.jwt_secret


def _encode(settings: AuthSettings, payload: Dict[str, Any]) -> str:
    return jwt.encode(payload, _require_secret(settings), algorithm=settings.jwt_algorithm)


def issue_access_token(settings: AuthSettings, user_id: int, email: str, username: str) -> str:
    """Sign a short-lived access token with the caller's identity claims."""
    now = _now()
    payload = {
        "user_id": int(user_id),
        "email": email,
        "username": username,
        "iat": now,
        "nbf": now,
        "exp": now + settings.access_ttl,
        "jti": generate_jti(),
    }
    return _encode(settings, payload)


def issue_refresh_token(settings: AuthSettings, user_id: int) -> tuple[str, datetime]:
    """Sign a long-lived refresh token; returns the token and its expiry."""
    now = _now()
    expires_at = now + settings.refresh_ttl
    payload = {
        "sub": str(user_id),
        "iat": now,
        "nbf": now,
        "exp": expires_at,
        "jti": generate_jti(),
    }
    # exp is serialised with second precision, keep the stored value aligned
    return _encode(settings, payload), expires_at.replace(microsecond=0)


def _decode(settings: AuthSettings, token: str, required: list[str]) -> Dict[str, Any]:
    secret = _require_secret(settings)
    try:
        return jwt.decode(
            token,
            secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": required},
        )
    except jwt.ExpiredSignatureError as exc:
        raise ExpiredTokenError() from exc
    except (jwt.InvalidSignatureError, jwt.InvalidAlgorithmError) as exc:
        raise InvalidSignatureError() from exc
    except (jwt.DecodeError, jwt.MissingRequiredClaimError) as exc:
        raise MalformedTokenError() from exc
    except jwt.InvalidTokenError as exc:
        raise TokenError(f"Invalid token: {exc}") from exc


def validate_access_token(settings: AuthSettings, token: str) -> AccessClaims:
    """Verify an access token and return its identity claims."""
    decoded = _decode(settings, token, ACCESS_REQUIRED_CLAIMS)
    user_id = decoded["user_id"]
    if isinstance(user_id, bool) or not isinstance(user_id, int):
        raise MalformedTokenError("Invalid user ID in token")
    if not isinstance(decoded["email"], str) or not isinstance(decoded["username"], str):
        raise MalformedTokenError()
    return AccessClaims(
        user_id=user_id,
        email=decoded["email"],
        username=decoded["username"],
        issued_at=_ts(decoded["iat"]),
        expires_at=_ts(decoded["exp"]),
    )


def validate_refresh_token(settings: AuthSettings, token: str) -> RefreshClaims:
    """Verify a refresh token and return the subject user id."""
    decoded = _decode(settings, token, REFRESH_REQUIRED_CLAIMS)
    subject = decoded["sub"]
    if not isinstance(subject, str) or not subject.isdigit():
        raise MalformedTokenError("Invalid user ID in token")
    return RefreshClaims(
        user_id=int(subject),
        issued_at=_ts(decoded["iat"]),
        expires_at=_ts(decoded["exp"]),
    )
