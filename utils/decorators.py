"""
Auth gate for views.

jwt_required() rejects the request unless it carries a valid, unrevoked
access token; jwt_optional() lets anonymous callers through. Both hand the
caller's Identity to the view as the `identity` keyword argument.
"""
from __future__ import annotations

from dataclasses import dataclass
from functools import wraps

from flask import request

from models.blacklisted_token import BlacklistedToken
from utils.exceptions import TokenError, Unauthenticated
from utils.settings import get_auth_settings
from utils.tokens import validate_access_token

BEARER_PREFIX = "Bearer "


@dataclass(frozen=True)
class Identity:
    user_id: int
    email: str
    username: str


def authenticate_request(auth_header: str | None) -> Identity:
    """Resolve an Authorization header value to an Identity or raise Unauthenticated."""
    if not auth_header:
        raise Unauthenticated("Authorization header required")
    token = auth_header[len(BEARER_PREFIX):]
    if not auth_header.startswith(BEARER_PREFIX) or not token:
        raise Unauthenticated("Authorization header format must be Bearer {token}")

    try:
        claims = validate_access_token(get_auth_settings(), token)
    except TokenError as exc:
        raise Unauthenticated("Invalid or expired token") from exc

    if BlacklistedToken.is_revoked(token):
        raise Unauthenticated("Token has been revoked")

    return Identity(user_id=claims.user_id, email=claims.email, username=claims.username)


def jwt_required():
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            kwargs["identity"] = authenticate_request(request.headers.get("Authorization"))
            return fn(*args, **kwargs)

        return wrapper

    return decorator


def jwt_optional():
    """Like jwt_required(), but any auth failure yields identity=None."""
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            try:
                identity = authenticate_request(request.headers.get("Authorization"))
            except Unauthenticated:
                identity = None
            kwargs["identity"] = identity
            return fn(*args, **kwargs)

        return wrapper

    return decorator
