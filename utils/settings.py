"""
Immutable auth settings parsed once from the Flask config at startup.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Mapping

from flask import current_app

from utils.exceptions import ConfigurationError

SUPPORTED_ALGORITHMS = ("HS256", "HS384", "HS512")


def _positive_int(config: Mapping[str, Any], key: str, default: int) -> int:
    raw = config.get(key)
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return default
    try:
        value = int(str(raw).strip())
    except ValueError:
        raise ConfigurationError(f"invalid {key} value: {raw!r}")
    if value <= 0:
        raise ConfigurationError(f"{key} must be a positive integer")
    return value


@dataclass(frozen=True)
class AuthSettings:
    jwt_secret: str
    jwt_algorithm: str = "HS256"
    access_ttl: timedelta = timedelta(minutes=15)
    refresh_ttl: timedelta = timedelta(days=7)
    password_min_length: int = 8
    username_min_length: int = 3
    username_max_length: int = 30

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "AuthSettings":
        """Build settings from a config mapping, failing fast on bad values."""
        secret = config.get("JWT_SECRET")
        if not secret:
            raise ConfigurationError("JWT_SECRET not set in environment")

        algorithm = (config.get("JWT_ALGORITHM") or "HS256").upper()
        if algorithm not in SUPPORTED_ALGORITHMS:
            raise ConfigurationError(f"JWT_ALGORITHM must be one of {SUPPORTED_ALGORITHMS}")

        username_min = _positive_int(config, "USERNAME_MIN_LENGTH", 3)
        username_max = _positive_int(config, "USERNAME_MAX_LENGTH", 30)
        if username_min > username_max:
            raise ConfigurationError("USERNAME_MIN_LENGTH exceeds USERNAME_MAX_LENGTH")

        return cls(
            jwt_secret=secret,
            jwt_algorithm=algorithm,
            access_ttl=timedelta(minutes=_positive_int(config, "ACCESS_TOKEN_EXPIRY_MINUTES", 15)),
            refresh_ttl=timedelta(days=_positive_int(config, "REFRESH_TOKEN_EXPIRY_DAYS", 7)),
            password_min_length=_positive_int(config, "PASSWORD_MIN_LENGTH", 8),
            username_min_length=username_min,
            username_max_length=username_max,
        )


def get_auth_settings() -> AuthSettings:
    """Return the settings bound to the running app by create_app()."""
    settings = current_app.extensions.get("auth_settings")
    if settings is None:
        raise ConfigurationError("Auth settings are not initialised")
    return settings
