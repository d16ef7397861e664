"""
password helpers:
- Argon2 password hashing via argon2-cffi
- work factor tunable through ARGON2_* config keys, library defaults otherwise
"""
from __future__ import annotations

import logging

from argon2 import PasswordHasher
from argon2.exceptions import HashingError as Argon2HashingError
from argon2.exceptions import InvalidHashError, VerificationError

from utils.exceptions import HashingError, PasswordMismatchError

log = logging.getLogger(__name__)

ph = PasswordHasher()
_dummy_hash: str | None = None


def init_app(app) -> None:
    """Rebuild the module hasher from ARGON2_* config values when present."""
    global ph, _dummy_hash
    params = {}
    for key, arg in (
        ("ARGON2_TIME_COST", "time_cost"),
        ("ARGON2_MEMORY_COST", "memory_cost"),
        ("ARGON2_PARALLELISM", "parallelism"),
    ):
        value = app.config.get(key)
        if value not in (None, ""):
            params[arg] = int(value)
    ph = PasswordHasher(**params)
    _dummy_hash = None


def hash_password(password: str) -> str:
    """Hash a plaintext password using Argon2
    """
    try:
        return ph.hash(password)
    except Argon2HashingError as exc:
        log.error("argon2 hashing failed", exc_info=exc)
        raise HashingError() from exc


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a plaintext password against an Argon2 digest.

    Returns True on match, raises PasswordMismatchError otherwise.
    """
    try:
        return ph.verify(password_hash, password)
    except (VerificationError, InvalidHashError) as exc:
        raise PasswordMismatchError("Incorrect password") from exc


def needs_rehash(password_hash: str) -> bool:
    return ph.check_needs_rehash(password_hash)


def verify_dummy(password: str) -> None:
    """Spend one verification on a throwaway hash (unknown-account logins)."""
    global _dummy_hash
    if _dummy_hash is None:
        _dummy_hash = ph.hash("dummy-password-for-timing")
    try:
        ph.verify(_dummy_hash, password)
    except VerificationError:
        pass
