"""Unit tests for argon2 password hashing."""

from __future__ import annotations

import pytest
from flask import Flask

from utils import security
from utils.exceptions import PasswordMismatchError


def test_hash_is_salted_and_verifies() -> None:
    """Two hashes of one password differ, and both verify."""

    first = security.hash_password("Secret123")
    second = security.hash_password("Secret123")

    assert first != second
    assert first.startswith("$argon2")
    assert security.verify_password("Secret123", first) is True
    assert security.verify_password("Secret123", second) is True


def test_wrong_password_raises_mismatch() -> None:
    digest = security.hash_password("Secret123")

    with pytest.raises(PasswordMismatchError):
        security.verify_password("secret123", digest)


def test_garbage_hash_raises_mismatch() -> None:
    """A corrupt stored hash is treated as a mismatch, not a crash."""

    with pytest.raises(PasswordMismatchError):
        security.verify_password("Secret123", "not-an-argon2-hash")


def test_init_app_applies_work_factor_and_flags_rehash(app: Flask) -> None:
    """create_app tunes the hasher; hashes made with other parameters need a rehash."""

    assert security.ph.time_cost == 1
    assert security.ph.memory_cost == 1024

    cheap = security.hash_password("Secret123")
    assert security.needs_rehash(cheap) is False

    stronger = Flask("stronger")
    stronger.config.update(ARGON2_TIME_COST="2", ARGON2_MEMORY_COST="2048", ARGON2_PARALLELISM="1")
    security.init_app(stronger)
    try:
        assert security.needs_rehash(cheap) is True
    finally:
        security.init_app(app)


def test_verify_dummy_never_raises() -> None:
    security.verify_dummy("anything at all")
