"""
Session use cases: register, login, refresh, logout.

Views stay thin and call into AuthService; the service composes the password
hasher, token issuer/validator and the refresh-token and revocation stores,
and translates their failures into the application error taxonomy.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from marshmallow import ValidationError
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError

from models import storage
from models.blacklisted_token import BlacklistedToken
from models.refresh_token import RefreshToken
from models.schemas.common import normalize_email, validate_password_strength, validate_username
from models.user import User
from utils.exceptions import Conflict, NotFound, PasswordMismatchError, TokenError, Unauthenticated
from utils.security import hash_password, needs_rehash, verify_dummy, verify_password
from utils.settings import AuthSettings
from utils.tokens import (
    issue_access_token,
    issue_refresh_token,
    validate_access_token,
    validate_refresh_token,
)

log = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"
DUPLICATE_ACCOUNT = "Email or username already exists"


@dataclass(frozen=True)
class LoginResult:
    access_token: str
    refresh_token: str
    user: User


class AuthService:
    def __init__(self, settings: AuthSettings):
        self.settings = settings

    def _validate_policy(self, password: str, username: str) -> None:
        errors = {}
        try:
            validate_password_strength(password, self.settings.password_min_length)
        except ValidationError as exc:
            errors["password"] = exc.messages
        try:
            validate_username(username, self.settings.username_min_length, self.settings.username_max_length)
        except ValidationError as exc:
            errors["username"] = exc.messages
        if errors:
            raise ValidationError(errors)

    def register(
        self,
        email: str,
        password: str,
        username: str,
        full_name: str | None = None,
        bio: str | None = None,
        avatar: str | None = None,
    ) -> User:
        """Create an account. No tokens are issued; the client logs in separately."""
        email = normalize_email(email)
        self._validate_policy(password, username)

        session = storage.get_session()
        taken = session.query(User.id).filter(or_(User.email == email, User.username == username)).first()
        if taken:
            raise Conflict(DUPLICATE_ACCOUNT)

        user = User(
            email=email,
            username=username,
            password_hash=hash_password(password),
            full_name=full_name,
            bio=bio,
            avatar=avatar,
        )
        storage.new(user)
        try:
            storage.save()
        except IntegrityError as exc:
            # lost a race against a concurrent registration
            raise Conflict(DUPLICATE_ACCOUNT) from exc

        log.info("user registered", extra={"user_id": user.id})
        return user

    def login(self, email: str, password: str) -> LoginResult:
        session = storage.get_session()
        user = (
            session.query(User)
            .filter(User.email == normalize_email(email), User.deleted_at.is_(None))
            .first()
        )
        if user is None:
            verify_dummy(password)
            log.info("login failed: unknown account")
            raise Unauthenticated(INVALID_CREDENTIALS)

        try:
            verify_password(password, user.password_hash)
        except PasswordMismatchError:
            log.info("login failed: bad password", extra={"user_id": user.id})
            raise Unauthenticated(INVALID_CREDENTIALS) from None

        if needs_rehash(user.password_hash):
            user.password_hash = hash_password(password)
            storage.new(user)

        access_token = issue_access_token(self.settings, user.id, user.email, user.username)
        refresh_token, expires_at = issue_refresh_token(self.settings, user.id)
        # commits the rehash too
        RefreshToken.persist(user.id, refresh_token, expires_at)

        log.info("login succeeded", extra={"user_id": user.id})
        return LoginResult(access_token=access_token, refresh_token=refresh_token, user=user)

    def refresh_access_token(self, refresh_token: str) -> str:
        """Mint a new access token. The refresh token itself is reused until logout."""
        try:
            claims = validate_refresh_token(self.settings, refresh_token)
        except TokenError as exc:
            raise Unauthenticated("Invalid or expired refresh token") from exc

        now = datetime.now(timezone.utc)
        if RefreshToken.lookup(refresh_token, claims.user_id, now) is None:
            log.info("refresh rejected: token not stored", extra={"user_id": claims.user_id})
            raise Unauthenticated("Refresh token not found or expired")

        user = storage.get(User, claims.user_id)
        if user is None or not user.is_active:
            raise NotFound("User not found")

        log.info("access token refreshed", extra={"user_id": user.id})
        return issue_access_token(self.settings, user.id, user.email, user.username)

    def logout(self, access_token: str, refresh_token: str) -> None:
        """Revoke the access token and drop the refresh token. Safe to repeat."""
        try:
            claims = validate_access_token(self.settings, access_token)
        except TokenError as exc:
            raise Unauthenticated("Invalid access token") from exc

        try:
            BlacklistedToken.revoke(access_token, claims.expires_at)
        except Conflict:
            log.debug("access token already revoked", extra={"user_id": claims.user_id})

        RefreshToken.discard(refresh_token)
        log.info("user logged out", extra={"user_id": claims.user_id})
