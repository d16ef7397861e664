"""
BlacklistedToken model: access tokens revoked before their natural expiry.

Keyed by the raw token string and independent of the owning user. expires_at
is the token's own expiry; once it has passed the row can be purged.
"""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import Column, DateTime, String
from sqlalchemy.exc import IntegrityError

import models
from models.base_model import Base, BaseModel
from utils.exceptions import Conflict


class BlacklistedToken(BaseModel, Base):
    __tablename__ = "blacklisted_tokens"

    token = Column(String(1024), nullable=False, unique=True)
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)

    def __repr__(self):
        return f"<BlacklistedToken id={self.id} expires_at={self.expires_at}>"

    @classmethod
    def revoke(cls, token: str, expires_at: datetime) -> "BlacklistedToken":
        """Record token as revoked. Conflict if it already is; callers treat that as success."""
        record = cls(token=token, expires_at=expires_at)
        models.storage.new(record)
        try:
            models.storage.save()
        except IntegrityError as exc:
            raise Conflict("Token already revoked") from exc
        return record

    @classmethod
    def is_revoked(cls, token: str) -> bool:
        session = models.storage.get_session()
        return session.query(cls.id).filter(cls.token == token).first() is not None

    @classmethod
    def purge_expired(cls, now: datetime) -> int:
        session = models.storage.get_session()
        deleted = session.query(cls).filter(cls.expires_at <= now).delete(synchronize_session=False)
        models.storage.save()
        return deleted
