"""
RefreshToken model: persisted refresh tokens.

A refresh token is honoured only while its row exists, belongs to the
presenting user and has not passed expires_at (and the JWT itself verifies).
Rows are created on login and removed on logout; they are never updated.
"""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import relationship

import models
from models.base_model import Base, BaseModel
from utils.exceptions import Conflict


class RefreshToken(BaseModel, Base):
    __tablename__ = "refresh_tokens"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    token = Column(String(1024), nullable=False, unique=True)
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)

    user = relationship("User", back_populates="refresh_tokens")

    def __repr__(self):
        return f"<RefreshToken id={self.id} user_id={self.user_id}>"

    @classmethod
    def persist(cls, user_id: int, token: str, expires_at: datetime) -> "RefreshToken":
        """Store a freshly issued refresh token; Conflict if the token already exists."""
        record = cls(user_id=user_id, token=token, expires_at=expires_at)
        models.storage.new(record)
        try:
            models.storage.save()
        except IntegrityError as exc:
            raise Conflict("Refresh token already exists") from exc
        return record

    @classmethod
    def lookup(cls, token: str, user_id: int, now: datetime) -> RefreshToken | None:
        """Return the live record for (token, user_id), or None when absent or lapsed."""
        session = models.storage.get_session()
        return (
            session.query(cls)
            .filter(cls.token == token, cls.user_id == user_id, cls.expires_at > now)
            .first()
        )

    @classmethod
    def discard(cls, token: str) -> int:
        """Delete the record for token. Deleting an absent token is not an error."""
        session = models.storage.get_session()
        deleted = session.query(cls).filter(cls.token == token).delete(synchronize_session=False)
        models.storage.save()
        return deleted

    @classmethod
    def purge_expired(cls, now: datetime) -> int:
        session = models.storage.get_session()
        deleted = session.query(cls).filter(cls.expires_at <= now).delete(synchronize_session=False)
        models.storage.save()
        return deleted
