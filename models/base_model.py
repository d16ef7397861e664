#!/usr/bin/env python3
"""
Shared SQLAlchemy base and mixins for the blog models.

- integer autoincrement primary key
- created_at / updated_at timestamps, stored in UTC
- save() and delete() wired to the DBStorage singleton
- SoftDeleteMixin: a deleted_at tombstone with explicit transitions
  (active -> removed via soft_delete(), removed -> active via restore())

SoftDelete: put the mixin FIRST in the model's inheritance list so its
delete() wins in the MRO.
    class Post(SoftDeleteMixin, BaseModel, Base): ...
"""

from __future__ import annotations

from datetime import datetime, timezone

# Importing 'models' gives access to the global 'storage' instance (DBStorage)
import models

from sqlalchemy import Column, DateTime, Integer
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

# Declarative base for all models
Base = declarative_base()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BaseModel:
    """
    Base mixin for all persistent models: id, created_at, updated_at and
    convenience persistence methods.
    """

    id = Column(Integer, primary_key=True, autoincrement=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow, nullable=False
    )

    def __init__(self, *args, **kwargs):
        """
        Allow attribute initialization via kwargs without requiring a session.
        """
        for key, value in kwargs.items():
            if key != "__class__":
                setattr(self, key, value)

    def __str__(self) -> str:
        return f"[{self.__class__.__name__}] ({self.id}) {self.__dict__}"

    def save(self):
        """Persist the instance and commit."""
        self.updated_at = utcnow()
        models.storage.new(self)
        models.storage.save()

    def delete(self):
        """
        Hard delete the current instance; the caller commits.
        """
        models.storage.delete(self)


class SoftDeleteMixin:
    """
    Adds a deleted_at tombstone and overrides delete() to perform a soft delete.
    Place this mixin BEFORE BaseModel in the class base list.
    """

    deleted_at = Column(DateTime(timezone=True), nullable=True, index=True)

    @property
    def is_active(self) -> bool:
        return self.deleted_at is None

    @classmethod
    def active(cls):
        """Query over rows that are not soft-deleted."""
        return models.storage.get_session().query(cls).filter(cls.deleted_at.is_(None))

    def restore(self, commit: bool = True):
        """removed -> active"""
        self.deleted_at = None
        models.storage.new(self)
        if commit:
            models.storage.save()

    def soft_delete(self, commit: bool = True):
        """active -> removed"""
        self.deleted_at = utcnow()
        models.storage.new(self)
        if commit:
            models.storage.save()

    def delete(self):  # type: ignore[override]
        """Soft delete by setting deleted_at; persists via DBStorage."""
        self.soft_delete()
