"""
Toggle helpers for (user, target) relation rows: likes, bookmarks, follows,
topic follows. A relation row moves absent -> active -> removed -> active;
it is tombstoned rather than deleted, and re-adding restores it.
"""
from __future__ import annotations

from flask import abort

from models import storage


def find_relation(model, **keys):
    """Return the row for keys whatever its state, or None."""
    return storage.get_session().query(model).filter_by(**keys).first()


def is_related(model, **keys) -> bool:
    row = find_relation(model, **keys)
    return row is not None and row.is_active


def add_relation(model, conflict_message: str, **keys):
    row = find_relation(model, **keys)
    if row is None:
        row = model(**keys)
        storage.new(row)
        storage.save()
        return row
    if row.is_active:
        abort(409, description=conflict_message)
    row.restore()
    return row


def remove_relation(model, missing_message: str, **keys):
    row = find_relation(model, **keys)
    if row is None or not row.is_active:
        abort(404, description=missing_message)
    row.soft_delete()
    return row
