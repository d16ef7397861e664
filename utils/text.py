"""
Text helpers for posts: URL slugs and estimated read time.
"""
from __future__ import annotations

import math
import re

SLUG_MAX_LENGTH = 100
WORDS_PER_MINUTE = 200

_TAG_RE = re.compile(r"<[^>]*>")
_NON_SLUG_RE = re.compile(r"[^a-z0-9-]+")
_HYPHENS_RE = re.compile(r"-{2,}")


def slugify(value: str, fallback: str = "post") -> str:
    """Lowercase, hyphenate whitespace, drop anything outside [a-z0-9-]."""
    slug = (value or "").strip().lower()
    slug = re.sub(r"\s+", "-", slug)
    slug = _NON_SLUG_RE.sub("", slug)
    slug = _HYPHENS_RE.sub("-", slug).strip("-")
    slug = slug[:SLUG_MAX_LENGTH].strip("-")
    return slug or fallback


def strip_html(content: str) -> str:
    return _TAG_RE.sub(" ", content or "")


def read_time(content: str) -> int:
    """Minutes to read content at WORDS_PER_MINUTE, at least one."""
    words = len(strip_html(content).split())
    return max(1, math.ceil(words / WORDS_PER_MINUTE))

