from __future__ import annotations

from typing import Tuple

from flask import request, abort

DEFAULT_LIMIT = 10
MAX_LIMIT = 100


def parse_pagination(default_limit: int = DEFAULT_LIMIT, max_limit: int = MAX_LIMIT) -> Tuple[int, int]:
    try:
        page = int(request.args.get("page", "1"))
        limit = int(request.args.get("limit", str(default_limit)))
    except ValueError:
        abort(400, description="page and limit must be integers")
    page = max(page, 1)
    limit = max(1, min(limit, max_limit))
    return page, limit


def paginate(query, page: int, limit: int):
    """Return (rows, total) for one page of query."""
    total = query.order_by(None).count()
    rows = query.offset((page - 1) * limit).limit(limit).all()
    return rows, total


def page_meta(page: int, limit: int, total: int) -> dict:
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "total_pages": (total + limit - 1) // limit,
    }
