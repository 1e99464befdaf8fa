# File: app/core/pagination.py

"""
Offset pagination for SQLAlchemy ``select()`` statements.

The payload shape (``data`` / ``links`` / ``meta``) matches what the
frontend already consumes for every listing endpoint.
"""

import math
from typing import Any

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session


def _page_url(path: str, page: int) -> str:
    return f"{path}?page={page}"


def paginate(db: Session, stmt: Select, *, page: int, per_page: int, path: str) -> dict[str, Any]:
    page = max(1, page)
    total = db.scalar(select(func.count()).select_from(stmt.order_by(None).subquery())) or 0
    items = list(db.scalars(stmt.limit(per_page).offset((page - 1) * per_page)))

    last_page = max(1, math.ceil(total / per_page))
    first_index = (page - 1) * per_page + 1 if items else None
    last_index = first_index + len(items) - 1 if items else None

    return {
        "data": items,
        "links": {
            "first": _page_url(path, 1),
            "last": _page_url(path, last_page),
            "prev": _page_url(path, page - 1) if page > 1 else None,
            "next": _page_url(path, page + 1) if page < last_page else None,
        },
        "meta": {
            "current_page": page,
            "from": first_index,
            "last_page": last_page,
            "path": path,
            "per_page": per_page,
            "to": last_index,
            "total": total,
        },
    }
