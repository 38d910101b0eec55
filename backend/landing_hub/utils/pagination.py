# landing_hub/utils/pagination.py
from __future__ import annotations

from typing import Any, Tuple, Type, TypedDict

from sqlalchemy.orm import Query


class PageMeta(TypedDict):
    """
    Offset pagination metadata shared by the list_* services.
    """
    page: int
    per_page: int
    total: int


def clamp_page_args(page: Any, per_page: Any, *, default_per_page: int, max_per_page: int) -> Tuple[int, int]:
    """
    Coerce page/per_page query values.

    Non-numeric or non-positive values fall back to page 1 and the
    default page size; page size is capped at ``max_per_page``.
    """
    try:
        page = int(page)
    except (TypeError, ValueError):
        page = 1
    try:
        per_page = int(per_page)
    except (TypeError, ValueError):
        per_page = default_per_page

    if page < 1:
        page = 1
    if per_page < 1:
        per_page = default_per_page
    return page, min(per_page, max_per_page)


def paginate_offset(
    query: Query,
    *,
    model: Type[Any],
    page: int,
    per_page: int,
) -> tuple[list[Any], PageMeta]:
    """
    Execute an offset-paginated query.

    Ordering contract (MANDATORY):
      ORDER BY created_at DESC, id DESC

    Pages past the end return an empty item list, never an error.
    """
    total = query.order_by(None).count()

    items = (
        query.order_by(model.created_at.desc(), model.id.desc())
        .offset((page - 1) * per_page)
        .limit(per_page)
        .all()
    )

    return items, {"page": page, "per_page": per_page, "total": total}
