# landing_hub/normalizers/pagination.py
from typing import Callable, Any, List, Dict

from landing_hub.utils.pagination import PageMeta


def normalize_pagination(
    items: List[Any],
    normalize_fn: Callable[[Any], Dict[str, Any]],
    *,
    meta: PageMeta,
) -> Dict[str, Any]:
    """
    Normalize paginated API responses (offset pagination).
    """

    # Normalize ORM objects → dicts
    normalized_items = [normalize_fn(item) for item in items]

    per_page = meta["per_page"]
    total = meta["total"]

    return {
        "items": normalized_items,
        "pagination": {
            "page": meta["page"],
            "per_page": per_page,
            "total": total,
            "total_pages": (total + per_page - 1) // per_page,
        },
    }
