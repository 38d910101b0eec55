from typing import Set

from landing_hub.domain.errors import IllegalTransitionError

# Explicit allowed state transitions
ALLOWED_PAGE_TRANSITIONS: dict[str, Set[str]] = {
    "draft": {"published", "trashed"},
    "published": {"draft", "trashed"},
    "trashed": {"draft"},  # restore lands in draft
}

PAGE_STATUSES = tuple(ALLOWED_PAGE_TRANSITIONS)


def assert_page_transition(*, from_status: str, to_status: str) -> None:
    """
    Guards page lifecycle transitions.
    Single source of truth for status changes.
    """
    allowed = ALLOWED_PAGE_TRANSITIONS.get(from_status, set())

    if to_status not in allowed:
        raise IllegalTransitionError(
            f"Illegal page transition: {from_status} -> {to_status}",
            field="status",
        )
