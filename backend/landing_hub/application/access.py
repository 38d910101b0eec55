from typing import Any, Optional

from landing_hub.domain.access import (
    AccessContext,
    can_access,
    can_edit_page,
    can_manage_company,
)
from landing_hub.domain.errors import ForbiddenError, NotFoundError
from landing_hub.domain.templates import TemplateType
from landing_hub.extensions import db
from landing_hub.models.page import Page
from landing_hub.models.user import User
from landing_hub.services import current_services


def coerce_user_id(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def is_admin_user(user_id: Optional[int]) -> bool:
    if user_id is None:
        return False
    user = db.session.get(User, user_id)
    return bool(user and user.is_active and user.is_admin)


def build_access_context(page, viewer_id, *, groups=None) -> AccessContext:
    viewer_id = coerce_user_id(viewer_id)
    groups = groups or current_services().groups
    return AccessContext(
        page=page,
        viewer_id=viewer_id,
        is_admin=is_admin_user(viewer_id),
        is_member=groups.is_member,
    )


def can_view_page(page, viewer_id, *, groups=None) -> bool:
    return can_access(build_access_context(page, viewer_id, groups=groups))


def _denied(viewer_id, message: str):
    # Only viewers with an access path to everything learn that a page is missing
    if is_admin_user(coerce_user_id(viewer_id)):
        return NotFoundError(message)
    return ForbiddenError("You do not have access to this page.")


def check_page_for(page: Optional[Page], viewer_id, *, check, groups=None, portal_only=False) -> Page:
    if page is None or (portal_only and page.template_type != TemplateType.PARTNER_PORTAL.value):
        raise _denied(viewer_id, "Page not found")

    if not check(build_access_context(page, viewer_id, groups=groups)):
        raise ForbiddenError("You do not have access to this page.")

    return page


def load_page_for(page_id: str, viewer_id, *, check, groups=None, portal_only=False) -> Page:
    page = db.session.get(Page, page_id) if page_id else None
    return check_page_for(page, viewer_id, check=check, groups=groups, portal_only=portal_only)


def ensure_can_view(page_id: str, viewer_id, *, groups=None) -> Page:
    return load_page_for(page_id, viewer_id, check=can_access, groups=groups)


def ensure_can_edit(page_id: str, actor_id, *, groups=None) -> Page:
    return load_page_for(page_id, actor_id, check=can_edit_page, groups=groups)


def ensure_can_manage(page_id: str, actor_id, *, groups=None) -> Page:
    return load_page_for(
        page_id, actor_id, check=can_manage_company, groups=groups, portal_only=True
    )
