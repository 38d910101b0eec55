"""
Access control for pages.

Viewing is granted by the first matching predicate of ``VIEW_GRANTS``;
managing a partner portal only by ``MANAGE_GRANTS``. Group membership and
manual realtor overrides let people *see* a portal, never operate it.
"""
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple

from .templates import TemplateType

logger = logging.getLogger(__name__)

MembershipLookup = Callable[[int, int], bool]


def _no_membership(group_id: int, user_id: int) -> bool:
    return False


@dataclass(frozen=True)
class AccessContext:
    page: Any
    viewer_id: Optional[int]
    is_admin: bool = False
    is_member: MembershipLookup = _no_membership

    @property
    def portal(self):
        if self.page.template_type != TemplateType.PARTNER_PORTAL.value:
            return None
        return getattr(self.page, "portal", None)


Grant = Callable[[AccessContext], bool]


def is_platform_admin(ctx: AccessContext) -> bool:
    return ctx.is_admin


def is_owner(ctx: AccessContext) -> bool:
    return ctx.page.owner_id == ctx.viewer_id


def is_assigned_loan_officer(ctx: AccessContext) -> bool:
    portal = ctx.portal
    return portal is not None and ctx.viewer_id in (portal.assigned_loan_officer_ids or [])


def is_group_member(ctx: AccessContext) -> bool:
    portal = ctx.portal
    if portal is None or portal.group_id is None:
        return False
    return bool(ctx.is_member(portal.group_id, ctx.viewer_id))


def is_manual_realtor(ctx: AccessContext) -> bool:
    portal = ctx.portal
    return portal is not None and ctx.viewer_id in (portal.manual_realtor_ids or [])


VIEW_GRANTS: Tuple[Grant, ...] = (
    is_platform_admin,
    is_owner,
    is_assigned_loan_officer,
    is_group_member,
    is_manual_realtor,
)

MANAGE_GRANTS: Tuple[Grant, ...] = (
    is_platform_admin,
    is_assigned_loan_officer,
)


def first_grant(ctx: AccessContext, grants: Tuple[Grant, ...]) -> Optional[str]:
    """Name of the first predicate granting access, ``None`` when denied."""
    if ctx.viewer_id is None and not ctx.is_admin:
        return None
    for grant in grants:
        try:
            if grant(ctx):
                return grant.__name__
        except Exception:  # noqa: BLE001 - access checks deny, they never raise
            logger.warning("Access grant %s failed for viewer %s", grant.__name__, ctx.viewer_id, exc_info=True)
            return None
    return None


def can_access(ctx: AccessContext) -> bool:
    return first_grant(ctx, VIEW_GRANTS) is not None


def can_manage_company(ctx: AccessContext) -> bool:
    if ctx.page.template_type != TemplateType.PARTNER_PORTAL.value:
        return False
    return first_grant(ctx, MANAGE_GRANTS) is not None


def can_edit_page(ctx: AccessContext) -> bool:
    """Lifecycle changes: portal managers for portals, owner or admin otherwise."""
    if ctx.portal is not None:
        return can_manage_company(ctx)
    return first_grant(ctx, (is_platform_admin, is_owner)) is not None
