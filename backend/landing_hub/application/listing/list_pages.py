from typing import Any, List, Optional, Tuple

from landing_hub.application.access import build_access_context, coerce_user_id, is_admin_user
from landing_hub.domain.access import can_access
from landing_hub.domain.templates import TemplateType, get_template
from landing_hub.models.page import Page
from landing_hub.models.partner_portal import PartnerPortal
from landing_hub.models.soft_delete_mixin import TRASHED
from landing_hub.services import HubServices, current_services
from landing_hub.utils.pagination import PageMeta, clamp_page_args, paginate_offset


def _live_pages(template_type: Optional[str] = None):
    query = Page.query.filter(Page.status != TRASHED)
    if template_type:
        query = query.filter(Page.template_type == get_template(template_type).template_type.value)
    return query


def _page_args(services: HubServices, page, per_page) -> Tuple[int, int]:
    settings = services.settings
    return clamp_page_args(
        page,
        per_page if per_page is not None else settings.default_per_page,
        default_per_page=settings.default_per_page,
        max_per_page=settings.max_per_page,
    )


def list_pages_for_owner(
    *,
    owner_id: int,
    page: Any = 1,
    per_page: Any = None,
    template_type: Optional[str] = None,
    services: Optional[HubServices] = None,
) -> Tuple[List[Page], PageMeta]:
    services = services or current_services()
    page, per_page = _page_args(services, page, per_page)
    query = _live_pages(template_type).filter(Page.owner_id == owner_id)
    return paginate_offset(query, model=Page, page=page, per_page=per_page)


def list_pages_for_partner(
    *,
    partner_id: int,
    page: Any = 1,
    per_page: Any = None,
    template_type: Optional[str] = None,
    services: Optional[HubServices] = None,
) -> Tuple[List[Page], PageMeta]:
    services = services or current_services()
    page, per_page = _page_args(services, page, per_page)
    query = _live_pages(template_type).filter(Page.co_brand_partner_id == partner_id)
    return paginate_offset(query, model=Page, page=page, per_page=per_page)


def list_pages_for_company(
    *,
    company_id: Optional[int],
    viewer_id,
    page: Any = 1,
    per_page: Any = None,
    services: Optional[HubServices] = None,
) -> Tuple[List[Page], PageMeta]:
    """
    Partner portals of a company (``group_id``), or every portal when
    ``company_id`` is None, restricted to those the viewer can access.

    Administrators see everything and are paginated in SQL. For anyone
    else access is decided per portal in Python, since grants live in
    JSON member lists and the group directory, so filtering happens
    before the page window is cut.
    """
    services = services or current_services()
    page, per_page = _page_args(services, page, per_page)

    query = _live_pages(TemplateType.PARTNER_PORTAL.value)
    if company_id is not None:
        query = query.join(PartnerPortal, PartnerPortal.page_id == Page.id).filter(
            PartnerPortal.group_id == company_id
        )

    if is_admin_user(coerce_user_id(viewer_id)):
        return paginate_offset(query, model=Page, page=page, per_page=per_page)

    candidates = query.order_by(Page.created_at.desc(), Page.id.desc()).all()
    visible = [
        portal_page
        for portal_page in candidates
        if can_access(build_access_context(portal_page, viewer_id, groups=services.groups))
    ]

    start = (page - 1) * per_page
    return visible[start:start + per_page], {
        "page": page,
        "per_page": per_page,
        "total": len(visible),
    }
