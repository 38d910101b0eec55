from typing import Any, Dict, Optional

from sqlalchemy import func

from landing_hub.application.access import check_page_for, ensure_can_view
from landing_hub.domain.access import can_access
from landing_hub.domain.templates import get_template
from landing_hub.extensions import db
from landing_hub.models.page import Page
from landing_hub.models.soft_delete_mixin import TRASHED
from landing_hub.services import HubServices, current_services


def get_page(*, page_id: str, viewer_id, services: Optional[HubServices] = None) -> Page:
    """
    Fetch a page for a viewer.

    Missing and inaccessible pages both raise ``ForbiddenError`` unless
    the viewer is a platform administrator, who gets ``NotFoundError``.
    """
    services = services or current_services()
    return ensure_can_view(page_id, viewer_id, groups=services.groups)


def get_page_by_slug(
    *,
    template_type: str,
    slug: str,
    viewer_id,
    services: Optional[HubServices] = None,
) -> Page:
    """
    Fetch the live page published at ``/<template prefix>/<slug>``.

    Same disclosure rule as :func:`get_page`; an unknown template type
    raises ``UnknownTemplateError``.
    """
    services = services or current_services()
    spec = get_template(template_type)

    page = None
    if slug:
        page = Page.query.filter(
            Page.template_type == spec.template_type.value,
            Page.slug == str(slug).strip().lower(),
            Page.status != TRASHED,
        ).first()

    return check_page_for(page, viewer_id, check=can_access, groups=services.groups)


def page_stats_for_owner(owner_id: int) -> Dict[str, Any]:
    """Live page count and summed counters of an owner."""
    pages, views, conversions = db.session.query(
        func.count(Page.id),
        func.coalesce(func.sum(Page.view_count), 0),
        func.coalesce(func.sum(Page.conversion_count), 0),
    ).filter(Page.owner_id == owner_id, Page.status != TRASHED).one()

    return {
        "owner_id": owner_id,
        "pages": int(pages),
        "views": int(views),
        "conversions": int(conversions),
    }
