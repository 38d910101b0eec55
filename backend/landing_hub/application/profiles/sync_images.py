from typing import List, Optional

from flask import current_app

from landing_hub.domain.templates import TemplateType
from landing_hub.models.page import Page
from landing_hub.models.soft_delete_mixin import TRASHED
from landing_hub.utils.audit import log_action
from landing_hub.utils.transaction import transactional


def pages_showing_user(user_id: int) -> List[Page]:
    """
    Live pages whose representative image is the user's headshot:
    pages they own (any template) except portals, plus portals where
    they are the first assigned loan officer.
    """
    portal_type = TemplateType.PARTNER_PORTAL.value

    owned = (
        Page.query
        .filter(Page.owner_id == user_id, Page.status != TRASHED, Page.template_type != portal_type)
        .all()
    )
    portals = [
        page
        for page in Page.query.filter(Page.template_type == portal_type, Page.status != TRASHED).all()
        if (page.portal.primary_loan_officer_id if page.portal else page.owner_id) == user_id
    ]
    return owned + portals


def sync_profile_images(*, user_id: int, headshot_ref: Optional[str]) -> int:
    """
    Re-point every live page showing ``user_id`` at the new headshot.

    Idempotent: pages already showing ``headshot_ref`` are left alone.
    Returns the number of pages changed.
    """
    changed = [page for page in pages_showing_user(user_id) if page.image_ref != headshot_ref]
    if not changed:
        return 0

    with transactional():
        for page in changed:
            page.image_ref = headshot_ref

        log_action(
            action="page.image_sync",
            entity_type="user",
            entity_id=str(user_id),
            payload={"pages": [page.id for page in changed], "headshot_ref": headshot_ref},
        )

    current_app.logger.info("Synced headshot of user %s to %d page(s)", user_id, len(changed))
    return len(changed)
