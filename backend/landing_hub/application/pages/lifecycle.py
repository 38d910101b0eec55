from typing import Optional

from flask import current_app
from sqlalchemy.exc import IntegrityError

from landing_hub.application.access import ensure_can_edit
from landing_hub.application.pages.generate_page import (
    live_page_exists,
    map_integrity_error,
    slug_holder_lookup,
)
from landing_hub.domain.errors import DuplicatePageError
from landing_hub.domain.invariants.page import assert_page
from landing_hub.domain.lifecycle.page import assert_page_transition
from landing_hub.domain.slugs import resolve_slug
from landing_hub.domain.templates import get_template
from landing_hub.extensions import db
from landing_hub.models.page import Page
from landing_hub.services import HubServices, current_services
from landing_hub.utils.audit import log_action
from landing_hub.utils.transaction import transactional


def trash_page(*, page_id: str, actor_id, services: Optional[HubServices] = None) -> Page:
    """Move a page to the trash. Counters and slug history are kept."""
    services = services or current_services()
    page = ensure_can_edit(page_id, actor_id, groups=services.groups)

    with transactional():
        assert_page_transition(from_status=page.status, to_status="trashed")
        previous = page.status
        page.trash()

        log_action(
            action="page.trash",
            entity_type="page",
            entity_id=page.id,
            actor_id=actor_id,
            payload={"from_status": previous},
        )

    current_app.logger.info("Trashed page %s", page.id)
    return page


def restore_page(*, page_id: str, actor_id, services: Optional[HubServices] = None) -> Page:
    """
    Bring a trashed page back as a draft.

    Responsibilities:
    - one-per-owner rule re-checked (another page may have been generated meanwhile)
    - slug re-resolved if a live page took it over
    - audit logging
    """
    services = services or current_services()
    page = ensure_can_edit(page_id, actor_id, groups=services.groups)
    spec = get_template(page.template_type)

    assert_page_transition(from_status=page.status, to_status="draft")

    if not spec.allows_multiple and live_page_exists(page.owner_id, page.template_type, exclude_id=page.id):
        raise DuplicatePageError(
            f"User {page.owner_id} already has a live {spec.label} page.", field="template_type"
        )

    find_holder = slug_holder_lookup(page.template_type, exclude_id=page.id)
    holder = find_holder(page.slug)
    old_slug = page.slug
    if holder is not None and not holder.is_trashed:
        page.slug = resolve_slug(page.slug, page.owner_id, find_holder, allows_multiple=True)

    try:
        with transactional():
            page.status = "draft"
            page.trashed_at = None
            if not spec.allows_multiple:
                page.singleton_key = Page.singleton_key_for(page.template_type, page.owner_id)
            db.session.flush()
            assert_page(page)

            log_action(
                action="page.restore",
                entity_type="page",
                entity_id=page.id,
                actor_id=actor_id,
                payload={"slug": page.slug, "previous_slug": old_slug},
            )
    except IntegrityError as exc:
        raise map_integrity_error(exc) from exc

    return page


def change_status(*, page_id: str, actor_id, status: str, services: Optional[HubServices] = None) -> Page:
    """Publish or unpublish (draft) a live page."""
    services = services or current_services()
    page = ensure_can_edit(page_id, actor_id, groups=services.groups)

    if status == "trashed":
        return trash_page(page_id=page_id, actor_id=actor_id, services=services)

    with transactional():
        assert_page_transition(from_status=page.status, to_status=status)
        previous = page.status
        page.status = status

        log_action(
            action="page.status",
            entity_type="page",
            entity_id=page.id,
            actor_id=actor_id,
            payload={"from_status": previous, "to_status": status},
        )

    return page
