import re
from typing import Any, Dict, Iterable, List, Mapping, Optional

from flask import current_app

from landing_hub.application.access import coerce_user_id, ensure_can_manage
from landing_hub.application.pages.generate_page import assign_representative_image
from landing_hub.domain.errors import OwnerNotFoundError, PageValidationError
from landing_hub.domain.templates import TemplateType, get_template
from landing_hub.extensions import db
from landing_hub.integrations.profiles import ProfileDirectoryError
from landing_hub.models.page import Page
from landing_hub.models.user import User
from landing_hub.services import HubServices, current_services
from landing_hub.utils.audit import log_action
from landing_hub.utils.transaction import transactional

_EMAIL = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

_UNSET = object()


def set_loan_officers(
    *,
    page_id: str,
    actor_id,
    loan_officer_ids: Iterable[Any],
    services: Optional[HubServices] = None,
) -> Page:
    """
    Replace the ordered loan officer assignment of a portal.

    The first loan officer supplies the portal's displayed profile and
    representative image.
    """
    services = services or current_services()
    page = ensure_can_manage(page_id, actor_id, groups=services.groups)

    ids: List[int] = []
    for value in loan_officer_ids or ():
        user_id = coerce_user_id(value)
        if user_id is None:
            raise PageValidationError(f"Invalid user id: {value!r}", field="loan_officer_ids")
        if user_id not in ids:
            ids.append(user_id)
    if not ids:
        raise PageValidationError("A portal needs at least one loan officer.", field="loan_officer_ids")

    profiles = {}
    for user_id in ids:
        try:
            profile = services.profiles.get_profile(user_id)
        except ProfileDirectoryError as exc:
            raise OwnerNotFoundError(f"User {user_id} could not be resolved.", field="loan_officer_ids") from exc
        if profile is None:
            raise OwnerNotFoundError(f"User {user_id} not found.", field="loan_officer_ids")
        profiles[user_id] = profile

    previous = list(page.portal.assigned_loan_officer_ids)

    with transactional():
        page.portal.assigned_loan_officer_ids = ids
        if previous[:1] != ids[:1]:
            assign_representative_image(page, profiles[ids[0]], services)

        log_action(
            action="portal.members",
            entity_type="page",
            entity_id=page.id,
            actor_id=actor_id,
            payload={"loan_officer_ids": ids, "previous": previous},
        )

    return page


def bulk_add_realtors(
    *,
    page_id: str,
    actor_id,
    realtors: Iterable[Mapping[str, Any]],
    services: Optional[HubServices] = None,
) -> Dict[str, Any]:
    """
    Grant realtors view access to a portal.

    Each entry is ``{"user_id": ...}`` or ``{"email", "first_name",
    "last_name"}``; unknown emails create realtor accounts. Realtors are
    added to the manual list and, when the portal has a group, to it.
    """
    services = services or current_services()
    page = ensure_can_manage(page_id, actor_id, groups=services.groups)
    portal = page.portal

    results: Dict[str, Any] = {"created": 0, "updated": 0, "skipped": 0, "errors": []}
    added: List[int] = []

    with transactional():
        for entry in realtors or ():
            user = _find_or_create_realtor(entry, results)
            if user is None:
                continue

            if user.id not in portal.manual_realtor_ids:
                portal.manual_realtor_ids.append(user.id)
            if portal.group_id is not None:
                services.groups.add_member(portal.group_id, user.id)
            added.append(user.id)

        log_action(
            action="portal.members",
            entity_type="page",
            entity_id=page.id,
            actor_id=actor_id,
            payload={"added_realtor_ids": added, "skipped": results["skipped"]},
        )

    current_app.logger.info(
        "Bulk realtor upload on portal %s: created=%d updated=%d skipped=%d",
        page.id, results["created"], results["updated"], results["skipped"],
    )
    return results


def _find_or_create_realtor(entry: Mapping[str, Any], results: Dict[str, Any]) -> Optional[User]:
    if not isinstance(entry, Mapping):
        results["skipped"] += 1
        results["errors"].append(f"Invalid entry: {entry!r}")
        return None

    if entry.get("user_id") is not None:
        user_id = coerce_user_id(entry.get("user_id"))
        user = db.session.get(User, user_id) if user_id is not None else None
        if user is None:
            results["skipped"] += 1
            results["errors"].append(f"Unknown user: {entry.get('user_id')}")
            return None
        results["updated"] += 1
        return user

    email = str(entry.get("email") or "").strip().lower()
    if not _EMAIL.match(email):
        results["skipped"] += 1
        results["errors"].append(f"Invalid email: {email}")
        return None

    user = User.query.filter_by(email=email).first()
    if user is not None:
        results["updated"] += 1
        return user

    user = User()
    user.email = email
    user.role = "realtor"
    user.first_name = str(entry.get("first_name") or "").strip()
    user.last_name = str(entry.get("last_name") or "").strip()
    db.session.add(user)
    db.session.flush()  # ensures user.id is available
    results["created"] += 1
    return user


def remove_realtor(
    *,
    page_id: str,
    actor_id,
    user_id,
    include_group: bool = False,
    services: Optional[HubServices] = None,
) -> Page:
    services = services or current_services()
    page = ensure_can_manage(page_id, actor_id, groups=services.groups)
    portal = page.portal
    user_id = coerce_user_id(user_id)

    with transactional():
        if user_id in portal.manual_realtor_ids:
            portal.manual_realtor_ids.remove(user_id)
        removed_from_group = False
        if include_group and portal.group_id is not None:
            removed_from_group = services.groups.remove_member(portal.group_id, user_id)

        log_action(
            action="portal.members",
            entity_type="page",
            entity_id=page.id,
            actor_id=actor_id,
            payload={"removed_realtor_id": user_id, "group": removed_from_group},
        )

    return page


def update_portal(
    *,
    page_id: str,
    actor_id,
    company_name: Optional[str] = None,
    group_id: Any = _UNSET,
    services: Optional[HubServices] = None,
) -> Page:
    """
    Rename a portal's company or move it to another group.

    Renaming retitles the page but keeps its slug, so published URLs stay
    valid. ``group_id=None`` detaches the portal from its group; group
    members lose the access they had through it.
    """
    services = services or current_services()
    page = ensure_can_manage(page_id, actor_id, groups=services.groups)
    portal = page.portal

    changes: Dict[str, Any] = {}

    if company_name is not None:
        name = company_name.strip() if isinstance(company_name, str) else ""
        if not name:
            raise PageValidationError("Company name is required.", field="company_name")
        if name != portal.company_name:
            changes["company_name"] = {"from": portal.company_name, "to": name}

    if group_id is not _UNSET:
        new_group = coerce_user_id(group_id)
        if group_id is not None and new_group is None:
            raise PageValidationError(f"Invalid group id: {group_id!r}", field="group_id")
        if new_group != portal.group_id:
            changes["group_id"] = {"from": portal.group_id, "to": new_group}

    if not changes:
        return page

    with transactional():
        if "company_name" in changes:
            portal.company_name = changes["company_name"]["to"]
            title_format = get_template(TemplateType.PARTNER_PORTAL.value).title_format
            page.title = title_format.format(company_name=portal.company_name)[:200]
        if "group_id" in changes:
            portal.group_id = changes["group_id"]["to"]

        log_action(
            action="portal.update",
            entity_type="page",
            entity_id=page.id,
            actor_id=actor_id,
            payload=changes,
        )

    return page
