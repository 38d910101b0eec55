from typing import Any, Dict, Iterable, List, Optional

from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from landing_hub.domain.branding import BrandingDefaults
from landing_hub.domain.errors import (
    DuplicatePageError,
    InternalError,
    MissingPartnerError,
    MissingPropertyDataError,
    OwnerNotFoundError,
    PageValidationError,
)
from landing_hub.domain.invariants.page import assert_page
from landing_hub.domain.slugs import SlugHolder, resolve_slug
from landing_hub.domain.templates import SEED_COMPANY_NAME, TemplateSpec, TemplateType, get_template
from landing_hub.extensions import db
from landing_hub.integrations.profiles import Profile, ProfileDirectoryError
from landing_hub.models.page import Page
from landing_hub.models.partner_portal import PartnerPortal
from landing_hub.models.soft_delete_mixin import TRASHED
from landing_hub.services import HubServices, current_services
from landing_hub.utils.audit import log_action
from landing_hub.utils.transaction import transactional

PROPERTY_FIELDS = ("address", "price", "bedrooms", "bathrooms", "square_feet", "open_house_date")


def generate_page(
    *,
    template_type: str,
    owner_id: Optional[int] = None,
    actor_id: Optional[int] = None,
    co_brand_partner_id: Optional[int] = None,
    property_data: Optional[Dict[str, Any]] = None,
    explicit_slug_seed: Optional[str] = None,
    company_name: Optional[str] = None,
    group_id: Optional[int] = None,
    loan_officer_ids: Optional[Iterable[int]] = None,
    partnership_id: Optional[int] = None,
    services: Optional[HubServices] = None,
) -> Page:
    """
    Generate a published landing page from a template.

    Validation runs fail-fast in this order:
    - template exists
    - owner resolves in the profile directory
    - co-brand partner present and resolvable (co-branded templates only)
    - property address present (open house only)
    - no live page of a one-per-owner template for this owner

    The storage unique indexes remain the final word on slug and
    one-per-owner uniqueness when two requests race.
    """
    services = services or current_services()

    # 1️⃣ Template
    spec = get_template(template_type)

    # 2️⃣ Owner: explicit, else first assigned loan officer, else the caller
    loan_officers = _coerce_ids(loan_officer_ids, field="loan_officer_ids")
    owner_id = _resolve_owner_id(owner_id, loan_officers, actor_id)
    owner = _lookup_profile(services, owner_id, error=OwnerNotFoundError, field="owner_id")

    # 3️⃣ Co-brand partner
    partner = _check_partner(spec, services, co_brand_partner_id)

    # 4️⃣ Property data
    property_payload = _check_property_data(spec, property_data)

    company_name = (company_name or "").strip() or None
    if spec.slug_seed_field == SEED_COMPANY_NAME and not company_name:
        raise PageValidationError("Company name is required.", field="company_name")

    # 5️⃣ One page per owner for non-repeatable templates
    if not spec.allows_multiple and live_page_exists(owner_id, spec.template_type):
        raise DuplicatePageError(
            f"User {owner_id} already has a {spec.label} page.", field="template_type"
        )

    seed = explicit_slug_seed or (company_name if spec.slug_seed_field == SEED_COMPANY_NAME else owner.first_name)
    slug = resolve_slug(
        seed or owner.display_name,
        owner_id,
        slug_holder_lookup(spec.template_type.value),
        allows_multiple=spec.allows_multiple,
    )

    page = Page()
    page.template_type = spec.template_type.value
    page.title = _build_title(spec, owner, partner, property_payload, company_name)
    page.slug = slug
    page.status = "published"
    page.owner_id = owner_id
    page.co_brand_partner_id = partner.user_id if partner else None
    page.partnership_id = partnership_id if spec.requires_co_brand else None
    page.property_data = property_payload
    page.view_count = 0
    page.conversion_count = 0
    if not spec.allows_multiple:
        page.singleton_key = Page.singleton_key_for(page.template_type, owner_id)

    if spec.template_type is TemplateType.PARTNER_PORTAL:
        defaults = BrandingDefaults.from_settings(services.settings)
        page.branding_overrides = {
            "primary_color": defaults.primary_color,
            "secondary_color": defaults.secondary_color,
            "button_style": "rounded",
        }
        portal = PartnerPortal()
        portal.company_name = company_name
        portal.group_id = group_id
        portal.assigned_loan_officer_ids = [owner_id] + [i for i in loan_officers if i != owner_id]
        portal.manual_realtor_ids = []
        page.portal = portal

    assign_representative_image(page, owner, services)

    persist_new_page(page, actor_id=actor_id)

    current_app.logger.info(
        "Generated %s page %s (slug=%s) for owner %s",
        page.template_type, page.id, page.slug, owner_id,
    )
    return page


def persist_new_page(page: Page, *, actor_id: Optional[int]) -> None:
    try:
        with transactional():
            db.session.add(page)
            db.session.flush()  # ensures page.id is available

            # 🔒 Domain invariants (single source of truth)
            assert_page(page)

            log_action(
                action="page.generate",
                entity_type="page",
                entity_id=page.id,
                actor_id=actor_id,
                payload={
                    "template_type": page.template_type,
                    "slug": page.slug,
                    "owner_id": page.owner_id,
                    "co_brand_partner_id": page.co_brand_partner_id,
                },
            )
    except IntegrityError as exc:
        raise map_integrity_error(exc) from exc
    except SQLAlchemyError as exc:
        current_app.logger.exception("Failed to store generated page")
        raise InternalError("The page could not be stored.") from exc


def map_integrity_error(exc: IntegrityError):
    # Typically raised by the live-slug index or the one-per-owner key
    if "unique" in str(exc.orig).lower() or "duplicate" in str(exc.orig).lower():
        return DuplicatePageError("A page with this slug or owner already exists.", field="slug")
    current_app.logger.error("Integrity error storing page: %s", exc.orig)
    return InternalError("The page could not be stored.")


def live_page_exists(owner_id: int, template_type, *, exclude_id: Optional[str] = None) -> bool:
    query = Page.query.filter(
        Page.owner_id == owner_id,
        Page.template_type == TemplateType(template_type).value,
        Page.status != TRASHED,
    )
    if exclude_id is not None:
        query = query.filter(Page.id != exclude_id)
    return db.session.query(query.exists()).scalar()


def slug_holder_lookup(template_type: str, *, exclude_id: Optional[str] = None):
    def find_holder(slug: str) -> Optional[SlugHolder]:
        query = Page.query.with_entities(Page.owner_id, Page.status).filter(
            Page.template_type == template_type,
            Page.slug == slug,
        )
        if exclude_id is not None:
            query = query.filter(Page.id != exclude_id)
        rows = query.order_by(Page.created_at.desc()).all()
        if not rows:
            return None
        live = [row for row in rows if row.status != TRASHED]
        owner_id, status = (live or rows)[0]
        return SlugHolder(owner_id=owner_id, is_trashed=status == TRASHED)

    return find_holder


def assign_representative_image(page: Page, profile: Optional[Profile], services: HubServices) -> bool:
    """Use the profile headshot as the page image. Never fatal."""
    if profile is None or not profile.headshot_ref:
        return False
    try:
        if services.assets.get_image_url(profile.headshot_ref, "medium") is None:
            current_app.logger.warning(
                "Headshot %s of user %s not found; page /%s of owner %s keeps no image",
                profile.headshot_ref, profile.user_id, page.slug, page.owner_id,
            )
            return False
        page.image_ref = profile.headshot_ref
        return True
    except Exception:  # noqa: BLE001 - image assignment must not abort generation
        current_app.logger.warning(
            "Could not set representative image for page /%s of owner %s",
            page.slug, page.owner_id, exc_info=True,
        )
        return False


def _coerce_ids(values: Optional[Iterable[Any]], *, field: str) -> List[int]:
    ids: List[int] = []
    for value in values or ():
        try:
            user_id = int(value)
        except (TypeError, ValueError):
            raise PageValidationError(f"Invalid user id: {value!r}", field=field) from None
        if user_id not in ids:
            ids.append(user_id)
    return ids


def _resolve_owner_id(owner_id, loan_officers: List[int], actor_id) -> int:
    for candidate in (owner_id, loan_officers[0] if loan_officers else None, actor_id):
        if candidate is None or candidate == "":
            continue
        try:
            return int(candidate)
        except (TypeError, ValueError):
            raise OwnerNotFoundError(f"Invalid owner id: {candidate!r}", field="owner_id") from None
    raise OwnerNotFoundError("An owner is required.", field="owner_id")


def _lookup_profile(services: HubServices, user_id: int, *, error, field: str) -> Profile:
    try:
        profile = services.profiles.get_profile(user_id)
    except ProfileDirectoryError as exc:
        current_app.logger.warning("Profile lookup for user %s failed: %s", user_id, exc)
        raise error(f"User {user_id} could not be resolved.", field=field) from exc
    if profile is None:
        raise error(f"User {user_id} not found.", field=field)
    return profile


def _check_partner(spec: TemplateSpec, services: HubServices, partner_id) -> Optional[Profile]:
    if not spec.requires_co_brand:
        if partner_id not in (None, ""):
            raise MissingPartnerError(
                f"{spec.label} pages do not take a co-brand partner.", field="co_brand_partner_id"
            )
        return None

    if partner_id in (None, ""):
        raise MissingPartnerError(
            f"{spec.label} pages require a co-brand partner.", field="co_brand_partner_id"
        )
    try:
        partner_id = int(partner_id)
    except (TypeError, ValueError):
        raise MissingPartnerError(
            f"Invalid partner id: {partner_id!r}", field="co_brand_partner_id"
        ) from None
    return _lookup_profile(services, partner_id, error=MissingPartnerError, field="co_brand_partner_id")


def _check_property_data(spec: TemplateSpec, property_data) -> Optional[Dict[str, Any]]:
    if not spec.requires_property_data:
        return None

    if not isinstance(property_data, dict):
        property_data = {}
    address = str(property_data.get("address") or "").strip()
    if not address:
        raise MissingPropertyDataError(
            f"{spec.label} pages require a property address.", field="property_data.address"
        )

    payload = {key: property_data[key] for key in PROPERTY_FIELDS if property_data.get(key) not in (None, "")}
    payload["address"] = address
    return payload


def _build_title(spec, owner: Profile, partner: Optional[Profile], property_data, company_name) -> str:
    values = {
        "owner_name": owner.display_name or owner.first_name,
        "owner_first": owner.first_name or owner.display_name,
        "partner_first": partner.first_name if partner else "",
        "address": (property_data or {}).get("address", ""),
        "company_name": company_name or "",
    }
    return spec.title_format.format_map(values)[:200]
