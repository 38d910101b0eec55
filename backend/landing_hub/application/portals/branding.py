from dataclasses import fields
from typing import Any, Dict, Mapping, Optional

from flask import current_app

from landing_hub.application.access import ensure_can_manage, ensure_can_view
from landing_hub.domain.branding import (
    BrandingDefaults,
    BrandingOverrides,
    ResolvedBranding,
    resolve,
)
from landing_hub.domain.errors import PageValidationError
from landing_hub.models.page import Page
from landing_hub.services import HubServices, current_services
from landing_hub.utils.audit import log_action
from landing_hub.utils.transaction import transactional

BRANDING_FIELDS = tuple(f.name for f in fields(BrandingOverrides))

ASSET_FIELDS = {
    "logo": "logo_ref",
    "background": "background_ref",
    "background_video": "background_video_ref",
}


def resolve_page_branding(page: Page, services: Optional[HubServices] = None) -> ResolvedBranding:
    services = services or current_services()
    return resolve(
        BrandingOverrides.from_dict(page.branding_overrides),
        BrandingDefaults.from_settings(services.settings),
        services.assets.get_image_url,
    )


def get_portal_branding(*, page_id: str, viewer_id, services: Optional[HubServices] = None) -> ResolvedBranding:
    services = services or current_services()
    page = ensure_can_view(page_id, viewer_id, groups=services.groups)
    return resolve_page_branding(page, services)


def update_branding(
    *,
    page_id: str,
    actor_id,
    overrides: Mapping[str, Any],
    services: Optional[HubServices] = None,
) -> Page:
    """
    Apply a partial branding update to a partner portal.

    Only portal managers may brand a portal. Unknown keys are ignored;
    an empty value clears a field back to the system default. Known keys
    must carry strings.
    """
    services = services or current_services()
    page = ensure_can_manage(page_id, actor_id, groups=services.groups)

    if not isinstance(overrides, Mapping):
        raise PageValidationError("Branding must be an object.", field="branding")
    for key in BRANDING_FIELDS:
        value = overrides.get(key)
        if value is not None and not isinstance(value, str):
            raise PageValidationError(f"{key} must be a string.", field=key)

    current = BrandingOverrides.from_dict(page.branding_overrides)
    updated = current.merged(overrides or {})
    changed = sorted(
        key for key, value in updated.to_dict().items() if current.to_dict().get(key) != value
    ) + sorted(key for key in current.to_dict() if key not in updated.to_dict())

    with transactional():
        page.branding_overrides = updated.to_dict()

        log_action(
            action="portal.branding",
            entity_type="page",
            entity_id=page.id,
            actor_id=actor_id,
            payload={"fields": changed},
        )

    return page


def upload_branding_asset(
    *,
    page_id: str,
    actor_id,
    kind: str,
    file,
    services: Optional[HubServices] = None,
) -> Page:
    """Store an uploaded logo/background and point the portal branding at it."""
    services = services or current_services()
    field = ASSET_FIELDS.get(kind)
    if field is None:
        raise PageValidationError(f"Unknown branding asset: {kind!r}", field="kind")

    page = ensure_can_manage(page_id, actor_id, groups=services.groups)

    try:
        ref = services.assets.save_upload(file)
    except ValueError as exc:
        raise PageValidationError(str(exc), field="file") from exc

    previous = (page.branding_overrides or {}).get(field)
    try:
        update_branding(page_id=page.id, actor_id=actor_id, overrides={field: ref}, services=services)
    except Exception:
        services.assets.delete(ref)
        raise

    # Cleanup outside the transaction
    if previous and previous != ref:
        services.assets.delete(previous)

    current_app.logger.info("Stored %s asset %s for portal %s", kind, ref, page.id)
    return page


def branding_payload(page: Page, services: Optional[HubServices] = None) -> Dict[str, Any]:
    return {
        "overrides": BrandingOverrides.from_dict(page.branding_overrides).to_dict(),
        "resolved": resolve_page_branding(page, services).to_dict(),
    }
