from landing_hub.domain.errors import InvariantViolation
from landing_hub.domain.templates import TemplateType, get_template


def assert_page(page):
    spec = get_template(page.template_type)

    if page.owner_id is None:
        raise InvariantViolation("Page must have an owner.", field="owner_id")

    if spec.requires_co_brand and page.co_brand_partner_id is None:
        raise InvariantViolation(
            f"{spec.label} pages require a co-brand partner.", field="co_brand_partner_id"
        )
    if not spec.requires_co_brand and page.co_brand_partner_id is not None:
        raise InvariantViolation(
            f"{spec.label} pages cannot have a co-brand partner.", field="co_brand_partner_id"
        )

    if spec.requires_property_data:
        if not page.property_data or not page.property_data.get("address"):
            raise InvariantViolation(
                f"{spec.label} pages require a property address.", field="property_data.address"
            )
    elif page.property_data:
        raise InvariantViolation(
            f"{spec.label} pages cannot carry property data.", field="property_data"
        )

    is_portal = spec.template_type is TemplateType.PARTNER_PORTAL
    if page.branding_overrides and not is_portal:
        raise InvariantViolation(
            "Only partner portals carry branding overrides.", field="branding_overrides"
        )

    if (page.view_count or 0) < 0 or (page.conversion_count or 0) < 0:
        raise InvariantViolation("Page counters cannot be negative.")
