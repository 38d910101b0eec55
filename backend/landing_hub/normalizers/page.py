from landing_hub.domain.templates import get_template


def page_url(page, base_url):
    prefix = get_template(page.template_type).path_prefix
    parts = [base_url.rstrip("/")]
    if prefix:
        parts.append(prefix)
    parts.append(page.slug)
    return "/".join(parts)


def _ts(value):
    return value.isoformat() if value else None


def normalize_page(page, settings, admin=False):
    """
    Listing projection of a page. ``admin`` adds the template payloads
    (property data, portal membership) used by edit screens.
    """
    data = {
        "id": page.id,
        "title": page.title,
        "slug": page.slug,
        "template_type": page.template_type,
        "status": page.status,
        "url": page_url(page, settings.public_base_url),
        "view_count": page.view_count or 0,
        "conversion_count": page.conversion_count or 0,
        "owner_id": page.owner_id,
        "co_brand_partner_id": page.co_brand_partner_id,
        "image_ref": page.image_ref,
        "created_at": _ts(page.created_at),
        "updated_at": _ts(page.updated_at),
    }

    if admin:
        data["property_data"] = dict(page.property_data) if page.property_data else None
        data["partnership_id"] = page.partnership_id
        data["trashed_at"] = _ts(page.trashed_at)
        if page.portal is not None:
            data["portal"] = normalize_portal(page.portal)

    return data


def normalize_portal(portal):
    return {
        "company_name": portal.company_name,
        "group_id": portal.group_id,
        "assigned_loan_officer_ids": list(portal.assigned_loan_officer_ids or []),
        "manual_realtor_ids": list(portal.manual_realtor_ids or []),
        "primary_loan_officer_id": portal.primary_loan_officer_id,
    }
