import io

import pytest
from werkzeug.datastructures import FileStorage

from landing_hub.application.portals.branding import (
    get_portal_branding,
    update_branding,
    upload_branding_asset,
)
from landing_hub.application.portals.members import (
    bulk_add_realtors,
    remove_realtor,
    set_loan_officers,
    update_portal,
)
from landing_hub.domain.errors import ForbiddenError, OwnerNotFoundError, PageValidationError
from landing_hub.extensions import db
from landing_hub.integrations.groups import SqlGroupDirectory
from landing_hub.models.audit_log import AuditLog
from landing_hub.models.user import User


@pytest.fixture
def portal(make_user, make_page):
    make_user(id=42, first_name="Jane", headshot_ref="https://cdn.test/jane.jpg")
    make_user(id=43, first_name="Joe", headshot_ref="https://cdn.test/joe.jpg")
    make_user(id=7, first_name="Rita", role="realtor")
    make_user(id=1, first_name="Ada", role="admin")
    return make_page("partner_portal", owner_id=42, company_name="Acme Realty", group_id=10)


def test_new_portal_branding_resolves_to_defaults(portal):
    branding = get_portal_branding(page_id=portal.id, viewer_id=42)

    assert branding.primary_color == "#2563eb"
    assert branding.button_radius == "25px"
    assert branding.background_video_url


def test_loan_officer_updates_branding(portal):
    page = update_branding(
        page_id=portal.id,
        actor_id=42,
        overrides={"primary_color": "#111111", "button_style": "gradient", "font": "ignored"},
    )

    assert page.branding_overrides["primary_color"] == "#111111"
    assert "font" not in page.branding_overrides
    branding = get_portal_branding(page_id=portal.id, viewer_id=42)
    assert branding.button_radius == "12px"


def test_clearing_an_override_restores_default(portal):
    update_branding(page_id=portal.id, actor_id=42, overrides={"primary_color": "#111111"})
    update_branding(page_id=portal.id, actor_id=42, overrides={"primary_color": ""})

    assert get_portal_branding(page_id=portal.id, viewer_id=42).primary_color == "#2563eb"


def test_realtor_can_view_but_not_brand(portal):
    bulk_add_realtors(page_id=portal.id, actor_id=42, realtors=[{"user_id": 7}])

    assert get_portal_branding(page_id=portal.id, viewer_id=7).primary_color == "#2563eb"
    with pytest.raises(ForbiddenError):
        update_branding(page_id=portal.id, actor_id=7, overrides={"primary_color": "#000000"})


def test_branding_only_for_portals(portal, make_page):
    biolink = make_page("biolink", owner_id=42)
    with pytest.raises(ForbiddenError):
        update_branding(page_id=biolink.id, actor_id=42, overrides={"primary_color": "#000000"})


def test_logo_upload_replaces_previous_asset(app, portal):
    def upload(name):
        return FileStorage(stream=io.BytesIO(b"\x89PNG fake"), filename=name, content_type="image/png")

    page = upload_branding_asset(page_id=portal.id, actor_id=42, kind="logo", file=upload("logo.png"))
    first_ref = page.branding_overrides["logo_ref"]
    branding = get_portal_branding(page_id=portal.id, viewer_id=42)
    assert branding.logo_url == f"https://hub.test/uploads/{first_ref}"

    page = upload_branding_asset(page_id=portal.id, actor_id=42, kind="logo", file=upload("logo2.png"))
    assets = app.extensions["landing_hub"].assets
    assert page.branding_overrides["logo_ref"] != first_ref
    assert not assets.exists(first_ref)
    assert assets.exists(page.branding_overrides["logo_ref"])


def test_upload_rejects_bad_kind_and_type(portal):
    file = FileStorage(stream=io.BytesIO(b"MZ"), filename="tool.exe")
    with pytest.raises(PageValidationError):
        upload_branding_asset(page_id=portal.id, actor_id=42, kind="favicon", file=file)
    with pytest.raises(PageValidationError):
        upload_branding_asset(page_id=portal.id, actor_id=42, kind="logo", file=file)


def test_set_loan_officers_changes_primary_and_image(portal):
    page = set_loan_officers(page_id=portal.id, actor_id=42, loan_officer_ids=[43, 42])

    assert page.portal.assigned_loan_officer_ids == [43, 42]
    assert page.portal.primary_loan_officer_id == 43
    assert page.image_ref == "https://cdn.test/joe.jpg"


def test_set_loan_officers_validates(portal):
    with pytest.raises(PageValidationError):
        set_loan_officers(page_id=portal.id, actor_id=42, loan_officer_ids=[])
    with pytest.raises(OwnerNotFoundError):
        set_loan_officers(page_id=portal.id, actor_id=42, loan_officer_ids=[42, 999])


def test_unassigned_loan_officer_loses_management(portal):
    set_loan_officers(page_id=portal.id, actor_id=1, loan_officer_ids=[43])
    with pytest.raises(ForbiddenError):
        update_branding(page_id=portal.id, actor_id=42, overrides={"primary_color": "#000000"})


def test_bulk_add_realtors(portal):
    results = bulk_add_realtors(
        page_id=portal.id,
        actor_id=42,
        realtors=[
            {"user_id": 7},
            {"email": "New.Agent@Example.com", "first_name": "New", "last_name": "Agent"},
            {"email": "not-an-email"},
            {"user_id": 4040},
        ],
    )

    assert results["created"] == 1
    assert results["updated"] == 1
    assert results["skipped"] == 2
    assert len(results["errors"]) == 2

    created = User.query.filter_by(email="new.agent@example.com").one()
    assert created.role == "realtor"
    assert portal.portal.manual_realtor_ids == [7, created.id]
    assert SqlGroupDirectory().is_member(10, created.id)


def test_remove_realtor_keeps_group_unless_asked(portal):
    bulk_add_realtors(page_id=portal.id, actor_id=42, realtors=[{"user_id": 7}])
    groups = SqlGroupDirectory()

    page = remove_realtor(page_id=portal.id, actor_id=42, user_id=7)
    assert 7 not in page.portal.manual_realtor_ids
    assert groups.is_member(10, 7)
    # still a group member, so still a viewer
    assert get_portal_branding(page_id=portal.id, viewer_id=7)

    remove_realtor(page_id=portal.id, actor_id=42, user_id=7, include_group=True)
    assert not groups.is_member(10, 7)
    with pytest.raises(ForbiddenError):
        get_portal_branding(page_id=portal.id, viewer_id=7)


def test_branding_rejects_non_string_values(portal):
    with pytest.raises(PageValidationError) as exc:
        update_branding(page_id=portal.id, actor_id=42, overrides={"primary_color": 123})
    assert exc.value.field == "primary_color"

    with pytest.raises(PageValidationError):
        update_branding(page_id=portal.id, actor_id=42, overrides={"button_style": ["square"]})
    with pytest.raises(PageValidationError):
        update_branding(page_id=portal.id, actor_id=42, overrides=["primary_color"])

    assert portal.branding_overrides["button_style"] == "rounded"


def test_corrupt_stored_branding_still_resolves(portal):
    portal.branding_overrides = {"primary_color": 123, "button_style": ["square"], "logo_ref": 5}
    db.session.commit()

    branding = get_portal_branding(page_id=portal.id, viewer_id=42)
    assert branding.primary_color == "#2563eb"
    assert branding.button_radius == "25px"


def test_update_portal_renames_and_keeps_slug(portal):
    slug = portal.slug
    page = update_portal(page_id=portal.id, actor_id=42, company_name="  Beta Homes ")

    assert page.portal.company_name == "Beta Homes"
    assert page.title == "Beta Homes - Partner Portal"
    assert page.slug == slug
    audit = AuditLog.query.filter_by(entity_id=portal.id, action="portal.update").one()
    assert audit.payload["company_name"] == {"from": "Acme Realty", "to": "Beta Homes"}


def test_update_portal_moves_group_access(portal):
    groups = SqlGroupDirectory()
    groups.add_member(10, 7)
    db.session.commit()
    assert get_portal_branding(page_id=portal.id, viewer_id=7)

    page = update_portal(page_id=portal.id, actor_id=42, group_id=20)
    assert page.portal.group_id == 20
    with pytest.raises(ForbiddenError):
        get_portal_branding(page_id=portal.id, viewer_id=7)

    assert update_portal(page_id=portal.id, actor_id=42, group_id=None).portal.group_id is None


def test_update_portal_validates_and_guards(portal):
    with pytest.raises(PageValidationError):
        update_portal(page_id=portal.id, actor_id=42, company_name="   ")
    with pytest.raises(PageValidationError):
        update_portal(page_id=portal.id, actor_id=42, group_id="acme")

    bulk_add_realtors(page_id=portal.id, actor_id=42, realtors=[{"user_id": 7}])
    with pytest.raises(ForbiddenError):
        update_portal(page_id=portal.id, actor_id=7, company_name="Hijacked")
    assert portal.portal.company_name == "Acme Realty"
