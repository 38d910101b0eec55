import pytest

from landing_hub.application.analytics.record_event import record_conversion, record_view
from landing_hub.application.listing import list_pages as listing
from landing_hub.application.listing.list_pages import (
    list_pages_for_company,
    list_pages_for_owner,
    list_pages_for_partner,
)
from landing_hub.application.pages.get_page import get_page_by_slug, page_stats_for_owner
from landing_hub.application.pages.lifecycle import trash_page
from landing_hub.domain.errors import ForbiddenError, NotFoundError, UnknownTemplateError
from landing_hub.extensions import db
from landing_hub.models.group_membership import GroupMembership


@pytest.fixture
def people(make_user):
    return {
        "jane": make_user(id=42, first_name="Jane"),
        "joe": make_user(id=43, first_name="Joe"),
        "rita": make_user(id=7, first_name="Rita", role="realtor"),
        "admin": make_user(id=1, first_name="Ada", role="admin"),
    }


def test_owner_listing_skips_trashed_pages(people, make_page):
    biolink = make_page("biolink", owner_id=42)
    calculator = make_page("calculator", owner_id=42)
    make_page("biolink", owner_id=43)
    trash_page(page_id=calculator.id, actor_id=42)

    items, meta = list_pages_for_owner(owner_id=42)

    assert [page.id for page in items] == [biolink.id]
    assert meta == {"page": 1, "per_page": 20, "total": 1}


def test_owner_listing_paginates(people, make_page):
    for template in ("biolink", "calculator", "valuation"):
        make_page(template, owner_id=42)

    first, meta = list_pages_for_owner(owner_id=42, page=1, per_page=2)
    second, _ = list_pages_for_owner(owner_id=42, page=2, per_page=2)
    beyond, _ = list_pages_for_owner(owner_id=42, page=5, per_page=2)

    assert meta["total"] == 3
    assert len(first) == 2 and len(second) == 1
    assert {p.id for p in first}.isdisjoint({p.id for p in second})
    assert beyond == []


def test_owner_listing_filters_by_template(people, make_page):
    make_page("biolink", owner_id=42)
    make_page("prequal", owner_id=42, co_brand_partner_id=7)

    items, _ = list_pages_for_owner(owner_id=42, template_type="prequal")
    assert [page.template_type for page in items] == ["prequal"]


def test_page_size_is_capped(people, make_page):
    make_page("biolink", owner_id=42)
    _, meta = list_pages_for_owner(owner_id=42, per_page=1000)
    assert meta["per_page"] == 100


def test_partner_listing(people, make_page):
    prequal = make_page("prequal", owner_id=42, co_brand_partner_id=7)
    make_page("biolink", owner_id=42)

    items, meta = list_pages_for_partner(partner_id=7)
    assert [page.id for page in items] == [prequal.id]
    assert meta["total"] == 1


def test_company_listing_respects_access(people, make_page):
    acme = make_page("partner_portal", owner_id=42, company_name="Acme", group_id=10)
    beta = make_page("partner_portal", owner_id=43, company_name="Beta", group_id=20)

    db.session.add(GroupMembership(group_id=10, user_id=7))
    db.session.commit()

    visible, meta = list_pages_for_company(company_id=None, viewer_id=7)
    assert [page.id for page in visible] == [acme.id]
    assert meta["total"] == 1

    everything, _ = list_pages_for_company(company_id=None, viewer_id=1)
    assert {page.id for page in everything} == {acme.id, beta.id}

    only_beta, _ = list_pages_for_company(company_id=20, viewer_id=1)
    assert [page.id for page in only_beta] == [beta.id]

    nothing, meta = list_pages_for_company(company_id=20, viewer_id=7)
    assert nothing == [] and meta["total"] == 0


def test_admin_company_listing_paginates_in_sql(people, make_page, monkeypatch):
    portals = {
        make_page("partner_portal", owner_id=42, company_name=name, group_id=10).id
        for name in ("Acme", "Beta", "Gamma")
    }

    def unexpected(ctx):
        raise AssertionError("admins are not filtered per portal")

    monkeypatch.setattr(listing, "can_access", unexpected)

    first, meta = list_pages_for_company(company_id=10, viewer_id=1, per_page=2)
    second, _ = list_pages_for_company(company_id=10, viewer_id=1, page=2, per_page=2)

    assert meta == {"page": 1, "per_page": 2, "total": 3}
    assert len(first) == 2 and len(second) == 1
    assert {page.id for page in first + second} == portals


def test_page_lookup_by_slug_hides_existence(people, make_page):
    page = make_page("biolink", owner_id=42)

    assert get_page_by_slug(template_type="biolink", slug=page.slug, viewer_id=42).id == page.id
    assert get_page_by_slug(template_type="biolink", slug=page.slug.upper(), viewer_id=1).id == page.id

    with pytest.raises(ForbiddenError):
        get_page_by_slug(template_type="biolink", slug=page.slug, viewer_id=7)
    with pytest.raises(ForbiddenError):
        get_page_by_slug(template_type="biolink", slug="nobody", viewer_id=7)
    with pytest.raises(NotFoundError):
        get_page_by_slug(template_type="biolink", slug="nobody", viewer_id=1)
    with pytest.raises(NotFoundError):
        get_page_by_slug(template_type="calculator", slug=page.slug, viewer_id=1)
    with pytest.raises(UnknownTemplateError):
        get_page_by_slug(template_type="landing", slug=page.slug, viewer_id=42)

    trash_page(page_id=page.id, actor_id=42)
    with pytest.raises(ForbiddenError):
        get_page_by_slug(template_type="biolink", slug=page.slug, viewer_id=42)


def test_owner_stats_sum_live_pages(people, make_page):
    assert page_stats_for_owner(42) == {"owner_id": 42, "pages": 0, "views": 0, "conversions": 0}

    biolink = make_page("biolink", owner_id=42)
    calculator = make_page("calculator", owner_id=42)
    other = make_page("biolink", owner_id=43)
    record_view(biolink.id)
    record_view(biolink.id)
    record_view(calculator.id)
    record_conversion(biolink.id, lead_id="lead-1")
    record_view(other.id)

    assert page_stats_for_owner(42) == {"owner_id": 42, "pages": 2, "views": 3, "conversions": 1}

    trash_page(page_id=calculator.id, actor_id=42)
    assert page_stats_for_owner(42) == {"owner_id": 42, "pages": 1, "views": 2, "conversions": 1}
