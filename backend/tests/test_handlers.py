import pytest

from landing_hub.application.pages.lifecycle import trash_page
from landing_hub.domain.events import LeadCaptured, ProfileImageChanged, publish
from landing_hub.extensions import db


@pytest.fixture
def team(make_user):
    make_user(id=42, first_name="Jane", headshot_ref="https://cdn.test/jane-v1.jpg")
    make_user(id=43, first_name="Joe", headshot_ref="https://cdn.test/joe.jpg")
    make_user(id=7, first_name="Rita", role="realtor")


def results(responses):
    return [value for _, value in responses]


def test_headshot_change_updates_every_page_showing_the_user(team, make_page):
    biolink = make_page("biolink", owner_id=42)
    prequal = make_page("prequal", owner_id=42, co_brand_partner_id=7)
    led_portal = make_page("partner_portal", company_name="Acme", loan_officer_ids=[42, 43])
    other_portal = make_page("partner_portal", company_name="Beta", loan_officer_ids=[43, 42])
    trashed = make_page("calculator", owner_id=42)
    trash_page(page_id=trashed.id, actor_id=42)

    updated = results(publish(ProfileImageChanged(user_id=42, headshot_ref="https://cdn.test/jane-v2.jpg")))
    assert updated == [3]

    for page in (biolink, prequal, led_portal, other_portal, trashed):
        db.session.refresh(page)
    assert biolink.image_ref == "https://cdn.test/jane-v2.jpg"
    assert prequal.image_ref == "https://cdn.test/jane-v2.jpg"
    assert led_portal.image_ref == "https://cdn.test/jane-v2.jpg"
    assert other_portal.image_ref == "https://cdn.test/joe.jpg"
    assert trashed.image_ref == "https://cdn.test/jane-v1.jpg"


def test_headshot_sync_is_idempotent(team, make_page):
    make_page("biolink", owner_id=42)
    event = ProfileImageChanged(user_id=42, headshot_ref="https://cdn.test/jane-v2.jpg")

    assert results(publish(event)) == [1]
    assert results(publish(event)) == [0]


def test_lead_captured_counts_conversion_once(team, make_page):
    page = make_page("biolink", owner_id=42)
    event = LeadCaptured(page_id=page.id, lead_id="lead-77", lead_data={"email": "buyer@example.com"})

    assert results(publish(event)) == [1]
    assert results(publish(event)) == [None]

    db.session.refresh(page)
    assert page.conversion_count == 1
