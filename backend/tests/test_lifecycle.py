import pytest

from landing_hub.application.pages.get_page import get_page
from landing_hub.application.pages.lifecycle import change_status, restore_page, trash_page
from landing_hub.domain.errors import (
    DuplicatePageError,
    ForbiddenError,
    IllegalTransitionError,
    NotFoundError,
)
from landing_hub.models.audit_log import AuditLog


@pytest.fixture
def jane(make_user):
    return make_user(id=42, first_name="Jane")


@pytest.fixture
def rita(make_user):
    return make_user(id=7, first_name="Rita", role="realtor")


def test_trash_and_restore_as_draft(jane, make_page):
    page = make_page("biolink", owner_id=42)

    trashed = trash_page(page_id=page.id, actor_id=42)
    assert trashed.status == "trashed"
    assert trashed.trashed_at is not None
    assert trashed.singleton_key is None

    restored = restore_page(page_id=page.id, actor_id=42)
    assert restored.status == "draft"
    assert restored.trashed_at is None
    assert restored.slug == "jane"

    actions = [row.action for row in AuditLog.query.filter_by(entity_id=page.id).order_by(AuditLog.created_at)]
    assert actions == ["page.generate", "page.trash", "page.restore"]


def test_restore_blocked_by_newer_single_page(jane, make_page):
    old = make_page("biolink", owner_id=42)
    trash_page(page_id=old.id, actor_id=42)
    make_page("biolink", owner_id=42)

    with pytest.raises(DuplicatePageError):
        restore_page(page_id=old.id, actor_id=42)


def test_restore_takes_new_slug_when_taken_over(jane, rita, make_page):
    old = make_page("prequal", owner_id=42, co_brand_partner_id=7)
    trash_page(page_id=old.id, actor_id=42)
    newer = make_page("prequal", owner_id=42, co_brand_partner_id=7)
    assert newer.slug == "jane"

    restored = restore_page(page_id=old.id, actor_id=42)
    assert restored.slug == "jane42"


def test_status_changes_follow_lifecycle(jane, make_page):
    page = make_page("calculator", owner_id=42)

    assert change_status(page_id=page.id, actor_id=42, status="draft").status == "draft"
    assert change_status(page_id=page.id, actor_id=42, status="published").status == "published"

    with pytest.raises(IllegalTransitionError):
        change_status(page_id=page.id, actor_id=42, status="published")
    with pytest.raises(IllegalTransitionError):
        change_status(page_id=page.id, actor_id=42, status="archived")

    assert change_status(page_id=page.id, actor_id=42, status="trashed").status == "trashed"
    with pytest.raises(IllegalTransitionError):
        change_status(page_id=page.id, actor_id=42, status="published")


def test_only_owner_or_admin_edits(jane, make_user, make_page):
    make_user(id=50, role="loan_officer")
    make_user(id=1, role="admin")
    page = make_page("biolink", owner_id=42)

    with pytest.raises(ForbiddenError):
        trash_page(page_id=page.id, actor_id=50)
    assert trash_page(page_id=page.id, actor_id=1).status == "trashed"


def test_missing_page_hidden_from_non_admins(jane, make_user):
    make_user(id=1, role="admin")

    with pytest.raises(ForbiddenError):
        get_page(page_id="missing", viewer_id=42)
    with pytest.raises(NotFoundError):
        get_page(page_id="missing", viewer_id=1)


def test_get_page_requires_access(jane, make_user, make_page):
    make_user(id=50, role="realtor")
    page = make_page("biolink", owner_id=42)

    assert get_page(page_id=page.id, viewer_id=42).id == page.id
    with pytest.raises(ForbiddenError):
        get_page(page_id=page.id, viewer_id=50)
