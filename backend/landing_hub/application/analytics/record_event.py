from typing import Optional

from flask import current_app
from sqlalchemy import update
from sqlalchemy.exc import IntegrityError

from landing_hub.domain.errors import NotFoundError
from landing_hub.extensions import db
from landing_hub.models.lead_conversion import LeadConversion
from landing_hub.models.page import Page
from landing_hub.models.soft_delete_mixin import TRASHED
from landing_hub.utils.transaction import transactional

VIEW_COUNTER = "view_count"
CONVERSION_COUNTER = "conversion_count"


def _increment(page_id: str, counter: str) -> int:
    """
    Atomically add one to a page counter and return the new total.

    A single ``UPDATE ... SET n = n + 1 ... RETURNING n`` so concurrent
    increments never read-modify-write in Python.
    """
    table = Page.__table__
    column = table.c[counter]

    stmt = (
        update(table)
        .where(table.c.id == page_id, table.c.status != TRASHED)
        # counters are not content edits; keep updated_at for optimistic locking
        .values({column: column + 1, table.c.updated_at: table.c.updated_at})
        .returning(column)
    )

    new_total = db.session.execute(stmt).scalar_one_or_none()
    if new_total is None:
        raise NotFoundError("Page not found")
    return new_total


def record_view(page_id: str) -> int:
    """Count one render of a page. Repeat visits count again."""
    with transactional():
        return _increment(page_id, VIEW_COUNTER)


def record_conversion(page_id: str, *, lead_id: Optional[str] = None) -> Optional[int]:
    """
    Count one captured lead for a page.

    With ``lead_id`` the conversion is recorded at most once per lead;
    a replayed lead returns ``None`` and leaves the counter untouched.
    """
    if lead_id is not None and LeadConversion.query.filter_by(lead_id=str(lead_id)).first():
        current_app.logger.info("Lead %s already counted; skipping", lead_id)
        return None

    try:
        with transactional():
            total = _increment(page_id, CONVERSION_COUNTER)
            if lead_id is not None:
                conversion = LeadConversion()
                conversion.page_id = page_id
                conversion.lead_id = str(lead_id)
                db.session.add(conversion)
                db.session.flush()
    except IntegrityError:
        # a concurrent delivery of the same lead won the insert
        current_app.logger.info("Lead %s already counted; skipping", lead_id)
        return None

    return total
