# landing_hub/models/soft_delete_mixin.py
from landing_hub.extensions import db
from .base import utc_now

TRASHED = "trashed"


class TrashableMixin:
    """Pages are never hard-deleted; they move to the ``trashed`` status."""

    trashed_at = db.Column(db.DateTime(timezone=True), nullable=True)

    def trash(self):
        self.status = TRASHED
        self.trashed_at = utc_now()
        # frees the one-per-owner slot for non-repeatable templates
        self.singleton_key = None

    @property
    def is_trashed(self):
        return self.status == TRASHED
