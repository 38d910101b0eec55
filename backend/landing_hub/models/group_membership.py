from landing_hub.extensions import db
from .base import BaseModel


class GroupMembership(BaseModel):
    __tablename__ = "group_memberships"

    group_id = db.Column(db.Integer, nullable=False, index=True)
    user_id = db.Column(db.Integer, nullable=False, index=True)

    __table_args__ = (
        db.UniqueConstraint("group_id", "user_id", name="uq_group_member"),
    )
