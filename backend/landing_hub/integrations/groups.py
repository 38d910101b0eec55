from landing_hub.extensions import db
from landing_hub.models.group_membership import GroupMembership


class SqlGroupDirectory:
    """Group membership backed by the ``group_memberships`` table."""

    def is_member(self, group_id: int, user_id: int) -> bool:
        if group_id is None or user_id is None:
            return False
        return db.session.query(
            GroupMembership.query.filter_by(group_id=group_id, user_id=user_id).exists()
        ).scalar()

    def add_member(self, group_id: int, user_id: int) -> bool:
        """Adds within the caller's transaction; ``False`` if already a member."""
        if self.is_member(group_id, user_id):
            return False
        membership = GroupMembership()
        membership.group_id = group_id
        membership.user_id = user_id
        db.session.add(membership)
        db.session.flush()
        return True

    def remove_member(self, group_id: int, user_id: int) -> bool:
        deleted = GroupMembership.query.filter_by(
            group_id=group_id, user_id=user_id
        ).delete(synchronize_session=False)
        return bool(deleted)
