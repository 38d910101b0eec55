from typing import Any, Optional

from landing_hub.extensions import db
from landing_hub.models.audit_log import AuditLog


def log_action(
    *,
    action: str,
    entity_type: str,
    entity_id: Optional[str],
    actor_id: Optional[Any] = None,
    payload: dict | None = None
):
    """Adds an audit row to the current transaction; the caller commits."""
    log = AuditLog()

    log.actor_id = str(actor_id) if actor_id is not None else None
    log.action = action
    log.entity_type = entity_type
    log.entity_id = str(entity_id)
    log.payload = payload or {}

    db.session.add(log)
