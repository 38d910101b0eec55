# Import every model so metadata (and Flask-Migrate) sees all tables.
from .audit_log import AuditLog
from .group_membership import GroupMembership
from .lead_conversion import LeadConversion
from .page import Page
from .partner_portal import PartnerPortal
from .user import User

__all__ = ["AuditLog", "GroupMembership", "LeadConversion", "Page", "PartnerPortal", "User"]
