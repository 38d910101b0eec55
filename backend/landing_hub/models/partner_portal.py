from sqlalchemy.ext.mutable import MutableList
from landing_hub.extensions import db
from .base import BaseModel


class PartnerPortal(BaseModel):
    """Company-level data of a ``partner_portal`` page."""

    __tablename__ = "partner_portals"

    page_id = db.Column(db.String(36), db.ForeignKey("pages.id"), nullable=False, unique=True)
    company_name = db.Column(db.String(200), nullable=False)
    group_id = db.Column(db.Integer, nullable=True, index=True)

    # Ordered; the first loan officer supplies the displayed profile
    assigned_loan_officer_ids = db.Column(MutableList.as_mutable(db.JSON), nullable=False, default=list)
    manual_realtor_ids = db.Column(MutableList.as_mutable(db.JSON), nullable=False, default=list)

    page = db.relationship("Page", back_populates="portal")

    @property
    def primary_loan_officer_id(self):
        return self.assigned_loan_officer_ids[0] if self.assigned_loan_officer_ids else None
