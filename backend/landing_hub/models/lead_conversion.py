from landing_hub.extensions import db
from .base import BaseModel


class LeadConversion(BaseModel):
    """One row per lead counted as a conversion; replays of the same lead are ignored."""

    __tablename__ = "lead_conversions"

    page_id = db.Column(db.String(36), db.ForeignKey("pages.id"), nullable=False, index=True)
    lead_id = db.Column(db.String(64), nullable=False, unique=True)
