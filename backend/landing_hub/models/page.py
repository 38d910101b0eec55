from sqlalchemy.ext.mutable import MutableDict
from landing_hub.extensions import db
from .base import BaseModel
from .soft_delete_mixin import TrashableMixin

LIVE_PAGE_CLAUSE = db.text("status != 'trashed'")


class Page(BaseModel, TrashableMixin):
    __tablename__ = "pages"

    template_type = db.Column(db.String(40), nullable=False, index=True)
    title = db.Column(db.String(200), nullable=False)
    slug = db.Column(db.String(200), nullable=False, index=True)
    status = db.Column(db.String(20), nullable=False, default="published", index=True)

    owner_id = db.Column(db.Integer, nullable=False, index=True)
    co_brand_partner_id = db.Column(db.Integer, nullable=True, index=True)
    partnership_id = db.Column(db.Integer, nullable=True)

    view_count = db.Column(db.Integer, nullable=False, default=0, server_default="0")
    conversion_count = db.Column(db.Integer, nullable=False, default=0, server_default="0")

    property_data = db.Column(MutableDict.as_mutable(db.JSON(none_as_null=True)), nullable=True)
    branding_overrides = db.Column(MutableDict.as_mutable(db.JSON(none_as_null=True)), nullable=True)
    image_ref = db.Column(db.String(512), nullable=True)

    # "<template>:<owner>" while live for templates allowing one page per owner
    singleton_key = db.Column(db.String(80), nullable=True, unique=True)

    __table_args__ = (
        db.Index(
            "uq_live_page_slug",
            "template_type",
            "slug",
            unique=True,
            sqlite_where=LIVE_PAGE_CLAUSE,
            postgresql_where=LIVE_PAGE_CLAUSE,
        ),
        db.Index("ix_pages_owner_template", "owner_id", "template_type"),
        db.CheckConstraint("view_count >= 0", name="ck_pages_view_count"),
        db.CheckConstraint("conversion_count >= 0", name="ck_pages_conversion_count"),
    )

    portal = db.relationship(
        "PartnerPortal",
        back_populates="page",
        uselist=False,
        cascade="all, delete-orphan",
    )

    @staticmethod
    def singleton_key_for(template_type, owner_id):
        return f"{template_type}:{owner_id}"
