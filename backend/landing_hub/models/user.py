from werkzeug.security import generate_password_hash, check_password_hash
from landing_hub.extensions import db
from .base import BaseModel

ROLES = ("admin", "loan_officer", "realtor")


class User(BaseModel):
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    email = db.Column(db.String(120), unique=True, nullable=False)
    password_hash = db.Column(db.String(256), nullable=True)

    role = db.Column(db.String(50), nullable=False, default='loan_officer')
    is_active = db.Column(db.Boolean, default=True)

    # Profile fields served by the SQL profile directory
    first_name = db.Column(db.String(100), nullable=False, default="")
    last_name = db.Column(db.String(100), nullable=False, default="")
    phone = db.Column(db.String(40), nullable=True)
    job_title = db.Column(db.String(120), nullable=True)
    headshot_ref = db.Column(db.String(512), nullable=True)

    @property
    def is_admin(self):
        return self.role == "admin"

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        if not self.password_hash:
            return False
        return check_password_hash(self.password_hash, password)
