"""Shared test infrastructure for the Landing Hub test suite.

Provides:
- app: Flask app on in-memory SQLite with all tables created, app context pushed
- client: Flask test client
- make_user: factory for User rows (the SQL profile directory)
- auth_headers: Authorization header for a user
- make_page: generate a page through the real generator
- webhook_headers: header carrying the webhook shared secret
"""

import itertools

import pytest
from flask_jwt_extended import create_access_token

from landing_hub import create_app
from landing_hub.application.pages.generate_page import generate_page
from landing_hub.extensions import db
from landing_hub.models.user import User

_emails = itertools.count(1)


# ---------------------------------------------------------------------------
# App / database
# ---------------------------------------------------------------------------

@pytest.fixture
def app(tmp_path):
    app = create_app("testing", config_overrides={"UPLOAD_FOLDER": str(tmp_path / "uploads")})

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------

@pytest.fixture
def make_user(app):
    """Create a user; ``id`` may be fixed to match scenario ids (42, 99, ...)."""

    def _make_user(first_name="Jane", last_name="Doe", role="loan_officer", **kwargs):
        user = User()
        if "id" in kwargs:
            user.id = kwargs.pop("id")
        user.email = kwargs.pop("email", f"user{next(_emails)}@example.com")
        user.first_name = first_name
        user.last_name = last_name
        user.role = role
        user.headshot_ref = kwargs.pop("headshot_ref", None)
        user.phone = kwargs.pop("phone", None)
        user.job_title = kwargs.pop("job_title", None)
        password = kwargs.pop("password", None)
        if password:
            user.set_password(password)
        for key, value in kwargs.items():
            setattr(user, key, value)
        db.session.add(user)
        db.session.commit()
        return user

    return _make_user


@pytest.fixture
def make_page(app):
    def _make_page(template_type="biolink", owner_id=None, **kwargs):
        return generate_page(template_type=template_type, owner_id=owner_id, **kwargs)

    return _make_page


@pytest.fixture
def auth_headers(app):
    def _auth_headers(user):
        token = create_access_token(identity=str(user.id), additional_claims={"role": user.role})
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers


@pytest.fixture
def webhook_headers(app):
    return {"X-Webhook-Token": app.config["WEBHOOK_TOKEN"]}
