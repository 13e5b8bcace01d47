"""Pytest configuration and fixtures."""

import os
import sys
from datetime import datetime

import bcrypt
import pytest

# Add the parent directory to the path
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from talentbridge import create_app, db as app_db
from config.testing import TestingConfig
from talentbridge.models import Candidate, CandidateStatus, JointVenture, User, UserRole
from talentbridge.services.auth_service import AuthService
from talentbridge.services.authorization_policy import Actor

TEST_PASSWORD = "password123"
# Low cost factor keeps the suite fast
TEST_PASSWORD_HASH = bcrypt.hashpw(TEST_PASSWORD.encode("utf-8"), bcrypt.gensalt(rounds=4)).decode("utf-8")


@pytest.fixture(scope="session")
def app():
    """Create application for testing."""
    app = create_app(config=TestingConfig)
    return app


@pytest.fixture(scope="function")
def db(app):
    """Database session for testing."""
    with app.app_context():
        # Create all tables
        app_db.create_all()
        yield app_db
        # Drop all tables
        app_db.session.remove()
        app_db.drop_all()


@pytest.fixture(scope="function")
def client(app, db):
    """Flask test client; requests reuse the test's app context and session."""
    with app.test_client() as client:
        yield client


def make_user(db, email, role, jv=None, is_active=True):
    user = User(
        email=email,
        password_hash=TEST_PASSWORD_HASH,
        name=email.split("@")[0],
        role=role,
        jv_id=jv.id if jv is not None else None,
        is_active=is_active,
    )
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture
def jv1(db):
    jv = JointVenture(name="TechCorp")
    db.session.add(jv)
    db.session.commit()
    return jv


@pytest.fixture
def jv2(db):
    jv = JointVenture(name="SalesForce")
    db.session.add(jv)
    db.session.commit()
    return jv


@pytest.fixture
def hq_admin(db):
    return make_user(db, "admin@hq.com", UserRole.HQ_ADMIN)


@pytest.fixture
def second_hq_admin(db):
    return make_user(db, "ops@hq.com", UserRole.HQ_ADMIN)


@pytest.fixture
def partner1(db, jv1):
    return make_user(db, "partner@techcorp.com", UserRole.JV_PARTNER, jv1)


@pytest.fixture
def partner1b(db, jv1):
    return make_user(db, "second@techcorp.com", UserRole.JV_PARTNER, jv1)


@pytest.fixture
def partner2(db, jv2):
    return make_user(db, "partner@salesforce.com", UserRole.JV_PARTNER, jv2)


@pytest.fixture
def hq_actor(hq_admin):
    return Actor.from_user(hq_admin)


@pytest.fixture
def jv1_actor(partner1):
    return Actor.from_user(partner1)


@pytest.fixture
def jv2_actor(partner2):
    return Actor.from_user(partner2)


@pytest.fixture
def make_candidate(db):
    """
    Factory inserting a candidate row directly in a given state.

    Ownership fields must be passed consistently with the status.
    """
    def _make(status=CandidateStatus.READY, name="Alice Wong", current_jv=None, pending_jv=None, **fields):
        candidate = Candidate(
            name=name,
            email=fields.pop("email", f"{name.split()[0].lower()}@example.com"),
            status=status,
            current_jv_id=current_jv.id if current_jv is not None else None,
            pending_jv_id=pending_jv.id if pending_jv is not None else None,
            last_status_update=fields.pop("last_status_update", datetime.utcnow()),
            **fields,
        )
        db.session.add(candidate)
        db.session.commit()
        return candidate

    return _make


@pytest.fixture
def auth_headers(db):
    """Build an Authorization header for a user."""
    def _headers(user):
        token = AuthService._generate_access_token(user)
        return {"Authorization": f"Bearer {token}"}

    return _headers
