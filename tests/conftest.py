"""
Central pytest configuration for the clinic application tests.

This file provides common fixtures, test markers, and setup
for both unit and integration tests.
"""

import os
from datetime import datetime

import pytest

# Test database configuration (set early so import-time engines use it)
TEST_DATABASE_URL = "sqlite:///:memory:"  # In-memory SQLite for fast tests
os.environ["DATABASE_URL"] = TEST_DATABASE_URL
os.environ["TESTING"] = "true"  # Set testing environment variable
os.environ["RATE_LIMIT_ENABLED"] = "0"  # Disable rate limiting in tests
os.environ["METRICS_ENABLED"] = "0"
os.environ["LOG_TO_FILE"] = "0"
os.environ["FLASK_ENV"] = "development"
os.environ.pop("SENTRY_DSN", None)

from odonto.core.security import hash_password  # noqa: E402
from odonto.db.base import User, VolunteerApplication  # noqa: E402
from odonto.db.session import SessionLocal, create_tables, drop_tables  # noqa: E402
from odonto.main import create_app  # noqa: E402

TEST_PASSWORD = "correct-horse-battery"


def pytest_collection_modifyitems(config, items):
    """Add markers based on test file location."""
    for item in items:
        path = str(item.fspath)
        if f"{os.sep}unit{os.sep}" in path:
            item.add_marker(pytest.mark.unit)
        if f"{os.sep}integration{os.sep}" in path:
            item.add_marker(pytest.mark.integration)


@pytest.fixture
def app():
    """Flask app bound to a freshly created in-memory database."""
    drop_tables()
    create_tables()
    flask_app = create_app(
        {
            "TESTING": True,
            "SECRET_KEY": "test-secret-key",
            "WTF_CSRF_ENABLED": False,
        }
    )
    yield flask_app
    drop_tables()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def db_session(app):
    """Session for arranging and checking data around HTTP calls."""
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def user_factory(db_session):
    """Create persisted users: user_factory(role="admin", email=...)."""

    def _create(role="admin", email=None, password=TEST_PASSWORD, active=True):
        user = User(
            email=email or f"{role}@example.com",
            name=f"{role.title()} User",
            role=role,
            active_flag=active,
            password_hash=hash_password(password),
        )
        db_session.add(user)
        db_session.commit()
        return user

    return _create


def login(client, user):
    """Mark `user` as logged in for subsequent requests of `client`."""
    with client.session_transaction() as sess:
        sess["_user_id"] = str(user.id)
        sess["_fresh"] = True


@pytest.fixture
def admin_client(client, user_factory):
    login(client, user_factory(role="admin"))
    return client


@pytest.fixture
def guardian_client(client, user_factory):
    login(client, user_factory(role="guardian"))
    return client


@pytest.fixture
def application_factory(db_session):
    """Create persisted volunteer applications."""

    def _create(
        name="Ana Souza",
        status="pending",
        seen=False,
        submitted_at=None,
        reviewer_note=None,
    ):
        application = VolunteerApplication(
            applicant_name=name,
            email=f"{name.split()[0].lower()}@example.com",
            phone="11 99999-0000",
            license_number="CRO-12345",
            message="I would like to help.",
            status=status,
            seen=seen,
            submitted_at=submitted_at or datetime(2024, 5, 1, 10, 0),
            reviewer_note=reviewer_note,
        )
        db_session.add(application)
        db_session.commit()
        return application

    return _create
