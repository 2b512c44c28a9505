"""
Central pytest configuration for the scheduler tests.

Environment variables are set before any application import so that the
lazy engine, the limiter and the config constants pick up test values.
"""

import base64
import os

# Test database configuration (set early so import-time engines use it)
TEST_DATABASE_URL = "sqlite:///:memory:"  # In-memory SQLite for fast tests
os.environ["DATABASE_URL"] = TEST_DATABASE_URL
os.environ["TESTING"] = "true"
os.environ["RATE_LIMIT_ENABLED"] = "0"  # Disable rate limiting in tests
os.environ["WTF_CSRF_ENABLED"] = "0"  # Forms are posted without tokens
os.environ["LOG_TO_FILE"] = "0"
os.environ["FLASK_ENV"] = "testing"
os.environ["JWT_SECRET_KEY"] = "test-jwt-secret"
os.environ["FLASK_SECRET_KEY"] = "test-secret"
for _name in ("API_TOKEN", "ADMIN_USERNAME", "ADMIN_PASSWORD", "SENTRY_DSN"):
    os.environ.pop(_name, None)

import pytest  # noqa: E402

from tests.config.markers import (  # noqa: E402,F401
    pytest_collection_modifyitems,
    pytest_configure,
)

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "admin-pass-123"


@pytest.fixture
def app():
    """Create a Flask application over a fresh in-memory database."""
    from scheduler.db.seed import ensure_admin_user
    from scheduler.db.session import drop_tables
    from scheduler.main import create_app

    drop_tables()
    app = create_app()  # creates the tables and seeds roles/settings
    app.config.update({"TESTING": True, "WTF_CSRF_ENABLED": False})
    ensure_admin_user(ADMIN_USERNAME, ADMIN_PASSWORD, "admin@example.org")

    yield app

    drop_tables()


@pytest.fixture
def client(app):
    """Create a test client for the Flask application."""
    with app.test_client() as client:
        yield client


@pytest.fixture
def db_session(app):
    """Database session bound to the test database."""
    from scheduler.db.session import SessionLocal

    with SessionLocal() as session:
        yield session


@pytest.fixture
def basic_auth_headers():
    """HTTP Basic credentials of the seeded admin."""
    raw = f"{ADMIN_USERNAME}:{ADMIN_PASSWORD}".encode("utf-8")
    return {"Authorization": "Basic " + base64.b64encode(raw).decode("ascii")}


@pytest.fixture
def auth_headers(app):
    """Bearer JWT of the seeded admin."""
    from scheduler.core.security import create_user_token
    from scheduler.db.session import SessionLocal
    from scheduler.repositories.user_repo import UserRepository
    from scheduler.core.config import DB_SLUG_ADMIN

    with SessionLocal() as db:
        credentials = UserRepository(db, DB_SLUG_ADMIN).find_credentials(ADMIN_USERNAME)

    token = create_user_token(
        credentials["user_id"], ADMIN_USERNAME, credentials["role"]
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def response_helper():
    """Simple response helper for integration tests."""

    class ResponseHelper:
        @staticmethod
        def assert_html_response(response, expected_status=200):
            assert response.status_code == expected_status
            return response.get_data(as_text=True)

        @staticmethod
        def assert_json_response(response, expected_status=200):
            assert response.status_code == expected_status
            return response.get_json()

        @staticmethod
        def assert_redirect_response(response):
            assert response.status_code in (301, 302, 303, 307, 308)
            return response.headers.get("Location")

    return ResponseHelper()
