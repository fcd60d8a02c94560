"""
Pytest fixtures for the denimtrack backend tests.

Provides test database setup, user fixtures, and test client helpers.
"""

import pytest

from denimtrack import create_app
from denimtrack.config import TestConfig
from denimtrack.extensions import db
from denimtrack.permissions import ROLE_ADMIN, ROLE_DATA_ENTRY
from denimtrack.services.auth_service import register_user


PASSWORD = "Password123!"


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app(TestConfig)

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function', autouse=True)
def db_session(app):
    """Create fresh database for each test."""
    with app.app_context():
        db.session.rollback()
        # Clear all data but keep schema
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        yield db.session

        # Cleanup after test
        db.session.rollback()


@pytest.fixture(scope='function')
def admin_user(db_session):
    return register_user("admin_alpha", PASSWORD, ROLE_ADMIN)


@pytest.fixture(scope='function')
def second_admin(db_session):
    return register_user("admin_beta", PASSWORD, ROLE_ADMIN)


@pytest.fixture(scope='function')
def clerk_user(db_session):
    """DATA_ENTRY user."""
    return register_user("clerk_one", PASSWORD, ROLE_DATA_ENTRY)


@pytest.fixture(scope='function')
def admin_headers(client, admin_user):
    return auth_headers(get_auth_token(client, admin_user.username, PASSWORD))


@pytest.fixture(scope='function')
def second_admin_headers(client, second_admin):
    return auth_headers(get_auth_token(client, second_admin.username, PASSWORD))


@pytest.fixture(scope='function')
def clerk_headers(client, clerk_user):
    return auth_headers(get_auth_token(client, clerk_user.username, PASSWORD))


def get_auth_token(client, username: str, password: str) -> str:
    """Helper to get auth token for a user."""
    response = client.post('/api/auth/login', json={
        'username': username,
        'password': password
    })
    if response.status_code == 200:
        return response.json.get('token')
    return None


def auth_headers(token: str) -> dict:
    """Helper to create Authorization headers."""
    return {'Authorization': f'Bearer {token}'}


def bulk_input_payload(**overrides) -> dict:
    payload = {
        "date": "2024-01-10",
        "styleNumber": "S100",
        "quantity": 500,
        "supplier": "CIB",
    }
    payload.update(overrides)
    return payload
