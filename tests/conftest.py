"""
Shared pytest fixtures for the session gateway tests.

This module provides:
- A user store backed by a temporary users file
- A message catalog with an extra locale
- A Flask app and test client built through create_app overrides
"""

import os
import sys

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.server import create_app
from core.gateway import SessionGateway
from core.messages import MessageCatalog
from core.session_state import InMemorySessionState
from core.user_store import UserStore

PASSWORD = "s3cret-pass"


@pytest.fixture
def users_file(tmp_path):
    return tmp_path / "users.json"


@pytest.fixture
def store(users_file):
    """Store seeded with admin plus one regular user, 'alice'."""
    user_store = UserStore(users_file, admin_password="admin-pass")
    user_store.add_user("alice", PASSWORD, "alice@example.com")
    return user_store


@pytest.fixture
def catalog():
    return MessageCatalog({"fr": {"session.flash_notice.logged_out": "Vous avez été déconnecté."}})


@pytest.fixture
def gateway(store, catalog):
    return SessionGateway(store, catalog)


@pytest.fixture
def session_state():
    return InMemorySessionState()


@pytest.fixture
def app(tmp_path, users_file):
    """Flask app writing its users to a temp file, with 'alice' registered."""
    flask_app = create_app({
        "SECRET_KEY": "test-secret",
        "TESTING": True,
        "USERS_FILE": users_file,
        "MESSAGES_FILE": tmp_path / "missing-messages.yaml",
        "LOCALE": "en",
        "ADMIN_PASSWORD": "admin-pass",
        "REMEMBER_TOKEN_DAYS": 14,
        "AUTH_COOKIE_NAME": "auth_token",
        "AUTH_COOKIE_SECURE": False,
    })
    flask_app.extensions["session_gateway"].store.add_user("alice", PASSWORD, "alice@example.com")
    return flask_app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def app_store(app):
    return app.extensions["session_gateway"].store


@pytest.fixture
def password():
    return PASSWORD
