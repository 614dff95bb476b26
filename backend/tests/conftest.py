"""
Shared fixtures for the API tests.

Auth is exercised for real: ``get_current_user`` runs against a mocked
admin Supabase client patched into ``peakpulse.auth``. Router modules
get their own mocked clients in each test, so the auth lookup chain
never collides with the table chain under test.
"""

from __future__ import annotations

import uuid
from typing import Optional
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

CUSTOMER = {
    "id": str(uuid.uuid4()),
    "email": "pema@example.com",
    "name": "Pema Sherpa",
    "avatar_url": None,
    "roles": None,
    "wishlist": ["prod-1"],
    "bookmarked_post_ids": [],
}

ADMIN = {
    "id": str(uuid.uuid4()),
    "email": "admin@peakpulse.com",
    "name": "Store Admin",
    "roles": ["admin", "customer"],
    "wishlist": [],
    "bookmarked_post_ids": [],
}


def mock_auth_db(user: Optional[dict]) -> MagicMock:
    """A Supabase client whose auth.get_user resolves to ``user``."""
    auth_db = MagicMock()
    if user is None:
        auth_db.auth.get_user.side_effect = Exception("Invalid token")
        return auth_db

    auth_response = MagicMock()
    auth_response.user.id = user["id"]
    auth_db.auth.get_user.return_value = auth_response

    # users.select().eq().maybe_single().execute()
    user_row = MagicMock()
    user_row.data = dict(user)
    auth_db.table.return_value.select.return_value.eq.return_value.maybe_single.return_value.execute.return_value = user_row
    return auth_db


def _authenticated(user: Optional[dict]):
    with patch("peakpulse.auth.get_supabase_admin_client", return_value=mock_auth_db(user)):
        yield user


@pytest.fixture
def as_customer():
    yield from _authenticated(CUSTOMER)


@pytest.fixture
def as_admin():
    yield from _authenticated(ADMIN)


@pytest.fixture
def as_nobody():
    yield from _authenticated(None)


@pytest.fixture
def client() -> TestClient:
    from peakpulse.main import app
    return TestClient(app)


@pytest.fixture
def make_auth_db():
    return mock_auth_db
