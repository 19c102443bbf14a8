"""
Pytest configuration and fixtures.

Supabase is replaced by FakeSupabase: table()/rpc() return a chainable query
that records its calls and answers execute() with canned rows.
"""
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from ims.config.permissions_config import get_default_permissions
from ims.core.access import Session, UserRole
from ims.core.session_manager import SessionManager
from ims.core.session_store import JsonFileStore


class FakeAPIError(Exception):
    """Stand-in for postgrest.exceptions.APIError (carries code and message)."""

    def __init__(self, message, code=None):
        super().__init__(message)
        self.message = message
        self.code = code


class FakeQuery:
    def __init__(self, rows=None, error=None):
        self.rows = rows if rows is not None else []
        self.error = error
        self.calls = []
        self.payload = None
        self.is_single = False

    def __getattr__(self, name):
        if name.startswith("__"):
            raise AttributeError(name)

        def method(*args, **kwargs):
            self.calls.append((name, args, kwargs))
            if name in ("insert", "update"):
                self.payload = args[0]
            if name == "single":
                self.is_single = True
            return self
        return method

    def execute(self):
        if self.error is not None:
            raise self.error
        if self.payload is not None:
            # update only touches existing rows; insert always returns the new row
            if not self.rows and self.calls[0][0] == "update":
                return SimpleNamespace(data=[])
            base = self.rows[0] if self.rows else {}
            return SimpleNamespace(data=[{**base, **self.payload}])
        if self.is_single:
            if not self.rows:
                raise FakeAPIError("JSON object requested, multiple (or no) rows returned", code="PGRST116")
            return SimpleNamespace(data=self.rows[0])
        return SimpleNamespace(data=self.rows)


class FakeSupabase:
    def __init__(self):
        self.tables = {}
        self.rpcs = {}
        self.queries = []
        self.auth = MagicMock()

    def _query(self, response):
        if isinstance(response, Exception):
            query = FakeQuery(error=response)
        else:
            query = FakeQuery(list(response))
        self.queries.append(query)
        return query

    def table(self, name):
        return self._query(self.tables.get(name, []))

    def rpc(self, name, params=None):
        return self._query(self.rpcs.get(name, []))


def make_profile(role="admin", email="admin@serranotex.com", **overrides):
    profile = {
        "id": "4f6c1a9e-0000-4000-8000-000000000001",
        "full_name": "Store Admin",
        "email": email,
        "phone": None,
        "role": role,
        "permissions": get_default_permissions(role),
        "assigned_locations": [],
        "is_active": True,
        "created_at": "2026-01-05T09:00:00+00:00",
        "updated_at": None,
    }
    profile.update(overrides)
    return profile


@pytest.fixture
def fake_supabase():
    return FakeSupabase()


@pytest.fixture
def store_path(tmp_path):
    return tmp_path / "session.json"


@pytest.fixture
def store(store_path):
    return JsonFileStore(str(store_path))


@pytest.fixture
def manager(store):
    return SessionManager(store, storage_key="userSession")


@pytest.fixture
def admin_session():
    return Session(
        email="admin@serranotex.com",
        name="Store Admin",
        role=UserRole.ADMIN,
        permissions=get_default_permissions("admin"),
    )


@pytest.fixture
def super_admin_session():
    return Session(
        email="owner@serranotex.com",
        name="Owner",
        role=UserRole.SUPER_ADMIN,
        permissions=get_default_permissions("super_admin"),
    )
