# tests/conftest.py

"""
Pytest configuration and shared fixtures for testing.
"""

import os

# No background threads during tests
os.environ.setdefault("ENABLE_SCHEDULER", "false")

import itertools
import pytest
from fastapi.testclient import TestClient
from unittest.mock import patch
from typing import Generator

from main import create_app
from dependencies.auth import CurrentUser, get_current_user


# ============================================================
# In-memory Supabase double
# ============================================================
# Supports the subset of the PostgREST builder the app uses:
# select/eq/order/limit/maybe_single, insert/update/upsert/delete, rpc.

class FakeResponse:
    def __init__(self, data, count=None):
        self.data = data
        self.count = count


class FakeQuery:
    def __init__(self, db, table):
        self.db = db
        self.table = table
        self.op = "select"
        self.filters = []
        self.payload = None
        self.on_conflict = None
        self.single = False
        self.count_mode = None
        self.order_key = None
        self.order_desc = False
        self.limit_n = None

    # --- builder -------------------------------------------------
    def select(self, columns="*", count=None):
        self.op = "select"
        self.count_mode = count
        return self

    def eq(self, key, value):
        self.filters.append((key, value))
        return self

    def order(self, key, desc=False):
        self.order_key = key
        self.order_desc = desc
        return self

    def limit(self, n):
        self.limit_n = n
        return self

    def maybe_single(self):
        self.single = True
        return self

    def insert(self, row, returning=None):
        self.op = "insert"
        self.payload = row
        return self

    def update(self, data, returning=None):
        self.op = "update"
        self.payload = data
        return self

    def upsert(self, row, on_conflict=None, returning=None):
        self.op = "upsert"
        self.payload = row
        self.on_conflict = on_conflict
        return self

    def delete(self, returning=None):
        self.op = "delete"
        return self

    # --- execution -----------------------------------------------
    def _matches(self, row):
        return all(row.get(k) == v for k, v in self.filters)

    def execute(self):
        self.db.calls.append((self.table, self.op, self.payload))
        if self.table in self.db.failures:
            raise Exception(self.db.failures[self.table])

        rows = self.db.tables.setdefault(self.table, [])

        if self.op == "select":
            found = [dict(r) for r in rows if self._matches(r)]
            if self.order_key:
                found.sort(key=lambda r: str(r.get(self.order_key) or ""), reverse=self.order_desc)
            total = len(found)
            if self.limit_n is not None:
                found = found[: self.limit_n]
            if self.single:
                # postgrest returns None (not a response) when nothing matches
                return FakeResponse(found[0]) if found else None
            return FakeResponse(found, count=total if self.count_mode else None)

        if self.op == "insert":
            row = {"id": f"{self.table}-{next(self.db.ids)}", **self.payload}
            rows.append(row)
            return FakeResponse([dict(row)])

        if self.op == "update":
            updated = []
            for row in rows:
                if self._matches(row):
                    row.update(self.payload)
                    updated.append(dict(row))
            return FakeResponse(updated)

        if self.op == "upsert":
            key = self.on_conflict
            for row in rows:
                if key and row.get(key) == self.payload.get(key):
                    row.update(self.payload)
                    return FakeResponse([dict(row)])
            row = {"id": f"{self.table}-{next(self.db.ids)}", **self.payload}
            rows.append(row)
            return FakeResponse([dict(row)])

        if self.op == "delete":
            deleted = [dict(r) for r in rows if self._matches(r)]
            rows[:] = [r for r in rows if not self._matches(r)]
            return FakeResponse(deleted)

        raise AssertionError(f"unsupported op {self.op}")


class FakeRpc:
    def __init__(self, db, name, params):
        self.db = db
        self.name = name
        self.params = params

    def execute(self):
        if self.name in self.db.failures:
            raise Exception(self.db.failures[self.name])
        self.db.rpc_calls.append((self.name, self.params))
        return FakeResponse(None)


class FakeSupabase:
    def __init__(self):
        self.tables = {}
        self.failures = {}
        self.calls = []
        self.rpc_calls = []
        self.ids = itertools.count(1)

    def table(self, name):
        return FakeQuery(self, name)

    def rpc(self, name, params):
        return FakeRpc(self, name, params)

    # --- test helpers --------------------------------------------
    def seed(self, table, *rows):
        self.tables.setdefault(table, []).extend(dict(r) for r in rows)

    def rows(self, table):
        return self.tables.get(table, [])

    def fail(self, name, message="connection reset by peer"):
        self.failures[name] = message


SUPABASE_FACTORIES = [
    "core.supabase_helpers.get_supabase_client",
    "services.terminal_actions.get_supabase_client",
    "core.supabase_client.get_supabase_client",
]


@pytest.fixture
def fake_db() -> Generator[FakeSupabase, None, None]:
    """Patch every Supabase client factory with one shared in-memory db."""
    db = FakeSupabase()
    patchers = [patch(target, return_value=db) for target in SUPABASE_FACTORIES]
    for p in patchers:
        p.start()
    yield db
    for p in patchers:
        p.stop()


# ============================================================
# Users / app
# ============================================================

@pytest.fixture
def mock_current_user():
    """Create a mock current user for testing."""
    return CurrentUser(
        id="user-1",
        email="asha@example.com",
        full_name="Asha Rao",
    )


@pytest.fixture
def seed_user(fake_db, mock_current_user):
    """Base profile row for mock_current_user; returns a role-assigning helper."""
    fake_db.seed("profiles", {
        "id": mock_current_user.id,
        "full_name": "Asha Rao",
        "email": mock_current_user.email,
        "phone": "+91 98765-43210",
        "address": "12 MG Road",
        "is_verified": True,
    })

    def with_role(role: str, extension: dict = None):
        fake_db.seed("user_roles", {"user_id": mock_current_user.id, "role": role})
        if extension is not None:
            table = f"{role}_profiles"
            fake_db.seed(table, {"user_id": mock_current_user.id, **extension})

    return with_role


@pytest.fixture(scope="function")
def app(mock_current_user):
    """Create a test FastAPI application instance with auth stubbed."""
    application = create_app()
    application.dependency_overrides[get_current_user] = lambda: mock_current_user
    return application


@pytest.fixture(scope="function")
def client(app) -> Generator[TestClient, None, None]:
    """Create a test client for the FastAPI application."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture(autouse=True)
def reset_registry():
    """Reset wizard sessions before each test."""
    from core.wizard_registry import get_registry
    get_registry().clear()
    yield
    get_registry().clear()
