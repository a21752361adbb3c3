# tests/conftest.py

"""
Pytest configuration and shared fixtures.

The service is exercised against in-memory stand-ins for Supabase Auth
(FakeSessionProvider) and the profile tables (InMemoryProfileStore).
"""

import asyncio
import pytest
from fastapi.testclient import TestClient
from typing import Generator

from core.config import settings
from main import create_app
from dependencies.auth import get_profile_store, get_session_provider
from models.enums import SessionEvent
from models.session import SessionIdentity
from services.profile_store import Found, NotFound, StoreError


# ============================================================
# Fakes
# ============================================================

class FakeSubscription:
    def __init__(self, provider, listener):
        self.provider = provider
        self.listener = listener

    def unsubscribe(self):
        if self.listener in self.provider.listeners:
            self.provider.listeners.remove(self.listener)


class FakeSessionProvider:
    """Session provider whose identity and notifications are driven by the test."""

    def __init__(self, identity=None):
        self.identity = identity
        self.error = None
        self.listeners = []
        self.get_calls = 0

    async def get_current_session(self):
        self.get_calls += 1
        if self.error:
            raise self.error
        return self.identity

    def on_session_change(self, listener):
        self.listeners.append(listener)
        return FakeSubscription(self, listener)

    def emit(self, identity, event=None):
        self.identity = identity
        if event is None:
            event = SessionEvent.signed_in if identity else SessionEvent.signed_out
        for listener in list(self.listeners):
            listener(event, identity)


class Gate:
    """Holds a store query until the test opens it."""

    def __init__(self):
        self.reached = asyncio.Event()
        self.released = asyncio.Event()

    def open(self):
        self.released.set()


class InMemoryProfileStore:
    """
    ProfileStore over plain dict rows.
    Same contract as SupabaseProfileStore: equality filters, lowest id first.
    """

    def __init__(self, tables=None):
        self.tables = tables or {}
        self.calls = []
        self._failures = {}
        self._gates = {}

    def fail(self, table, column, detail="connection refused"):
        self._failures[(table, column)] = detail

    def gate(self, column, value) -> Gate:
        gate = Gate()
        self._gates[(column, value)] = gate
        return gate

    def calls_on(self, table, column=None):
        return [
            filters for t, filters in self.calls
            if t == table and (column is None or column in filters)
        ]

    async def find_first(self, table, columns, filters):
        self.calls.append((table, dict(filters)))

        for (column, value), gate in self._gates.items():
            if filters.get(column) == value and not gate.released.is_set():
                gate.reached.set()
                await gate.released.wait()

        for column in filters:
            if (table, column) in self._failures:
                return StoreError(detail=self._failures[(table, column)])

        rows = [
            row for row in self.tables.get(table, [])
            if all(row.get(k) == v for k, v in filters.items())
        ]
        if not rows:
            return NotFound()
        return Found(row=dict(sorted(rows, key=lambda r: str(r["id"]))[0]))


async def wait_until(predicate, timeout=1.0):
    """Let the event loop run until predicate() holds."""
    async def _poll():
        while not predicate():
            await asyncio.sleep(0.005)

    await asyncio.wait_for(_poll(), timeout)


# ============================================================
# Sample rows
# ============================================================

def resident_row(id, auth_user_id=None, email=None, is_active=True, **extra):
    row = {
        "id": id,
        "resident_code": f"RES-{id}",
        "full_name": extra.pop("full_name", f"Resident {id}"),
        "flat_id": extra.pop("flat_id", f"flat-{id}"),
        "auth_user_id": auth_user_id,
        "email": email,
        "is_active": is_active,
    }
    row.update(extra)
    return row


@pytest.fixture(autouse=True)
def dev_settings(monkeypatch):
    """Run every test as development with no ambient mock ids."""
    monkeypatch.setattr(settings, "ENV", "development")
    monkeypatch.setattr(settings, "DEV_MOCK_RESIDENT_ID", None)
    monkeypatch.setattr(settings, "DEV_MOCK_EMPLOYEE_ID", None)


@pytest.fixture
def profile_store():
    return InMemoryProfileStore({
        "residents": [
            resident_row("p1", auth_user_id="u1", email="a@x.com", full_name="A"),
            resident_row("p2", email="b@x.com", full_name="B"),
        ],
        "users": [
            {"id": "u10", "employee_id": "e1", "full_name": "Kala Guard",
             "roles": {"role_name": "security_guard"}},
            {"id": "u11", "employee_id": None, "full_name": "New Hire",
             "roles": {"role_name": "hod"}},
        ],
        "employees": [
            {"id": "e1", "employee_code": "EMP-001", "first_name": "Kala", "last_name": "Guard"},
        ],
        "security_guards": [
            {"id": "g1", "guard_code": "GRD-01", "employee_id": "e1"},
        ],
    })


@pytest.fixture
def session_provider():
    return FakeSessionProvider(SessionIdentity(id="u1", email="a@x.com"))


# ============================================================
# FastAPI
# ============================================================

@pytest.fixture(scope="function")
def app():
    """Create a test FastAPI application instance."""
    return create_app()


@pytest.fixture(scope="function")
def client(app, session_provider, profile_store) -> Generator[TestClient, None, None]:
    """Test client with Supabase replaced by the in-memory fakes."""
    app.dependency_overrides[get_session_provider] = lambda: session_provider
    app.dependency_overrides[get_profile_store] = lambda: profile_store
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
