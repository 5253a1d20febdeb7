"""
tests/conftest.py -- Shared test fixtures for AuthGate.

This module provides:
  - FakeClock: a settable UTC clock injected into the service and sessions
  - store / hasher / sessions / service / gateway: isolated unit-test objects
  - api_client: TestClient over the real FastAPI app with a patched lifespan

Design: the API fixture uses a named shared-memory SQLite URI (not plain
:memory:) because TestClient runs sync route handlers in a thread pool.
Plain :memory: DBs are per-connection and would present a blank schema to
each worker thread.

BCRYPT_ROUNDS must be set before any auth/core import so get_settings()
picks up the cheap cost factor; bcrypt at 12 rounds would make the suite
take minutes.
"""

from __future__ import annotations

import asyncio
import itertools
import os
from collections.abc import Generator
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone

# CRITICAL: Set before any auth/core import so get_settings() sees it.
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auth.gateway import AuthGateway
from auth.models import Role, Status
from auth.passwords import PasswordHasher
from auth.service import AccountService
from auth.sessions import SessionManager
from auth.store import AccountStore

TEST_PASSWORD = "longenough1"
SESSION_TTL = 1200

_db_counter = itertools.count()


class FakeClock:
    """Callable clock that only moves when a test tells it to."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


# ---------------------------------------------------------------------------
# Unit fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> Generator[AccountStore, None, None]:
    s = AccountStore("sqlite:///:memory:")
    yield s
    s.close()


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=4)


@pytest.fixture
def service(store: AccountStore, hasher: PasswordHasher, clock: FakeClock) -> AccountService:
    return AccountService(store, hasher, min_password_length=8, clock=clock)


@pytest.fixture
def sessions(clock: FakeClock) -> SessionManager:
    return SessionManager(ttl_seconds=SESSION_TTL, clock=clock)


@pytest.fixture
def gateway(service: AccountService, sessions: SessionManager) -> AuthGateway:
    return AuthGateway(service, sessions)


# ---------------------------------------------------------------------------
# API fixtures
# ---------------------------------------------------------------------------


def _patch_lifespan(gateway: AuthGateway):
    """Return an async context manager that replaces the real lifespan.

    Wires the pre-built test gateway into app.state so routes see the
    isolated test DB and the fake clock. The purge_task is a long-sleeping
    coroutine so shutdown's .cancel() has a real asyncio.Task to act on.
    """

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.gateway = gateway
        app.state.purge_task = asyncio.create_task(asyncio.sleep(99999))
        yield
        app.state.purge_task.cancel()

    return test_lifespan


@pytest.fixture(scope="module")
def api_client() -> Generator[tuple[TestClient, AuthGateway, FakeClock], None, None]:
    """Yield (client, gateway, clock) for API integration tests.

    Pre-created accounts, all with password TEST_PASSWORD:
      carol   -- role user
      adam    -- role admin
      ada     -- role administrator
      blocky  -- role user, status blocked
    """
    clock = FakeClock()
    store = AccountStore(f"sqlite:///file:test_auth_api_{next(_db_counter)}?mode=memory&cache=shared&uri=true")
    service = AccountService(store, PasswordHasher(rounds=4), clock=clock)
    gateway = AuthGateway(service, SessionManager(ttl_seconds=SESSION_TTL, clock=clock))

    gateway.register("carol", TEST_PASSWORD)
    store.set_role(gateway.register("adam", TEST_PASSWORD), Role.ADMIN)
    store.set_role(gateway.register("ada", TEST_PASSWORD), Role.ADMINISTRATOR)
    store.set_status(gateway.register("blocky", TEST_PASSWORD), Status.BLOCKED)

    app.router.lifespan_context = _patch_lifespan(gateway)

    with TestClient(app, raise_server_exceptions=False) as client:
        yield client, gateway, clock

    store.close()
