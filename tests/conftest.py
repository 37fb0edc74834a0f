"""
tests/conftest.py -- Shared test fixtures for the SAFECORD test suite.

This module provides:
  - _make_sql_store(): isolated named shared-memory SQLite Credential Store
  - _patch_lifespan(): wires test services into app.state, bypassing real startup
  - settings: the Settings singleton as configured by the env below
  - services / memory_services: identity services over SQL / memory stores
  - api_client: TestClient over the real FastAPI app
  - http_client / local_client: BackendClient providers for both backends
  - backend: parametrized fixture yielding each provider in turn

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
because TestClient runs sync route handlers in a thread pool. Plain :memory:
DBs are per-connection and would present a blank schema to each worker thread.
The named URI format (file:name?mode=memory&cache=shared&uri=true) shares
one in-memory instance across all connections in the same process.

Environment variables must be set before any api/ import: api/limiter.py and
api/main.py read get_settings() at import time.
"""

from __future__ import annotations

import os
import uuid
from collections.abc import Generator
from contextlib import asynccontextmanager

# CRITICAL: set before any core/api import so get_settings() sees them.
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("BOOTSTRAP_SECRET", "test-bootstrap-secret-0123")
os.environ.setdefault("BOOTSTRAP_USERNAME", "Mark 2.0")
os.environ.setdefault("BOOTSTRAP_CONSUME_ONCE", "true")
os.environ.setdefault("LOCAL_STORE_PATH", "")
os.environ.setdefault("DATABASE_URL", "sqlite:///file:test_safecord_default?mode=memory&cache=shared&uri=true")

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auth.services import IdentityServices, build_services
from auth.users import UserRepository
from client.http import HttpBackendClient
from client.local import LocalBackendClient
from core.config import Settings, get_settings
from local.router import LocalBackend
from store.memory import MemoryCredentialStore
from store.sql import SqlCredentialStore

BOOTSTRAP_SECRET = os.environ["BOOTSTRAP_SECRET"]
BOOTSTRAP_USERNAME = os.environ["BOOTSTRAP_USERNAME"]

# ---------------------------------------------------------------------------
# Store helpers
# ---------------------------------------------------------------------------


def _make_sql_store() -> SqlCredentialStore:
    """Create an isolated named shared-memory SQLite store.

    A fresh uuid per call keeps tests from seeing each other's records.
    """
    return SqlCredentialStore(f"sqlite:///file:test_safecord_{uuid.uuid4().hex}?mode=memory&cache=shared&uri=true")


def _patch_lifespan(services: IdentityServices):
    """Return an async context manager that replaces the real lifespan.

    Wires pre-built test services into app.state so TestClient routes see an
    isolated test store rather than the configured database.
    """

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.services = services
        yield

    return test_lifespan


def set_rank_directly(services: IdentityServices, username: str, rank: int) -> None:
    """Promote an existing account without going through the rank engine."""
    users = UserRepository(services.store)
    user = users.get(username)
    user.rank = rank
    users.save(user)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def settings() -> Settings:
    return get_settings()


@pytest.fixture
def services(settings: Settings) -> Generator[IdentityServices, None, None]:
    """Identity services over a fresh SQL store."""
    bundle = build_services(_make_sql_store(), settings)
    yield bundle
    bundle.close()


@pytest.fixture
def memory_services(settings: Settings) -> Generator[IdentityServices, None, None]:
    """Identity services over a fresh in-memory store."""
    bundle = build_services(MemoryCredentialStore(), settings)
    yield bundle
    bundle.close()


@pytest.fixture
def api_client(services: IdentityServices) -> Generator[TestClient, None, None]:
    """TestClient over the real FastAPI app with a patched lifespan.

    Tests hit real route handlers, middleware and exception handlers but use
    the isolated store from the services fixture.
    """
    app.router.lifespan_context = _patch_lifespan(services)
    with TestClient(app, raise_server_exceptions=True) as client:
        yield client


@pytest.fixture
def http_client(api_client: TestClient) -> Generator[HttpBackendClient, None, None]:
    """HttpBackendClient driving the ASGI app through TestClient."""
    client = HttpBackendClient("http://testserver", session=api_client)
    yield client
    client.close()


@pytest.fixture
def local_client(memory_services: IdentityServices) -> Generator[LocalBackendClient, None, None]:
    client = LocalBackendClient(LocalBackend(memory_services))
    yield client
    client.close()


@pytest.fixture(params=["http", "local"])
def backend(request):
    """Yield each BackendClient provider in turn.

    Tests using this fixture run once per backend and must pass on both.
    """
    return request.getfixturevalue(f"{request.param}_client")
