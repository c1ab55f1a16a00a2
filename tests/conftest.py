"""
tests/conftest.py -- Shared test fixtures for SecureSphere.

This module provides:
  - store:        a fresh in-memory UserStore for unit tests
  - service:      an AuthService over that store
  - api:          (client, store) -- TestClient on the real app with an
                  isolated store wired in through a patched lifespan
  - registered:   an api client plus a pre-registered account

Design: integration stores use named shared-memory SQLite URIs (not plain
:memory:) because TestClient runs `def` route handlers in a thread pool.
Plain :memory: databases are per-connection and would present a blank schema
to each worker thread. Each fixture instance gets its own name, so tests do
not share accounts.

ENVIRONMENT and BCRYPT_ROUNDS must be set before any auth/core import so
get_settings() generates a dev SECRET_KEY and hashing stays fast.
"""

from __future__ import annotations

import os
import uuid
from collections.abc import Generator
from contextlib import asynccontextmanager

# CRITICAL: set before any auth/core import -- get_settings() is cached.
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auth.service import AuthService
from auth.store import UserStore
from core.config import get_settings

ALICE = {
    "name": "Alice Smith",
    "email": "Alice@Example.com",
    "password": "secret1",
    "confirmPassword": "secret1",
}


# ---------------------------------------------------------------------------
# Store helpers
# ---------------------------------------------------------------------------


def _shared_memory_url() -> str:
    return f"sqlite:///file:test_auth_{uuid.uuid4().hex}?mode=memory&cache=shared&uri=true"


def _patch_lifespan(user_store: UserStore):
    """Return a lifespan that wires the given test store into app.state."""

    @asynccontextmanager
    async def test_lifespan(app):
        settings = get_settings()
        app.state.settings = settings
        app.state.user_store = user_store
        app.state.auth_service = AuthService(user_store, settings)
        yield

    return test_lifespan


# ---------------------------------------------------------------------------
# Unit fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def store() -> Generator[UserStore, None, None]:
    s = UserStore("sqlite:///:memory:")
    yield s
    s.close()


@pytest.fixture
def service(store: UserStore) -> AuthService:
    return AuthService(store, get_settings())


# ---------------------------------------------------------------------------
# Integration fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def api() -> Generator[tuple[TestClient, UserStore], None, None]:
    """Yield (client, store) with the real app and an isolated credential store."""
    user_store = UserStore(_shared_memory_url())
    app.router.lifespan_context = _patch_lifespan(user_store)

    with TestClient(app, raise_server_exceptions=True) as client:
        yield client, user_store

    user_store.close()


@pytest.fixture
def registered(api) -> tuple[TestClient, UserStore, str]:
    """Yield (client, store, token) after registering ALICE.

    The client's cookie jar is cleared so each test chooses how to present
    the token (cookie or Bearer header).
    """
    client, user_store = api
    resp = client.post("/api/auth/register", json=ALICE)
    assert resp.status_code == 201, resp.text
    client.cookies.clear()
    return client, user_store, resp.json()["token"]
