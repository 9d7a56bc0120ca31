"""
tests/conftest.py -- Shared test fixtures for Doorman integration tests.

This module provides:
  - _make_test_store(): creates an isolated in-memory user DB
  - _patch_lifespan(): wires test services into app.state, bypassing real startup
  - client: TestClient with follow_redirects=False and a clean rate limiter
  - signup(): helper that registers an account through the real endpoint

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
because TestClient runs sync route handlers in a thread pool. Plain :memory:
DBs are per-connection and would present a blank schema to each worker thread.

DEBUG must be set before any auth/core import so get_settings() can
auto-generate SECRET_KEY in dev mode instead of raising ValueError.
BCRYPT_ROUNDS is lowered to keep the suite fast; hashes stay real bcrypt.
"""

from __future__ import annotations

import os
import uuid
from collections.abc import Generator
from contextlib import asynccontextmanager

# CRITICAL: Set env before any auth/core import.
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient

from api.limiter import limiter
from asgi import app
from auth.sessions import SessionStore
from auth.store import UserStore
from core.config import get_settings

COOKIE_NAME = get_settings().session_cookie_name

SIGNUP_BODY = {
    "email": "test@example.com",
    "name": "Test User",
    "password": "password123",
    "nickname": "Testy",
    "age": "25",
    "phone": "555-1234",
    "sex": "Other",
}


def _make_test_store() -> UserStore:
    """Create an isolated named shared-memory SQLite store.

    A fresh name per call keeps tests from seeing each other's users.
    """
    return UserStore(db_url=f"sqlite:///file:test_users_{uuid.uuid4().hex}?mode=memory&cache=shared&uri=true")


def _patch_lifespan(user_store: UserStore, sessions: SessionStore):
    """Return an async context manager that replaces the real lifespan."""

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.user_store = user_store
        app.state.sessions = sessions
        yield

    return test_lifespan


@pytest.fixture
def user_store() -> Generator[UserStore, None, None]:
    store = _make_test_store()
    yield store
    store.close()


@pytest.fixture
def sessions() -> SessionStore:
    return SessionStore(ttl=get_settings().session_ttl_seconds)


@pytest.fixture
def client(user_store: UserStore, sessions: SessionStore) -> Generator[TestClient, None, None]:
    """Yield a TestClient bound to fresh stores and an empty rate-limit window.

    follow_redirects=False is essential: tests assert on redirect locations,
    which are invisible once the client follows the redirect.
    """
    limiter.reset()
    app.router.lifespan_context = _patch_lifespan(user_store, sessions)
    with TestClient(app, follow_redirects=False, raise_server_exceptions=True) as c:
        yield c
    limiter.reset()


def signup(client: TestClient, **overrides):
    """POST /signup with SIGNUP_BODY (plus overrides) and return the response."""
    return client.post("/signup", json={**SIGNUP_BODY, **overrides})
