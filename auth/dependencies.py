"""
auth/dependencies.py -- Request-scoped session helpers for route handlers.

The signed cookie is decoded by Starlette's SessionMiddleware into
request.session (a dict). The only key we keep there is "sid", the opaque
token issued by SessionStore. Everything else lives server-side.

current_user_id() is the soft check (returns None when anonymous) used by
page routes to decide between rendering and redirecting.
begin_session() / end_session() move a request between the Anonymous and
Authenticated states.

Layer rule: no imports from api/ or web/.
  auth/dependencies.py may import from fastapi (for Request) because it is
  called from route handlers.
"""

from __future__ import annotations

import logging

from fastapi import Request

from auth.sessions import SessionStore

logger = logging.getLogger("doorman.auth")

SESSION_KEY = "sid"


def _sessions(request: Request) -> SessionStore:
    return request.app.state.sessions


def current_user_id(request: Request) -> int | None:
    """Return the user id bound to this request's session, or None.

    A cookie whose token no longer resolves (logged out elsewhere, expired, or
    issued by a previous process) is cleared so the browser drops it.
    """
    token = request.session.get(SESSION_KEY)
    if not token:
        return None
    user_id = _sessions(request).resolve(token)
    if user_id is None:
        logger.info("Dropping stale session cookie")
        request.session.clear()
    return user_id


def begin_session(request: Request, user_id: int) -> str:
    """Start a session for user_id and bind it to the response cookie.

    Any session the request already carried is destroyed first, so a token
    planted before login is never promoted to an authenticated one.
    """
    sessions = _sessions(request)
    sessions.destroy(request.session.get(SESSION_KEY))
    request.session.clear()
    token = sessions.start(user_id)
    request.session[SESSION_KEY] = token
    return token


def end_session(request: Request) -> None:
    """Destroy the request's session, if any. Idempotent."""
    _sessions(request).destroy(request.session.get(SESSION_KEY))
    request.session.clear()
