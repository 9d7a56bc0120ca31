"""
auth/sessions.py -- Process-local server-side session store.

The browser never holds the user id. It holds an opaque 256-bit token inside
a signed cookie (Starlette SessionMiddleware); this store maps the token to a
user id and a deadline. Logging out deletes the record, so a replayed copy of
the old cookie resolves to nothing even though its signature is still valid.

Lifecycle:
    Anonymous --start()--> Authenticated --destroy() / TTL elapsed--> Anonymous

Expired records are dropped lazily: resolve() removes the record it finds
expired, and start() sweeps the whole table. There is no background task.

Thread safety: sync route handlers run in Starlette's thread pool, so every
access to the dict happens under one lock.

Usage:
    sessions = SessionStore(ttl=86400)
    token = sessions.start(user_id=7)
    sessions.resolve(token)   # -> 7
    sessions.destroy(token)
    sessions.resolve(token)   # -> None
"""

from __future__ import annotations

import secrets
import time
from collections.abc import Callable
from threading import Lock

from auth.models import Session

_DEFAULT_TTL = 60 * 60 * 24  # 24 hours in seconds


class SessionStore:
    def __init__(self, ttl: int = _DEFAULT_TTL, clock: Callable[[], float] = time.monotonic) -> None:
        self.ttl = ttl
        self._clock = clock
        self._sessions: dict[str, Session] = {}
        self._lock = Lock()

    def start(self, user_id: int) -> str:
        """Create a session for user_id and return its token."""
        token = secrets.token_urlsafe(32)
        now = self._clock()
        with self._lock:
            self._purge(now)
            self._sessions[token] = Session(token=token, user_id=user_id, expires_at=now + self.ttl)
        return token

    def resolve(self, token: str | None) -> int | None:
        """Return the user id bound to token, or None if missing or expired."""
        if not token:
            return None
        with self._lock:
            session = self._sessions.get(token)
            if session is None:
                return None
            if self._clock() >= session.expires_at:
                del self._sessions[token]
                return None
            return session.user_id

    def destroy(self, token: str | None) -> None:
        """Invalidate token immediately. Unknown tokens are ignored."""
        if not token:
            return
        with self._lock:
            self._sessions.pop(token, None)

    def purge_expired(self) -> int:
        """Delete all expired sessions. Returns number of records removed."""
        with self._lock:
            return self._purge(self._clock())

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def _purge(self, now: float) -> int:
        expired = [t for t, s in self._sessions.items() if now >= s.expires_at]
        for t in expired:
            del self._sessions[t]
        return len(expired)
