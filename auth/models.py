"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). Dataclasses own the
domain shape; stores and routes do the work.

Layer rule: no imports from api/ or web/.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class User:
    """A registered account.

    password_hash is the bcrypt hash stored in the `password` column. It never
    leaves the auth layer: response models in api/models.py omit it.
    """

    email: str
    name: str
    password_hash: str
    id: int | None = None
    nickname: str | None = None
    age: int | None = None
    phone: str | None = None
    sex: str | None = None


@dataclass
class Session:
    """A server-side session record.

    expires_at is a time.monotonic() deadline, not a wall-clock timestamp.
    Sessions are process-local, so a monotonic clock is immune to wall-clock
    adjustments and needs no timezone handling.
    """

    token: str
    user_id: int
    expires_at: float
