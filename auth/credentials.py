"""
auth/credentials.py -- Password hashing and credential checks.

Security design decisions:
  Passwords: bcrypt used directly (no passlib wrapper). The cost factor is
       fixed by Settings.bcrypt_rounds (default 10) and embedded in every
       hash, so verification keeps working for hashes made with older costs.
       bcrypt.checkpw compares in constant time.

  Timing equalization: authenticate_user() runs bcrypt even when the email
       is unknown, against _DUMMY_HASH, so response time does not reveal
       which emails are registered. The caller answers both failure modes with
       the same AuthenticationError.

Layer rule: no imports from api/ or web/. Import from core/ is allowed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import bcrypt

from core.config import get_settings

if TYPE_CHECKING:
    from auth.models import User
    from auth.store import UserStore

_settings = get_settings()


def hash_password(plain: str) -> str:
    """Return a salted bcrypt hash of the given plaintext password.

    bcrypt only looks at the first 72 bytes of input; longer passwords are
    truncated before hashing so bcrypt 4.x does not reject them.
    """
    salt = bcrypt.gensalt(rounds=_settings.bcrypt_rounds)
    return bcrypt.hashpw(_encode(plain), salt).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt hash.

    A malformed hash is a mismatch, not an error.
    """
    try:
        return bcrypt.checkpw(_encode(plain), hashed.encode("utf-8"))
    except ValueError:
        return False


def _encode(plain: str) -> bytes:
    return plain.encode("utf-8")[:72]


# Computed once at module load so the first login attempt is not measurably
# slower than subsequent ones.
_DUMMY_HASH: str = hash_password("doorman_timing_dummy")


def authenticate_user(store: UserStore, email: str, password: str) -> User | None:
    """Authenticate an email/password pair with timing equalization.

    Returns the User on success, None on any failure.
    """
    user = store.get_by_email(email)
    if user is None:
        # Do NOT return before running bcrypt.
        verify_password(password, _DUMMY_HASH)
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user
