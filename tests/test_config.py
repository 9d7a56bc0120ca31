"""Unit tests for core/config.py -- Settings validation.

Settings is constructed directly (not through get_settings) so the cached
singleton used by the app is never disturbed.
"""

import pytest
from pydantic import ValidationError

from core.config import Settings


def test_defaults(monkeypatch):
    monkeypatch.delenv("BCRYPT_ROUNDS", raising=False)
    s = Settings(debug=True, _env_file=None)
    assert s.port == 3000
    assert s.session_ttl_seconds == 86400
    assert s.auth_rate_limit == "20/15 minutes"
    assert s.bcrypt_rounds == 10
    assert s.secure_cookies is False


def test_debug_generates_secret_key():
    s = Settings(debug=True, secret_key="", _env_file=None)
    assert len(s.secret_key) >= 32


def test_production_requires_secret_key():
    with pytest.raises(ValidationError):
        Settings(debug=False, secret_key="", _env_file=None)


def test_short_secret_key_rejected():
    with pytest.raises(ValidationError):
        Settings(debug=True, secret_key="short", _env_file=None)


def test_port_from_environment(monkeypatch):
    monkeypatch.setenv("PORT", "8080")
    assert Settings(debug=True, _env_file=None).port == 8080


def test_bad_bcrypt_rounds_rejected():
    with pytest.raises(ValidationError):
        Settings(debug=True, bcrypt_rounds=3, _env_file=None)
