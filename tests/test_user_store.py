"""Unit tests for auth/store.py -- UserStore persistence.

Covers:
- create_user() assigns ids and round-trips every profile field
- duplicate email raises ConflictError, whatever the other fields
- get_by_email() / get_by_id() return None for unknown keys
- schema creation is idempotent and carries the expected columns
"""

import pytest
from sqlalchemy import text

from auth.errors import ConflictError
from auth.models import User
from auth.store import UserStore


@pytest.fixture
def store():
    s = UserStore("sqlite:///:memory:")
    yield s
    s.close()


def _user(email="ada@example.com", **fields) -> User:
    return User(email=email, name=fields.pop("name", "Ada"), password_hash=fields.pop("password_hash", "$2b$hash"), **fields)


def test_create_and_fetch_by_email(store):
    uid = store.create_user(_user(nickname="ada", age=36, phone="555-0100", sex="Female"))
    user = store.get_by_email("ada@example.com")
    assert user == User(
        id=uid,
        email="ada@example.com",
        name="Ada",
        password_hash="$2b$hash",
        nickname="ada",
        age=36,
        phone="555-0100",
        sex="Female",
    )


def test_ids_are_assigned_and_distinct(store):
    first = store.create_user(_user("a@example.com"))
    second = store.create_user(_user("b@example.com"))
    assert first != second
    assert store.get_by_id(second).email == "b@example.com"


def test_duplicate_email_raises_conflict(store):
    store.create_user(_user())
    with pytest.raises(ConflictError):
        store.create_user(_user(name="Someone Else", password_hash="$2b$other", age=99))


def test_duplicate_does_not_replace_original(store):
    uid = store.create_user(_user())
    with pytest.raises(ConflictError):
        store.create_user(_user(name="Impostor"))
    assert store.get_by_id(uid).name == "Ada"


def test_unknown_lookups_return_none(store):
    assert store.get_by_email("missing@example.com") is None
    assert store.get_by_id(12345) is None


def test_optional_fields_default_to_none(store):
    uid = store.create_user(_user())
    user = store.get_by_id(uid)
    assert (user.nickname, user.age, user.phone, user.sex) == (None, None, None, None)


def test_schema_columns(store):
    with store.engine.connect() as conn:
        rows = conn.execute(text("PRAGMA table_info(users)")).fetchall()
    columns = {row[1] for row in rows}
    assert columns == {"id", "email", "name", "password", "nickname", "age", "phone", "sex"}


def test_schema_creation_is_idempotent(tmp_path):
    url = f"sqlite:///{tmp_path / 'users.db'}"
    first = UserStore(url)
    uid = first.create_user(_user())
    first.close()

    second = UserStore(url)
    assert second.get_by_id(uid).email == "ada@example.com"
    second.close()


def test_file_database_uses_wal(tmp_path):
    s = UserStore(f"sqlite:///{tmp_path / 'wal.db'}")
    with s.engine.connect() as conn:
        mode = conn.execute(text("PRAGMA journal_mode")).scalar()
    s.close()
    assert mode == "wal"


def test_ping(store):
    assert store.ping() is True
