"""
Name: PostgreSQL User Repository Tests (offline)

Responsibilities:
  - Row mapping into User
  - Error translation (unique violation, generic failures)
  - The reset writes are single conditional statements

Notes:
  - ConnectionPool is mocked; no real database
"""

from datetime import date, datetime, timezone
from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from psycopg import errors as pg_errors

from user_service.crosscutting.exceptions import DatabaseError, DuplicateIdentityError
from user_service.domain.entities import User, UserRole
from user_service.infrastructure.repositories import PostgresUserRepository

pytestmark = pytest.mark.unit

NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


def _row(user_id, role="user", attempts=0):
    return (
        user_id,
        "Ada",
        "Lovelace",
        "a@x.com",
        "hash",
        date(1990, 1, 1),
        role,
        NOW,
        NOW,
        None,
        None,
        attempts,
        None,
    )


def _repo(*, fetchone=None, fetchall=None, execute_error=None):
    conn = MagicMock()
    if execute_error is not None:
        conn.execute.side_effect = execute_error
    else:
        conn.execute.return_value.fetchone.return_value = fetchone
        conn.execute.return_value.fetchall.return_value = fetchall or []
    pool = MagicMock()
    pool.connection.return_value.__enter__.return_value = conn
    return PostgresUserRepository(pool_factory=lambda: pool), conn


def test_get_user_by_id_maps_row():
    user_id = uuid4()
    repo, conn = _repo(fetchone=_row(user_id, role="admin"))

    user = repo.get_user_by_id(user_id)

    assert user.id == user_id
    assert user.role == UserRole.ADMIN
    assert user.failed_reset_attempts == 0
    sql, params = conn.execute.call_args[0]
    assert "WHERE id = %s" in sql
    assert params == (user_id,)


def test_missing_row_returns_none():
    repo, _ = _repo(fetchone=None)
    assert repo.get_user_by_email("nobody@x.com") is None


def test_unique_violation_becomes_duplicate_identity():
    repo, _ = _repo(execute_error=pg_errors.UniqueViolation("duplicate key"))
    user = User(
        id=uuid4(),
        first_name="Ada",
        last_name="Lovelace",
        email="a@x.com",
        password_hash="hash",
        dob=date(1990, 1, 1),
        created_at=NOW,
        updated_at=NOW,
    )
    with pytest.raises(DuplicateIdentityError):
        repo.create_user(user)


def test_other_failures_become_database_error():
    repo, _ = _repo(execute_error=RuntimeError("connection reset"))
    with pytest.raises(DatabaseError):
        repo.get_user_by_email("a@x.com")


def test_invalid_role_in_row_is_database_error():
    repo, _ = _repo(fetchone=_row(uuid4(), role="root"))
    with pytest.raises(DatabaseError):
        repo.get_user_by_id(uuid4())


def test_complete_password_reset_is_conditional_on_token():
    user_id = uuid4()
    repo, conn = _repo(fetchone=None)

    result = repo.complete_password_reset(
        user_id, expected_token="t1", password_hash="new", now=NOW
    )

    assert result is None
    sql, params = conn.execute.call_args[0]
    assert "AND reset_token = %s" in sql
    assert "reset_token_expiry > %s" in sql
    assert params == ("new", NOW, user_id, "t1", NOW, NOW)


def test_record_failed_attempt_caps_and_locks():
    user_id = uuid4()
    repo, conn = _repo(fetchone=_row(user_id, attempts=3))

    updated = repo.record_failed_reset_attempt(
        user_id, max_attempts=3, lock_until=NOW, now=NOW
    )

    assert updated.failed_reset_attempts == 3
    sql, params = conn.execute.call_args[0]
    assert "LEAST(failed_reset_attempts + 1, %s)" in sql
    assert params == (3, 3, NOW, NOW, user_id)


def test_delete_and_list():
    repo, _ = _repo(fetchone=(uuid4(),), fetchall=[_row(uuid4()), _row(uuid4())])
    assert repo.delete_user(uuid4()) is True
    assert len(repo.list_users()) == 2


def test_ping_false_on_failure():
    repo, _ = _repo(execute_error=RuntimeError("down"))
    assert repo.ping() is False
