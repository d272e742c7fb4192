"""
Name: Database Pool Tests

Responsibilities:
  - Pool lifecycle (init, get, close, reset)
  - statement_timeout applied on new connections

Notes:
  - ConnectionPool is mocked
"""

from unittest.mock import MagicMock, patch

import pytest

from user_service.infrastructure.db import pool as db_pool

pytestmark = pytest.mark.unit


@pytest.fixture(autouse=True)
def _clean_pool():
    db_pool.reset_pool()
    yield
    db_pool.reset_pool()


def test_init_and_get_pool():
    with patch("user_service.infrastructure.db.pool.ConnectionPool") as MockPool:
        created = db_pool.init_pool("postgresql://test", min_size=1, max_size=5)

    MockPool.assert_called_once()
    assert MockPool.call_args.kwargs["min_size"] == 1
    assert MockPool.call_args.kwargs["max_size"] == 5
    assert db_pool.get_pool() is created


def test_init_twice_raises():
    with patch("user_service.infrastructure.db.pool.ConnectionPool"):
        db_pool.init_pool("postgresql://test", min_size=1, max_size=5)
        with pytest.raises(RuntimeError, match="already initialized"):
            db_pool.init_pool("postgresql://test", min_size=1, max_size=5)


def test_get_pool_without_init_raises():
    with pytest.raises(RuntimeError, match="not initialized"):
        db_pool.get_pool()


def test_close_pool_is_idempotent():
    with patch("user_service.infrastructure.db.pool.ConnectionPool") as MockPool:
        db_pool.init_pool("postgresql://test", min_size=1, max_size=5)
        db_pool.close_pool()
        db_pool.close_pool()

    MockPool.return_value.close.assert_called_once()


def test_statement_timeout_configured_per_connection():
    with patch("user_service.infrastructure.db.pool.ConnectionPool") as MockPool:
        db_pool.init_pool(
            "postgresql://test", min_size=1, max_size=5, statement_timeout_ms=1500
        )
    configure = MockPool.call_args.kwargs["configure"]

    conn = MagicMock()
    configure(conn)

    conn.execute.assert_called_once_with("SET statement_timeout = 1500")
    conn.commit.assert_called_once()
