"""
Name: Integration Test DB Setup

Responsibilities:
  - Ensure the schema exists before integration tests run
  - Run Alembic migrations once per test session
  - Provide a dedicated connection pool and a clean users table per test

Notes:
  - Only runs when RUN_INTEGRATION=1
  - Uses DATABASE_URL from environment (see alembic/env.py)
"""

from __future__ import annotations

import os
from pathlib import Path

import pytest

if os.getenv("RUN_INTEGRATION") != "1":
    collect_ignore_glob = ["test_*.py"]


@pytest.fixture(scope="session")
def database_url() -> str:
    return os.environ["DATABASE_URL"]


@pytest.fixture(scope="session")
def apply_migrations(database_url) -> None:
    """Run Alembic migrations for integration tests."""
    from alembic import command
    from alembic.config import Config

    root_dir = Path(__file__).resolve().parents[2]
    config = Config(str(root_dir / "alembic.ini"))
    config.set_main_option("script_location", str(root_dir / "alembic"))

    command.upgrade(config, "head")


@pytest.fixture(scope="session")
def db_pool(apply_migrations, database_url):
    from psycopg_pool import ConnectionPool

    pool = ConnectionPool(conninfo=database_url, min_size=1, max_size=4, open=True)
    yield pool
    pool.close()


@pytest.fixture
def pg_repository(db_pool):
    from user_service.infrastructure.repositories import PostgresUserRepository

    with db_pool.connection() as conn:
        conn.execute("TRUNCATE users")
    return PostgresUserRepository(pool_factory=lambda: db_pool)
