"""
Name: PostgreSQL User Repository

Responsibilities:
  - Persist and load users from the `users` table
  - Translate unique-index violations on email into DuplicateIdentityError
  - Run the reset-state writes as single conditional UPDATE statements

Collaborators:
  - psycopg_pool.ConnectionPool (via infrastructure.db.pool.get_pool)
  - domain.entities.User / UserRole
  - crosscutting.exceptions.DatabaseError / DuplicateIdentityError

Constraints:
  - Parameterized SQL only
  - "Not found" (or a failed condition) returns None
  - complete_password_reset is a compare-and-swap keyed on the stored token
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Callable, List, Optional
from uuid import UUID

from psycopg import errors as pg_errors
from psycopg_pool import ConnectionPool

from ....crosscutting.exceptions import DatabaseError, DuplicateIdentityError
from ....crosscutting.logger import logger
from ....domain.entities import User, UserRole

# R: Explicit column list keeps the contract with migrations in one place.
_USER_COLUMNS = (
    "id, first_name, last_name, email, password_hash, dob, role, "
    "created_at, updated_at, reset_token, reset_token_expiry, "
    "failed_reset_attempts, lock_until"
)

_USER_ORDER_BY = "created_at DESC, id DESC"


def _default_pool() -> ConnectionPool:
    from ...db.pool import get_pool

    return get_pool()


def _row_to_user(row) -> User:
    try:
        role = UserRole(row[6])
    except ValueError as exc:
        raise DatabaseError(f"Invalid user role in database: {row[6]}") from exc

    return User(
        id=row[0],
        first_name=row[1],
        last_name=row[2],
        email=row[3],
        password_hash=row[4],
        dob=row[5],
        role=role,
        created_at=row[7],
        updated_at=row[8],
        reset_token=row[9],
        reset_token_expiry=row[10],
        failed_reset_attempts=row[11] or 0,
        lock_until=row[12],
    )


class PostgresUserRepository:
    def __init__(self, pool_factory: Callable[[], ConnectionPool] = _default_pool):
        self._pool_factory = pool_factory

    def _fetch_one(self, sql: str, params: tuple, *, operation: str) -> Optional[User]:
        try:
            with self._pool_factory().connection() as conn:
                row = conn.execute(sql, params).fetchone()
        except pg_errors.UniqueViolation as exc:
            raise DuplicateIdentityError("User already exists", original_error=exc) from exc
        except Exception as exc:
            logger.error(
                "PostgresUserRepository: query failed",
                extra={"operation": operation, "error": str(exc)},
            )
            raise DatabaseError(f"User {operation} failed", original_error=exc) from exc
        return _row_to_user(row) if row else None

    def create_user(self, user: User) -> User:
        created = self._fetch_one(
            f"""
            INSERT INTO users (
                id, first_name, last_name, email, password_hash, dob, role,
                created_at, updated_at, failed_reset_attempts
            )
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, 0)
            RETURNING {_USER_COLUMNS}
            """,
            (
                user.id,
                user.first_name,
                user.last_name,
                user.email,
                user.password_hash,
                user.dob,
                user.role.value,
                user.created_at,
                user.updated_at,
            ),
            operation="creation",
        )
        if created is None:
            raise DatabaseError("User creation failed: no row returned")
        return created

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self._fetch_one(
            f"SELECT {_USER_COLUMNS} FROM users WHERE email = %s",
            (email,),
            operation="lookup",
        )

    def get_user_by_id(self, user_id: UUID) -> Optional[User]:
        return self._fetch_one(
            f"SELECT {_USER_COLUMNS} FROM users WHERE id = %s",
            (user_id,),
            operation="lookup",
        )

    def list_users(self) -> List[User]:
        try:
            with self._pool_factory().connection() as conn:
                rows = conn.execute(
                    f"SELECT {_USER_COLUMNS} FROM users ORDER BY {_USER_ORDER_BY}"
                ).fetchall()
        except Exception as exc:
            logger.error(
                "PostgresUserRepository: list users failed", extra={"error": str(exc)}
            )
            raise DatabaseError("User listing failed", original_error=exc) from exc
        return [_row_to_user(row) for row in rows]

    def update_profile(
        self,
        user_id: UUID,
        *,
        first_name: str | None = None,
        last_name: str | None = None,
        email: str | None = None,
        dob: date | None = None,
        updated_at: datetime,
    ) -> Optional[User]:
        return self._fetch_one(
            f"""
            UPDATE users
            SET first_name = COALESCE(%s, first_name),
                last_name = COALESCE(%s, last_name),
                email = COALESCE(%s, email),
                dob = COALESCE(%s, dob),
                updated_at = %s
            WHERE id = %s
            RETURNING {_USER_COLUMNS}
            """,
            (first_name, last_name, email, dob, updated_at, user_id),
            operation="profile update",
        )

    def update_password(
        self, user_id: UUID, password_hash: str, *, updated_at: datetime
    ) -> Optional[User]:
        return self._fetch_one(
            f"""
            UPDATE users
            SET password_hash = %s, updated_at = %s
            WHERE id = %s
            RETURNING {_USER_COLUMNS}
            """,
            (password_hash, updated_at, user_id),
            operation="password update",
        )

    def delete_user(self, user_id: UUID) -> bool:
        try:
            with self._pool_factory().connection() as conn:
                row = conn.execute(
                    "DELETE FROM users WHERE id = %s RETURNING id", (user_id,)
                ).fetchone()
        except Exception as exc:
            logger.error(
                "PostgresUserRepository: delete failed", extra={"error": str(exc)}
            )
            raise DatabaseError("User deletion failed", original_error=exc) from exc
        return row is not None

    def store_reset_token(
        self,
        user_id: UUID,
        *,
        token: str,
        expiry: datetime,
        updated_at: datetime,
    ) -> Optional[User]:
        return self._fetch_one(
            f"""
            UPDATE users
            SET reset_token = %s,
                reset_token_expiry = %s,
                failed_reset_attempts = 0,
                updated_at = %s
            WHERE id = %s
            RETURNING {_USER_COLUMNS}
            """,
            (token, expiry, updated_at, user_id),
            operation="reset token update",
        )

    def complete_password_reset(
        self,
        user_id: UUID,
        *,
        expected_token: str,
        password_hash: str,
        now: datetime,
    ) -> Optional[User]:
        # R: The WHERE clause is the compare-and-swap; a racing request that
        #    already consumed the token matches zero rows.
        return self._fetch_one(
            f"""
            UPDATE users
            SET password_hash = %s,
                reset_token = NULL,
                reset_token_expiry = NULL,
                failed_reset_attempts = 0,
                lock_until = NULL,
                updated_at = %s
            WHERE id = %s
              AND reset_token = %s
              AND reset_token_expiry > %s
              AND (lock_until IS NULL OR lock_until <= %s)
            RETURNING {_USER_COLUMNS}
            """,
            (password_hash, now, user_id, expected_token, now, now),
            operation="password reset",
        )

    def record_failed_reset_attempt(
        self,
        user_id: UUID,
        *,
        max_attempts: int,
        lock_until: datetime,
        now: datetime,
    ) -> Optional[User]:
        return self._fetch_one(
            f"""
            UPDATE users
            SET failed_reset_attempts = LEAST(failed_reset_attempts + 1, %s),
                lock_until = CASE
                    WHEN failed_reset_attempts + 1 >= %s THEN %s
                    ELSE lock_until
                END,
                updated_at = %s
            WHERE id = %s
            RETURNING {_USER_COLUMNS}
            """,
            (max_attempts, max_attempts, lock_until, now, user_id),
            operation="failed reset attempt update",
        )

    def ping(self) -> bool:
        try:
            with self._pool_factory().connection() as conn:
                conn.execute("SELECT 1").fetchone()
            return True
        except Exception as exc:
            logger.warning("Database ping failed", extra={"error": str(exc)})
            return False
