"""
Name: Admin Bootstrap Script

Responsibilities:
  - Create an admin user (idempotent)
  - Hash the password with Argon2 through the credential store
  - Store the user in PostgreSQL
"""

from __future__ import annotations

import argparse
import getpass
import os
import sys
from datetime import date

ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from user_service.crosscutting.exceptions import DuplicateIdentityError  # noqa: E402
from user_service.domain.entities import UserRole  # noqa: E402
from user_service.domain.validation import check_email, check_password  # noqa: E402
from user_service.identity.credential_store import CredentialStore, NewUser  # noqa: E402
from user_service.identity.passwords import PasswordHasher  # noqa: E402
from user_service.infrastructure.db.pool import close_pool, init_pool  # noqa: E402
from user_service.infrastructure.repositories import PostgresUserRepository  # noqa: E402


def _require_database_url() -> str:
    db_url = os.getenv("DATABASE_URL")
    if not db_url:
        raise SystemExit("DATABASE_URL is required to create a user.")
    return db_url


def _prompt_email() -> str:
    email = input("Email: ").strip()
    if not email:
        raise SystemExit("Email is required.")
    return email


def _prompt_password() -> str:
    password = getpass.getpass("Password: ")
    if not password:
        raise SystemExit("Password is required.")
    confirm = getpass.getpass("Confirm password: ")
    if password != confirm:
        raise SystemExit("Passwords do not match.")
    return password


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    argv = sys.argv[1:] if argv is None else argv
    if argv and argv[0] == "--":
        argv = argv[1:]
    parser = argparse.ArgumentParser(description="Create an admin user (idempotent).")
    parser.add_argument("--email", help="User email (surrounding spaces are trimmed)")
    parser.add_argument(
        "--password",
        help="User password (omit to be prompted securely)",
    )
    parser.add_argument("--first-name", default="Admin")
    parser.add_argument("--last-name", default="User")
    parser.add_argument(
        "--dob",
        type=date.fromisoformat,
        default=date(1970, 1, 1),
        help="Date of birth, YYYY-MM-DD",
    )
    parser.add_argument(
        "--role",
        default=UserRole.ADMIN.value,
        choices=[role.value for role in UserRole],
        help="User role (default: admin)",
    )
    return parser.parse_args(argv)


def create_admin(credentials: CredentialStore, candidate: NewUser) -> bool:
    """Returns True when a user was created, False when the email exists."""
    existing = credentials.find_by_email(candidate.email)
    if existing is not None:
        print(
            f"User already exists: id={existing.id} email={existing.email} "
            f"role={existing.role.value}"
        )
        return False
    try:
        user = credentials.create(candidate)
    except DuplicateIdentityError:
        print(f"User already exists: email={candidate.email}")
        return False
    print(f"Created user: id={user.id} email={user.email} role={user.role.value}")
    return True


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    db_url = _require_database_url()
    email = (args.email or "").strip() or _prompt_email()
    password = args.password or _prompt_password()

    error = check_email(email) or check_password(password)
    if error:
        raise SystemExit(error)

    init_pool(database_url=db_url, min_size=1, max_size=1)
    try:
        credentials = CredentialStore(PostgresUserRepository(), PasswordHasher())
        create_admin(
            credentials,
            NewUser(
                first_name=args.first_name,
                last_name=args.last_name,
                email=email,
                password=password,
                dob=args.dob,
                role=UserRole(args.role),
            ),
        )
    finally:
        close_pool()


if __name__ == "__main__":
    main()
