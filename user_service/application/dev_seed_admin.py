"""
Name: Dev Seed Admin

Responsibilities:
  - Ensure an admin account exists for local development when configured
  - Stay idempotent: an existing account with the seed email is left alone

Collaborators:
  - crosscutting/config.Settings: dev_seed_admin* fields
  - identity/credential_store.CredentialStore: hashing + uniqueness

Constraints:
  - Never runs in production (Settings also refuses the flag there)
"""

from __future__ import annotations

from datetime import date
from typing import Final

from ..crosscutting.config import Settings
from ..crosscutting.exceptions import DuplicateIdentityError
from ..crosscutting.logger import logger
from ..domain.entities import User, UserRole
from ..identity.credential_store import CredentialStore, NewUser

_SEED_FIRST_NAME: Final[str] = "Admin"
_SEED_LAST_NAME: Final[str] = "User"
_SEED_DOB: Final[date] = date(1970, 1, 1)


def ensure_dev_admin(settings: Settings, *, credentials: CredentialStore) -> User | None:
    """
    Create the seed admin if enabled and missing.

    Returns the created user, or None when disabled or already present.
    """
    if not settings.dev_seed_admin:
        return None

    if settings.is_production():
        raise RuntimeError(
            "FATAL: DEV_SEED_ADMIN is enabled in production. "
            "Safety guard prevents seeding default credentials."
        )

    email = (settings.dev_seed_admin_email or "").strip()
    password = settings.dev_seed_admin_password or ""
    if not email or not password:
        raise ValueError("Dev seed admin is enabled but email/password are empty")

    if credentials.find_by_email(email) is not None:
        logger.info("Dev seed admin: user exists; skipping")
        return None

    try:
        user = credentials.create(
            NewUser(
                first_name=_SEED_FIRST_NAME,
                last_name=_SEED_LAST_NAME,
                email=email,
                password=password,
                dob=_SEED_DOB,
                role=UserRole.ADMIN,
            )
        )
    except DuplicateIdentityError:
        # R: another worker seeded it first
        logger.info("Dev seed admin: user exists; skipping")
        return None

    logger.info("Dev seed admin: user created", extra={"user_id": str(user.id)})
    return user
