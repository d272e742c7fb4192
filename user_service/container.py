"""
Name: Composition Root (manual DI)

Responsibilities:
  - Compose repositories, identity services, adapters and use cases
  - Expose factories for FastAPI (Depends) and for scripts
  - Keep singletons cached with lru_cache
  - Centralize runtime choices driven by Settings

Collaborators:
  - crosscutting/config.get_settings
  - domain/repositories (ports)
  - infrastructure/* (implementations)
  - application/usecases/* (use cases)

Notes:
  - No business logic here
  - Does not import FastAPI; api/ and identity/auth_users.py consume these
  - Tests override the getters through app.dependency_overrides
"""

from __future__ import annotations

from datetime import timedelta
from functools import lru_cache

from .application.usecases import (
    BulkRegisterUsersUseCase,
    ConfirmPasswordResetUseCase,
    DeleteUserUseCase,
    ListUsersUseCase,
    LoginUserUseCase,
    RegisterUserUseCase,
    RequestPasswordResetUseCase,
    ResetPolicy,
    UpdateProfileUseCase,
)
from .crosscutting.config import get_settings
from .crosscutting.rate_limit import (
    FixedWindowRateLimiter,
    InMemoryRateLimitStorage,
    RateLimitBucket,
    RateLimitStorage,
)
from .domain.repositories import UserRepository
from .domain.reset_state import LockoutPolicy
from .identity.credential_store import CredentialStore
from .identity.passwords import PasswordHasher
from .identity.tokens import TokenService
from .infrastructure.notifications import (
    LoggingPasswordResetNotifier,
    PasswordResetNotifier,
    SmtpConfig,
    SmtpPasswordResetNotifier,
)
from .infrastructure.rate_limit_storage import RedisRateLimitStorage
from .infrastructure.repositories import (
    InMemoryUserRepository,
    PostgresUserRepository,
)

# =============================================================================
# Repositories (singletons)
# =============================================================================


@lru_cache(maxsize=1)
def get_user_repository() -> UserRepository:
    """User repository (in-memory in test; Postgres at runtime)."""
    if get_settings().is_test():
        return InMemoryUserRepository()
    return PostgresUserRepository()


# =============================================================================
# Identity services (singletons)
# =============================================================================


@lru_cache(maxsize=1)
def get_password_hasher() -> PasswordHasher:
    settings = get_settings()
    return PasswordHasher(
        time_cost=settings.password_hash_time_cost,
        memory_cost=settings.password_hash_memory_cost,
    )


@lru_cache(maxsize=1)
def get_token_service() -> TokenService:
    return TokenService(get_settings().jwt_secret)


@lru_cache(maxsize=1)
def get_credential_store() -> CredentialStore:
    return CredentialStore(get_user_repository(), get_password_hasher())


# =============================================================================
# Adapters (singletons)
# =============================================================================


@lru_cache(maxsize=1)
def get_rate_limit_storage() -> RateLimitStorage:
    """
    Counter store for the rate limiter.

    Rule:
      - REDIS_URL set => shared counters across workers
      - otherwise => per-process counters
    """
    settings = get_settings()
    if settings.redis_url:
        return RedisRateLimitStorage.from_url(settings.redis_url)
    return InMemoryRateLimitStorage()


@lru_cache(maxsize=1)
def get_rate_limiter() -> FixedWindowRateLimiter:
    settings = get_settings()
    return FixedWindowRateLimiter(
        get_rate_limit_storage(),
        limits={
            RateLimitBucket.REQUEST_RESET: settings.rate_limit_request_reset,
            RateLimitBucket.CONFIRM_RESET: settings.rate_limit_confirm_reset,
        },
        window_seconds=settings.rate_limit_window_seconds,
    )


@lru_cache(maxsize=1)
def get_reset_notifier() -> PasswordResetNotifier:
    """SMTP notifier when SMTP_HOST is configured; logging notifier otherwise."""
    settings = get_settings()
    if not settings.smtp_host:
        return LoggingPasswordResetNotifier()
    return SmtpPasswordResetNotifier(
        SmtpConfig(
            host=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.smtp_user,
            password=settings.smtp_password,
            sender=settings.smtp_from,
            use_tls=settings.smtp_use_tls,
        )
    )


def get_reset_policy() -> ResetPolicy:
    settings = get_settings()
    return ResetPolicy(
        token_ttl=timedelta(minutes=settings.reset_token_ttl_minutes),
        lockout=LockoutPolicy(
            max_failed_attempts=settings.reset_max_failed_attempts,
            lock_duration=timedelta(minutes=settings.reset_lock_minutes),
        ),
    )


# =============================================================================
# Use cases (factories)
# =============================================================================


def get_register_user_use_case() -> RegisterUserUseCase:
    return RegisterUserUseCase(
        get_credential_store(),
        password_min_length=get_settings().password_min_length,
    )


def get_login_user_use_case() -> LoginUserUseCase:
    return LoginUserUseCase(
        get_credential_store(),
        get_token_service(),
        access_ttl=timedelta(minutes=get_settings().jwt_access_ttl_minutes),
    )


def get_request_password_reset_use_case() -> RequestPasswordResetUseCase:
    return RequestPasswordResetUseCase(
        get_credential_store(),
        get_token_service(),
        get_reset_notifier(),
        reset_url_base=get_settings().reset_url_base,
        policy=get_reset_policy(),
    )


def get_confirm_password_reset_use_case() -> ConfirmPasswordResetUseCase:
    return ConfirmPasswordResetUseCase(
        get_credential_store(),
        get_token_service(),
        policy=get_reset_policy(),
        password_min_length=get_settings().password_min_length,
    )


def get_update_profile_use_case() -> UpdateProfileUseCase:
    return UpdateProfileUseCase(get_user_repository())


def get_list_users_use_case() -> ListUsersUseCase:
    return ListUsersUseCase(get_user_repository())


def get_delete_user_use_case() -> DeleteUserUseCase:
    return DeleteUserUseCase(get_user_repository())


def get_bulk_register_users_use_case() -> BulkRegisterUsersUseCase:
    return BulkRegisterUsersUseCase(get_register_user_use_case())


def reset_container() -> None:
    """Clear cached singletons (tests / settings reload)."""
    for getter in (
        get_user_repository,
        get_password_hasher,
        get_token_service,
        get_credential_store,
        get_rate_limit_storage,
        get_rate_limiter,
        get_reset_notifier,
    ):
        getter.cache_clear()
