"""
Name: Application Configuration (Settings)

Responsibilities:
  - Centralized, typed configuration using pydantic-settings
  - Validate environment variables at startup
  - Provide defaults for the reset / lockout / rate-limit policy

Collaborators:
  - api/main.py: reads settings for CORS, pool and startup validation
  - container.py: builds services (hasher, tokens, limiter, notifier)
  - identity/auth_users.py: cookie name and secure flag

Constraints:
  - No business logic, configuration only

Notes:
  - Singleton via lru_cache
  - All policy numbers configurable for different environments
"""

from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LOCAL_ENVS = {"local", "development", "dev", "test", "testing"}
_INSECURE_SECRETS = {"dev-secret", "changeme", "change-me", "password", "secret"}


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        app_env: Application environment (local/development/test/production)
        database_url: PostgreSQL connection string
        redis_url: Redis connection string for shared rate-limit counters (optional)
        jwt_secret: Secret for signing session and reset tokens
        jwt_access_ttl_minutes: Session token TTL in minutes (default: 24h)
        jwt_cookie_name: Cookie name for the session token
        jwt_cookie_secure: Explicit Secure flag override (None = derive from env)
        password_hash_time_cost: Argon2 iterations
        password_hash_memory_cost: Argon2 memory in KiB
        password_min_length: Minimum accepted password length
        reset_token_ttl_minutes: Reset token TTL (default: 10)
        reset_max_failed_attempts: Failed confirmations before lock (default: 3)
        reset_lock_minutes: Lock duration (default: 30)
        reset_url_base: Link embedded in the reset notification
        rate_limit_window_seconds: Fixed window length (default: 600)
        rate_limit_request_reset: request-reset attempts per window (default: 5)
        rate_limit_confirm_reset: confirm-reset attempts per window (default: 3)
        rate_limit_trust_forwarded_for: key clients by X-Forwarded-For (default: off)
        smtp_host: SMTP server; empty means reset links are only logged
    """

    # Required (no defaults)
    database_url: str

    # Environment
    app_env: str = "development"

    # CORS configuration
    allowed_origins: str = "http://localhost:3000"
    cors_allow_credentials: bool = True

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    # Database - Connection Pool
    db_pool_min_size: int = 1
    db_pool_max_size: int = 10
    db_statement_timeout_ms: int = 30000  # 30 seconds

    # Redis
    redis_url: str = ""

    # Security - JWT Auth
    jwt_secret: str = "dev-secret"
    jwt_access_ttl_minutes: int = 24 * 60
    jwt_cookie_name: str = "token"
    jwt_cookie_secure: bool | None = None

    # Security - Password hashing (Argon2)
    password_hash_time_cost: int = 3
    password_hash_memory_cost: int = 64 * 1024
    password_min_length: int = 8

    # Password reset policy
    reset_token_ttl_minutes: int = 10
    reset_max_failed_attempts: int = 3
    reset_lock_minutes: int = 30
    reset_url_base: str = "http://localhost:5000/reset-password"

    # Security - Rate Limiting (fixed window)
    rate_limit_window_seconds: int = 600
    rate_limit_request_reset: int = 5
    rate_limit_confirm_reset: int = 3
    # Only enable behind a single trusted reverse proxy
    rate_limit_trust_forwarded_for: bool = False

    # Notifications - SMTP
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: str = ""
    smtp_from: str = "no-reply@user-service.com"
    smtp_use_tls: bool = True

    # Dev Tools (Backend Safe)
    dev_seed_admin: bool = False
    dev_seed_admin_email: str = "admin@local"
    dev_seed_admin_password: str = "admin-password"

    @field_validator(
        "jwt_access_ttl_minutes",
        "reset_token_ttl_minutes",
        "reset_max_failed_attempts",
        "reset_lock_minutes",
        "rate_limit_window_seconds",
        "rate_limit_request_reset",
        "rate_limit_confirm_reset",
        "password_hash_time_cost",
    )
    @classmethod
    def must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("value must be greater than 0")
        return v

    @field_validator("password_min_length")
    @classmethod
    def password_min_length_valid(cls, v: int) -> int:
        if v < 1:
            raise ValueError("password_min_length must be >= 1")
        return v

    @model_validator(mode="after")
    def validate_security_requirements(self):
        if not self.is_production():
            return self

        jwt_secret = (self.jwt_secret or "").strip()
        if not jwt_secret or jwt_secret in _INSECURE_SECRETS:
            raise ValueError(
                "JWT_SECRET must be set to a strong, non-default value in production"
            )
        if len(jwt_secret) < 32:
            raise ValueError("JWT_SECRET must be at least 32 characters in production")
        if self.jwt_cookie_secure is False:
            raise ValueError("JWT_COOKIE_SECURE cannot be false in production")
        if self.dev_seed_admin:
            raise ValueError("DEV_SEED_ADMIN is not allowed in production")
        return self

    def get_allowed_origins_list(self) -> list[str]:
        """Parse comma-separated origins into a list."""
        return [
            origin.strip()
            for origin in self.allowed_origins.split(",")
            if origin.strip()
        ]

    def is_production(self) -> bool:
        return self.app_env.strip().lower() == "production"

    def is_local(self) -> bool:
        return self.app_env.strip().lower() in _LOCAL_ENVS

    def is_test(self) -> bool:
        return self.app_env.strip().lower() in {"test", "testing"}

    def cookie_secure(self) -> bool:
        """Secure flag for the session cookie: on everywhere except local/dev."""
        if self.jwt_cookie_secure is not None:
            return self.jwt_cookie_secure
        return not self.is_local()

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore unknown env vars
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get singleton Settings instance.

    Raises:
        ValidationError: If required env vars are missing or invalid
    """
    return Settings()
