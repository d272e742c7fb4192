"""
Unit tests for crosscutting/config.py (Settings validation).

Tests:
  - Defaults for the reset / lockout / rate-limit policy
  - Positive-value validation
  - Production security requirements
  - Cookie secure flag derivation

Note:
  - Uses monkeypatch to set environment variables
"""

import pytest
from pydantic import ValidationError

from user_service.crosscutting.config import Settings

pytestmark = pytest.mark.unit

STRONG_SECRET = "x" * 40


class TestSettings:
    def test_policy_defaults(self, monkeypatch):
        for name in ("PASSWORD_HASH_TIME_COST", "PASSWORD_HASH_MEMORY_COST", "APP_ENV"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(database_url="postgresql://test@localhost/test")

        assert settings.app_env == "development"
        assert settings.jwt_access_ttl_minutes == 24 * 60
        assert settings.reset_token_ttl_minutes == 10
        assert settings.reset_max_failed_attempts == 3
        assert settings.reset_lock_minutes == 30
        assert settings.rate_limit_window_seconds == 600
        assert settings.rate_limit_request_reset == 5
        assert settings.rate_limit_confirm_reset == 3
        assert settings.password_hash_time_cost == 3
        assert settings.password_min_length == 8

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("RATE_LIMIT_REQUEST_RESET", "10")
        monkeypatch.setenv("RESET_LOCK_MINUTES", "5")

        settings = Settings()

        assert settings.rate_limit_request_reset == 10
        assert settings.reset_lock_minutes == 5

    def test_database_url_required(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        with pytest.raises(ValidationError):
            Settings()

    @pytest.mark.parametrize(
        "field",
        ["reset_token_ttl_minutes", "rate_limit_window_seconds", "rate_limit_confirm_reset"],
    )
    def test_non_positive_values_rejected(self, field):
        with pytest.raises(ValidationError):
            Settings(database_url="postgresql://x", **{field: 0})

    def test_allowed_origins_list(self):
        settings = Settings(
            database_url="postgresql://x",
            allowed_origins="http://a.com, http://b.com ,",
        )
        assert settings.get_allowed_origins_list() == ["http://a.com", "http://b.com"]


class TestProductionRequirements:
    def test_default_secret_rejected(self):
        with pytest.raises(ValidationError, match="JWT_SECRET"):
            Settings(
                database_url="postgresql://x",
                app_env="production",
                jwt_secret="dev-secret",
            )

    def test_short_secret_rejected(self):
        with pytest.raises(ValidationError, match="32 characters"):
            Settings(
                database_url="postgresql://x",
                app_env="production",
                jwt_secret="short-but-not-default",
            )

    def test_insecure_cookie_rejected(self):
        with pytest.raises(ValidationError, match="JWT_COOKIE_SECURE"):
            Settings(
                database_url="postgresql://x",
                app_env="production",
                jwt_secret=STRONG_SECRET,
                jwt_cookie_secure=False,
            )

    def test_dev_seed_rejected(self):
        with pytest.raises(ValidationError, match="DEV_SEED_ADMIN"):
            Settings(
                database_url="postgresql://x",
                app_env="production",
                jwt_secret=STRONG_SECRET,
                dev_seed_admin=True,
            )

    def test_valid_production_settings(self):
        settings = Settings(
            database_url="postgresql://x",
            app_env="production",
            jwt_secret=STRONG_SECRET,
        )
        assert settings.is_production() is True
        assert settings.cookie_secure() is True


class TestCookieSecure:
    @pytest.mark.parametrize("env", ["local", "development", "test"])
    def test_not_secure_locally(self, env):
        assert Settings(database_url="postgresql://x", app_env=env).cookie_secure() is False

    def test_secure_in_staging(self):
        assert Settings(database_url="postgresql://x", app_env="staging").cookie_secure() is True

    def test_explicit_override_wins(self):
        settings = Settings(
            database_url="postgresql://x", app_env="local", jwt_cookie_secure=True
        )
        assert settings.cookie_secure() is True
