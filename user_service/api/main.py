"""
Name: FastAPI Application Entry Point

Responsibilities:
  - Build the FastAPI application (metadata, middleware, routers)
  - Startup/shutdown lifecycle: DB pool, dev admin seed
  - Expose liveness (/) and health (/healthz) endpoints

Collaborators:
  - api/auth_routes.py, api/user_routes.py
  - api/exception_handlers.py: RFC 7807 mapping
  - crosscutting/middleware.py, crosscutting/security.py
  - infrastructure/db/pool.py

Notes:
  - Middleware order (last added runs first):
    RequestContext -> CORS -> SecurityHeaders -> routes
  - In APP_ENV=test no pool is opened (in-memory repository)
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from .. import __version__
from ..application.dev_seed_admin import ensure_dev_admin
from ..container import get_credential_store, get_user_repository
from ..crosscutting.config import Settings, get_settings
from ..crosscutting.logger import logger
from ..crosscutting.middleware import RequestContextMiddleware
from ..crosscutting.security import SecurityHeadersMiddleware
from ..infrastructure.db.pool import close_pool, init_pool
from .auth_routes import router as auth_router
from .exception_handlers import register_exception_handlers
from .user_routes import router as user_router


def _uses_database(settings: Settings) -> bool:
    return not settings.is_test()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle. Opens the pool and seeds the dev admin."""
    settings = get_settings()
    logger.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))

    if _uses_database(settings):
        init_pool(
            database_url=settings.database_url,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
            statement_timeout_ms=settings.db_statement_timeout_ms,
        )

    try:
        ensure_dev_admin(settings, credentials=get_credential_store())

        logger.info(
            "User service starting up",
            extra={
                "app_env": settings.app_env,
                "db_pool_min": settings.db_pool_min_size,
                "db_pool_max": settings.db_pool_max_size,
                "rate_limit_backend": "redis" if settings.redis_url else "memory",
                "notifier": "smtp" if settings.smtp_host else "log",
            },
        )

        yield

    finally:
        if _uses_database(settings):
            close_pool()
        logger.info("User service shutting down")


def create_app() -> FastAPI:
    settings = get_settings()

    application = FastAPI(
        title="User Service API",
        version=__version__,
        lifespan=lifespan,
        openapi_tags=[
            {"name": "auth", "description": "Registration, login and password reset"},
            {"name": "users", "description": "Profile and user administration"},
        ],
    )

    application.add_middleware(
        SecurityHeadersMiddleware, is_production=settings.is_production()
    )
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_allowed_origins_list(),
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Request-Id"],
    )
    application.add_middleware(RequestContextMiddleware)

    application.include_router(auth_router)
    application.include_router(user_router)

    register_exception_handlers(application)

    @application.get("/", response_class=PlainTextResponse, include_in_schema=False)
    def root() -> str:
        return "API is running..."

    @application.get("/healthz")
    def healthz(request: Request):
        """
        R: Health check verifying the user store.

        Returns:
            ok: True if the store answered
            db: "connected" or "disconnected"
            request_id: Correlation ID for this request
        """
        db_status = "disconnected"
        try:
            if get_user_repository().ping():
                db_status = "connected"
        except Exception as e:
            logger.warning("Health check: DB unavailable", extra={"error": str(e)})

        return {
            "ok": db_status == "connected",
            "db": db_status,
            "request_id": getattr(request.state, "request_id", None),
        }

    return application


app = create_app()
