"""
Name: Authorization Gate

Responsibilities:
  - protect: resolve the session token (cookie, or Authorization: Bearer)
    and attach the verified {subject_id, role} to the request
  - require_role: allow only principals whose role is in the allowed set

Collaborators:
  - identity/tokens.TokenService: verification
  - container.get_token_service / get_settings: wiring
  - crosscutting/error_responses: unauthorized / forbidden

Notes:
  - Pure guards: no persistence access, no state
  - require_role always runs protect first, so it composes in any order
"""

from __future__ import annotations

from typing import Callable, Iterable

from fastapi import Depends, Header, Request

from ..container import get_token_service
from ..crosscutting.config import get_settings
from ..crosscutting.error_responses import forbidden, unauthorized
from ..crosscutting.exceptions import TokenError
from ..crosscutting.logger import logger
from ..domain.entities import UserRole
from .tokens import TokenClaims, TokenService, TokenType

DEFAULT_SESSION_COOKIE: str = "token"


def session_cookie_name() -> str:
    return (get_settings().jwt_cookie_name or "").strip() or DEFAULT_SESSION_COOKIE


def _extract_bearer_token(authorization: str | None) -> str | None:
    """Extract token from `Authorization: Bearer <token>`."""
    if not authorization:
        return None
    parts = authorization.strip().split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1].strip() or None


def extract_session_token(request: Request, authorization: str | None) -> str | None:
    """R: Cookie first (primary carrier), then Authorization header."""
    token = request.cookies.get(session_cookie_name())
    if token:
        return token
    return _extract_bearer_token(authorization)


def protect() -> Callable:
    """FastAPI dependency: requires a valid session token."""

    def dependency(
        request: Request,
        authorization: str | None = Header(None, alias="Authorization"),
        tokens: TokenService = Depends(get_token_service),
    ) -> TokenClaims:
        token = extract_session_token(request, authorization)
        if not token:
            raise unauthorized("Not authorized, no token")

        try:
            principal = tokens.verify(token, TokenType.ACCESS)
        except TokenError as exc:
            logger.info("Session token rejected", extra={"reason": exc.error_code})
            raise unauthorized("Not authorized, token failed") from exc

        request.state.principal = principal
        return principal

    return dependency


def require_role(allowed: Iterable[UserRole | str]) -> Callable:
    """FastAPI dependency: requires the principal's role to be in `allowed`."""
    allowed_roles = frozenset(UserRole(role) for role in allowed)

    def dependency(principal: TokenClaims = Depends(protect())) -> TokenClaims:
        if principal.role not in allowed_roles:
            raise forbidden("Access denied, insufficient permissions")
        return principal

    return dependency
