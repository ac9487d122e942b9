"""
Session boundary: carries the session token across requests and gates routes.

The token is read from the HTTP-only auth_token cookie, or from an
Authorization: Bearer header for clients that do not keep cookies. When both
are sent the cookie is tried first and the header is the fallback, so a stale
cookie left in a browser does not mask a valid header.
"""

import logging
from collections.abc import Callable
from typing import Annotated

from fastapi import Cookie, Depends, Response
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from warden.core.config import get_settings
from warden.core.errors import ForbiddenError, UnauthorizedError
from warden.core.security import SESSION_TTL, TokenError, TokenIssuer, get_token_issuer
from warden.models.role import ROLE_ADMIN
from warden.schemas.auth import TokenClaims

logger = logging.getLogger(__name__)

AUTH_COOKIE_NAME = "auth_token"

security = HTTPBearer(auto_error=False)


def set_session_cookie(response: Response, token: str) -> None:
    """Attach the session token as an HTTP-only cookie living as long as the token."""
    max_age = int(SESSION_TTL.total_seconds())
    response.set_cookie(
        key=AUTH_COOKIE_NAME,
        value=token,
        max_age=max_age,
        expires=max_age,
        path="/",
        httponly=True,
        secure=get_settings().COOKIE_SECURE,
        samesite="lax",
    )


def clear_session_cookie(response: Response) -> None:
    """Expire the session cookie immediately."""
    response.delete_cookie(
        key=AUTH_COOKIE_NAME,
        path="/",
        httponly=True,
        secure=get_settings().COOKIE_SECURE,
        samesite="lax",
    )


def get_current_claims(
    issuer: Annotated[TokenIssuer, Depends(get_token_issuer)],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    auth_token: Annotated[str | None, Cookie()] = None,
) -> TokenClaims:
    """Dependency: verify the request's session token and return its claims. Raises 401."""
    candidates = [t for t in (auth_token, credentials and credentials.credentials) if t]
    if not candidates:
        raise UnauthorizedError("Authentication required")
    rejected: TokenError | None = None
    for token in candidates:
        try:
            return issuer.verify(token)
        except TokenError as e:
            logger.info("Rejected session token: %s", e.message)
            rejected = e
    raise UnauthorizedError("Invalid or expired token") from rejected


def require_authenticated(
    claims: Annotated[TokenClaims, Depends(get_current_claims)],
) -> TokenClaims:
    """Dependency: any valid session."""
    return claims


def require_role(role: str) -> Callable[[TokenClaims], TokenClaims]:
    """Build a dependency that accepts only sessions carrying role. Raises 401/403."""

    def dependency(
        claims: Annotated[TokenClaims, Depends(get_current_claims)],
    ) -> TokenClaims:
        if claims.role != role:
            logger.warning(
                "Forbidden: role %s required",
                role,
                extra={"user_id": claims.user_id},
            )
            raise ForbiddenError(
                "Admin access required" if role == ROLE_ADMIN else f"Role '{role}' required"
            )
        return claims

    return dependency


require_admin = require_role(ROLE_ADMIN)
