"""Register, login, logout and current-user endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from warden.api.session import clear_session_cookie, require_authenticated, set_session_cookie
from warden.core.database import get_db
from warden.core.security import TokenIssuer, get_token_issuer
from warden.schemas.auth import (
    AuthResponse,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    TokenClaims,
)
from warden.schemas.user import UserOut
from warden.services.auth_service import AuthResult, AuthService
from warden.services.credential_store import CredentialStore

logger = logging.getLogger(__name__)
router = APIRouter()


def get_auth_service(
    db: Annotated[Session, Depends(get_db)],
    issuer: Annotated[TokenIssuer, Depends(get_token_issuer)],
) -> AuthService:
    return AuthService(CredentialStore(db), issuer)


def _start_session(response: Response, result: AuthResult) -> AuthResponse:
    set_session_cookie(response, result.token)
    return AuthResponse(token=result.token, user=UserOut.model_validate(result.user))


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    body: RegisterRequest,
    response: Response,
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> AuthResponse:
    """Create an account and log it in. The token is returned and set as a cookie."""
    result = service.register(
        email=body.email,
        password=body.password,
        first_name=body.first_name,
        last_name=body.last_name,
    )
    return _start_session(response, result)


@router.post("/login", response_model=AuthResponse)
def login(
    body: LoginRequest,
    response: Response,
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> AuthResponse:
    """
    Authenticate with email and password.
    Browsers get the auth_token cookie; other clients send the returned token as
    Authorization: Bearer <token>.
    """
    result = service.login(email=body.email, password=body.password)
    return _start_session(response, result)


@router.post("/logout", response_model=MessageResponse)
def logout(response: Response) -> MessageResponse:
    """Clear the session cookie. Always succeeds; no valid session needed."""
    clear_session_cookie(response)
    logger.info("Session cookie cleared", extra={"event": "logout"})
    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=UserOut)
def me(
    claims: Annotated[TokenClaims, Depends(require_authenticated)],
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> UserOut:
    """Return the persisted record of the logged-in user."""
    return UserOut.model_validate(service.me(claims))
