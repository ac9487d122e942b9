"""
Auth flows: register, login and identity check.

A request is Anonymous until register or login succeeds and a session token is
issued; logout only clears the cookie at the session boundary, since tokens
are not tracked server-side.
"""

import logging
from dataclasses import dataclass
from functools import lru_cache

from warden.core.errors import (
    ForbiddenError,
    InternalError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from warden.core.security import TokenIssuer, hash_password, verify_password
from warden.models import User
from warden.schemas.auth import TokenClaims
from warden.services.credential_store import CredentialStore
from warden.services.validation import validate_new_account

logger = logging.getLogger(__name__)

# Same text for unknown email and wrong password, so callers cannot tell which.
INVALID_CREDENTIALS = "Invalid email or password"


@lru_cache
def _dummy_password_hash() -> str:
    """Checked when the email is unknown so that path pays the same bcrypt cost."""
    return hash_password("warden-unknown-account")


@dataclass
class AuthResult:
    token: str
    user: User


class AuthService:
    """Orchestrates the credential store and token issuer for one request."""

    def __init__(self, store: CredentialStore, issuer: TokenIssuer) -> None:
        self.store = store
        self.issuer = issuer

    def _issue(self, user: User) -> str:
        try:
            return self.issuer.issue(user)
        except Exception as e:
            logger.exception("Token signing failed", extra={"user_id": user.id})
            raise InternalError("Failed to generate token") from e

    def register(
        self,
        email: str,
        password: str,
        first_name: str = "",
        last_name: str = "",
    ) -> AuthResult:
        """Create an active 'user' account and start a session for it."""
        validate_new_account(email, password)
        user = self.store.create(
            email=email,
            password=password,
            first_name=first_name,
            last_name=last_name,
        )
        token = self._issue(user)
        logger.info("User registered", extra={"event": "register", "user_id": user.id})
        return AuthResult(token=token, user=user)

    def login(self, email: str, password: str) -> AuthResult:
        """
        Check credentials and start a session.

        Unknown email and wrong password fail identically (401). A deactivated
        account is only reported (403) once the password has been verified.
        """
        errors: dict[str, str] = {}
        if not email or not email.strip():
            errors["email"] = "Email is required"
        if not password:
            errors["password"] = "Password is required"
        if errors:
            raise ValidationError(errors)

        try:
            user = self.store.find_by_email(email)
        except NotFoundError:
            verify_password(password, _dummy_password_hash())
            logger.warning("Login failed", extra={"event": "login_failed"})
            raise UnauthorizedError(INVALID_CREDENTIALS) from None

        if not verify_password(password, user.password_hash):
            logger.warning(
                "Login failed", extra={"event": "login_failed", "user_id": user.id}
            )
            raise UnauthorizedError(INVALID_CREDENTIALS)

        if not user.active:
            logger.warning(
                "Login refused for deactivated account",
                extra={"event": "login_inactive", "user_id": user.id},
            )
            raise ForbiddenError("Account is deactivated")

        token = self._issue(user)
        logger.info("User logged in", extra={"event": "login", "user_id": user.id})
        return AuthResult(token=token, user=user)

    def me(self, claims: TokenClaims) -> User:
        """Current persisted record for the session; NotFoundError if it is gone."""
        return self.store.find_by_id(claims.user_id)
