"""Password hashing and session token issuing/verification."""

import re
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from functools import lru_cache
from typing import Any, Protocol

import bcrypt
import jwt

from warden.core.config import get_settings
from warden.schemas.auth import TokenClaims

# Min/max password lengths for input validation.
PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = 128

# bcrypt only looks at the first 72 bytes of its input.
BCRYPT_MAX_BYTES = 72

# Modular-crypt encoding of a bcrypt hash: $2b$<cost>$<22 salt><31 digest>.
BCRYPT_HASH_RE = re.compile(r"^\$2[aby]\$\d{2}\$[./A-Za-z0-9]{53}$")

# Sessions live exactly 24 hours from issuance; not configurable.
SESSION_TTL = timedelta(hours=24)


def hash_password(plain_password: str, rounds: int | None = None) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    if rounds is None:
        rounds = get_settings().BCRYPT_ROUNDS
    pw_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def is_password_hash(value: str) -> bool:
    """True when value is already a bcrypt hash rather than a plain password."""
    return bool(BCRYPT_HASH_RE.match(value or ""))


class TokenError(Exception):
    """Raised when a session token cannot be accepted."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidTokenError(TokenError):
    """Bad signature, malformed token or missing claims."""


class ExpiredTokenError(TokenError):
    """Well-formed, correctly signed token past its expiry."""


class TokenSubject(Protocol):
    id: int
    email: str
    role: str


@dataclass(frozen=True)
class TokenIssuer:
    """
    Creates and verifies signed session tokens.

    Verification is stateless: it never consults the user store, so a
    deactivated or deleted user's token stays valid until it expires.
    """

    secret: str = field(repr=False)
    algorithm: str = "HS256"
    lifetime: timedelta = SESSION_TTL

    def issue(self, user: TokenSubject, now: datetime | None = None) -> str:
        """Sign a claim set {sub, user_id, email, role, iat, exp} for user."""
        issued_at = now or datetime.now(UTC)
        payload: dict[str, Any] = {
            "sub": str(user.id),
            "user_id": user.id,
            "email": user.email,
            "role": user.role,
            "iat": issued_at,
            "exp": issued_at + self.lifetime,
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token: str, now: datetime | None = None) -> TokenClaims:
        """
        Check signature and expiry; return the token's claims.
        Raises InvalidTokenError or ExpiredTokenError.
        """
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "require": ["sub", "iat", "exp"],
                },
            )
        except jwt.PyJWTError as e:
            raise InvalidTokenError("Invalid token") from e

        try:
            claims = TokenClaims(
                user_id=int(payload.get("user_id", payload["sub"])),
                email=str(payload.get("email", "")),
                role=str(payload["role"]),
                issued_at=datetime.fromtimestamp(int(payload["iat"]), UTC),
                expires_at=datetime.fromtimestamp(int(payload["exp"]), UTC),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidTokenError("Invalid token payload") from e

        current = now or datetime.now(UTC)
        if current >= claims.expires_at:
            raise ExpiredTokenError("Token has expired")
        return claims


@lru_cache
def get_token_issuer() -> TokenIssuer:
    """Process-wide issuer built once from settings at first use."""
    settings = get_settings()
    return TokenIssuer(
        secret=settings.JWT_SECRET.get_secret_value(),
        algorithm=settings.JWT_ALGORITHM,
    )
