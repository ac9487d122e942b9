"""Request/response schemas for auth endpoints and session claims."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from warden.schemas.user import UserOut


class RegisterRequest(BaseModel):
    """Self-service registration. Emptiness and length are checked by the service."""

    email: str = Field(default="", max_length=255, description="Email address")
    password: str = Field(default="", description="Password (8-128 characters)")
    first_name: str = Field(default="", max_length=100)
    last_name: str = Field(default="", max_length=100)


class LoginRequest(BaseModel):
    """Credentials for login."""

    email: str = Field(default="", max_length=255, description="Email address")
    password: str = Field(default="", description="Password")


class AuthResponse(BaseModel):
    """Session token (also set as the auth_token cookie) and the user it belongs to."""

    token: str = Field(..., description="Signed session token")
    user: UserOut


class MessageResponse(BaseModel):
    message: str


class TokenClaims(BaseModel):
    """Identity carried by a verified session token."""

    model_config = ConfigDict(frozen=True)

    user_id: int
    email: str
    role: str
    issued_at: datetime
    expires_at: datetime
