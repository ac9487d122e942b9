"""Request/response schemas for user administration."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class UserOut(BaseModel):
    """User as returned to clients. Never carries the password hash."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    first_name: str
    last_name: str
    role: str
    active: bool
    created_at: datetime
    updated_at: datetime


class UserCreateRequest(BaseModel):
    """Admin-initiated account creation; role and active fall back to defaults."""

    email: str = Field(default="", max_length=255)
    password: str = Field(default="")
    first_name: str = Field(default="", max_length=100)
    last_name: str = Field(default="", max_length=100)
    role: str | None = Field(default=None, max_length=50)
    active: bool | None = None


class UserUpdateRequest(BaseModel):
    """Partial update; omitted fields are left unchanged."""

    email: str | None = Field(default=None, max_length=255)
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    role: str | None = Field(default=None, max_length=50)
    active: bool | None = None
    password: str | None = Field(default=None, description="Optional password change")


class UsersListResponse(BaseModel):
    """Response for GET /users (admin only)."""

    users: list[UserOut]
    total: int
    page: int
    limit: int
