"""Pydantic request/response schemas."""

from warden.schemas.auth import (
    AuthResponse,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    TokenClaims,
)
from warden.schemas.health import HealthResponse
from warden.schemas.role import (
    RoleCreateRequest,
    RoleOut,
    RolesListResponse,
    RoleUpdateRequest,
)
from warden.schemas.user import (
    UserCreateRequest,
    UserOut,
    UsersListResponse,
    UserUpdateRequest,
)

__all__ = [
    "AuthResponse",
    "HealthResponse",
    "LoginRequest",
    "MessageResponse",
    "RegisterRequest",
    "RoleCreateRequest",
    "RoleOut",
    "RoleUpdateRequest",
    "RolesListResponse",
    "TokenClaims",
    "UserCreateRequest",
    "UserOut",
    "UserUpdateRequest",
    "UsersListResponse",
]
