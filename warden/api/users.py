"""User administration endpoints. Access rules live in services.authorization."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from warden.api.session import require_authenticated
from warden.core.database import get_db
from warden.schemas.auth import MessageResponse, TokenClaims
from warden.schemas.user import (
    UserCreateRequest,
    UserOut,
    UsersListResponse,
    UserUpdateRequest,
)
from warden.services.credential_store import CredentialStore
from warden.services.role_admin import RoleAdmin
from warden.services.user_admin import UserAdmin

router = APIRouter()

MAX_PAGE_SIZE = 100


def get_user_admin(db: Annotated[Session, Depends(get_db)]) -> UserAdmin:
    return UserAdmin(CredentialStore(db), RoleAdmin(db))


@router.get("", response_model=UsersListResponse)
def list_users(
    claims: Annotated[TokenClaims, Depends(require_authenticated)],
    admin: Annotated[UserAdmin, Depends(get_user_admin)],
    role: str | None = None,
    active: bool | None = None,
    search: str | None = None,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=MAX_PAGE_SIZE)] = 20,
) -> UsersListResponse:
    """List users, newest first (admin only). Filter by role/active, search by email or name."""
    users, total = admin.list_users(
        claims, role=role, active=active, search=search, page=page, limit=limit
    )
    return UsersListResponse(
        users=[UserOut.model_validate(u) for u in users],
        total=total,
        page=page,
        limit=limit,
    )


@router.post("", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def create_user(
    body: UserCreateRequest,
    claims: Annotated[TokenClaims, Depends(require_authenticated)],
    admin: Annotated[UserAdmin, Depends(get_user_admin)],
) -> UserOut:
    """Create a user (admin only). Role defaults to 'user', active to true."""
    user = admin.create_user(claims, **body.model_dump())
    return UserOut.model_validate(user)


@router.get("/{user_id}", response_model=UserOut)
def get_user(
    user_id: int,
    claims: Annotated[TokenClaims, Depends(require_authenticated)],
    admin: Annotated[UserAdmin, Depends(get_user_admin)],
) -> UserOut:
    """Get one user. Non-admins may only fetch their own record."""
    return UserOut.model_validate(admin.get_user(claims, user_id))


@router.put("/{user_id}", response_model=UserOut)
def update_user(
    user_id: int,
    body: UserUpdateRequest,
    claims: Annotated[TokenClaims, Depends(require_authenticated)],
    admin: Annotated[UserAdmin, Depends(get_user_admin)],
) -> UserOut:
    """Update a user (admin only). Only the fields present in the body change."""
    user = admin.update_user(claims, user_id, body.model_dump(exclude_unset=True))
    return UserOut.model_validate(user)


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: int,
    claims: Annotated[TokenClaims, Depends(require_authenticated)],
    admin: Annotated[UserAdmin, Depends(get_user_admin)],
) -> MessageResponse:
    """Soft-delete a user (admin only). Deleting your own account is refused."""
    admin.delete_user(claims, user_id)
    return MessageResponse(message="User deleted successfully")
