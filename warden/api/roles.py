"""Role administration endpoints (admin only)."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from warden.api.session import require_admin
from warden.core.database import get_db
from warden.schemas.auth import MessageResponse, TokenClaims
from warden.schemas.role import (
    RoleCreateRequest,
    RoleOut,
    RolesListResponse,
    RoleUpdateRequest,
)
from warden.services.role_admin import RoleAdmin

router = APIRouter()


def get_role_admin(db: Annotated[Session, Depends(get_db)]) -> RoleAdmin:
    return RoleAdmin(db)


@router.get("", response_model=RolesListResponse)
def list_roles(
    _admin: Annotated[TokenClaims, Depends(require_admin)],
    roles: Annotated[RoleAdmin, Depends(get_role_admin)],
    search: str | None = None,
) -> RolesListResponse:
    return RolesListResponse(
        roles=[RoleOut.model_validate(r) for r in roles.list_roles(search=search)]
    )


@router.post("", response_model=RoleOut, status_code=status.HTTP_201_CREATED)
def create_role(
    body: RoleCreateRequest,
    _admin: Annotated[TokenClaims, Depends(require_admin)],
    roles: Annotated[RoleAdmin, Depends(get_role_admin)],
) -> RoleOut:
    return RoleOut.model_validate(roles.create(body.name))


@router.get("/{role_id}", response_model=RoleOut)
def get_role(
    role_id: int,
    _admin: Annotated[TokenClaims, Depends(require_admin)],
    roles: Annotated[RoleAdmin, Depends(get_role_admin)],
) -> RoleOut:
    return RoleOut.model_validate(roles.get(role_id))


@router.put("/{role_id}", response_model=RoleOut)
def rename_role(
    role_id: int,
    body: RoleUpdateRequest,
    _admin: Annotated[TokenClaims, Depends(require_admin)],
    roles: Annotated[RoleAdmin, Depends(get_role_admin)],
) -> RoleOut:
    """Rename a role; users holding it follow. Default roles cannot be renamed."""
    return RoleOut.model_validate(roles.rename(role_id, body.name))


@router.delete("/{role_id}", response_model=MessageResponse)
def delete_role(
    role_id: int,
    _admin: Annotated[TokenClaims, Depends(require_admin)],
    roles: Annotated[RoleAdmin, Depends(get_role_admin)],
) -> MessageResponse:
    """Delete an unused, non-default role."""
    roles.delete(role_id)
    return MessageResponse(message="Role deleted successfully")
