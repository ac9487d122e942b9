"""Role-based access decisions for administration endpoints."""

from enum import Enum

from warden.core.errors import ForbiddenError
from warden.models.role import ROLE_ADMIN
from warden.schemas.auth import TokenClaims


class Operation(str, Enum):
    LIST = "list"
    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


def authorize(
    claims: TokenClaims,
    resource_owner_id: int | None,
    operation: Operation,
) -> bool:
    """
    Decide whether the caller may perform operation on a resource.

    Admins may do everything. Anyone else may only read their own record.
    """
    if claims.role == ROLE_ADMIN:
        return True
    return operation is Operation.READ and resource_owner_id == claims.user_id


def ensure_authorized(
    claims: TokenClaims,
    resource_owner_id: int | None,
    operation: Operation,
) -> None:
    """Raise ForbiddenError when authorize() denies."""
    if authorize(claims, resource_owner_id, operation):
        return
    if operation is Operation.READ and resource_owner_id is not None:
        raise ForbiddenError("You can only view your own profile")
    raise ForbiddenError("Admin access required")
