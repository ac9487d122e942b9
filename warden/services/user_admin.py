"""User administration: list/create/read/update/delete with per-operation authorization."""

import logging
from typing import Any

from warden.core.errors import BadRequestError, ValidationError
from warden.models import User
from warden.schemas.auth import TokenClaims
from warden.services.authorization import Operation, ensure_authorized
from warden.services.credential_store import CredentialStore
from warden.services.role_admin import RoleAdmin
from warden.services.validation import password_problem, validate_new_account

logger = logging.getLogger(__name__)


class UserAdmin:
    def __init__(self, store: CredentialStore, roles: RoleAdmin) -> None:
        self.store = store
        self.roles = roles

    def _check_role(self, role: str | None) -> None:
        if role is not None and not self.roles.exists(role):
            raise ValidationError({"role": f"Unknown role '{role}'"})

    def list_users(
        self,
        claims: TokenClaims,
        *,
        role: str | None = None,
        active: bool | None = None,
        search: str | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> tuple[list[User], int]:
        ensure_authorized(claims, None, Operation.LIST)
        return self.store.list_users(
            role=role, active=active, search=search, page=page, limit=limit
        )

    def get_user(self, claims: TokenClaims, user_id: int) -> User:
        """Admins may read anyone; other callers only themselves."""
        ensure_authorized(claims, user_id, Operation.READ)
        return self.store.find_by_id(user_id)

    def create_user(
        self,
        claims: TokenClaims,
        *,
        email: str,
        password: str,
        first_name: str = "",
        last_name: str = "",
        role: str | None = None,
        active: bool | None = None,
    ) -> User:
        ensure_authorized(claims, None, Operation.CREATE)
        validate_new_account(email, password)
        self._check_role(role)
        user = self.store.create(
            email=email,
            password=password,
            first_name=first_name,
            last_name=last_name,
            role=role,
            active=active,
        )
        logger.info(
            "User created by admin",
            extra={"user_id": user.id, "actor_id": claims.user_id},
        )
        return user

    def update_user(
        self, claims: TokenClaims, user_id: int, changes: dict[str, Any]
    ) -> User:
        """
        Partial update. An empty password means "leave unchanged"; a
        non-empty one must satisfy the password policy.
        """
        ensure_authorized(claims, user_id, Operation.UPDATE)
        changes = {k: v for k, v in changes.items() if v is not None}
        password = changes.pop("password", None)
        if password:
            problem = password_problem(password)
            if problem:
                raise ValidationError({"password": problem})
            changes["password"] = password
        self._check_role(changes.get("role"))
        user = self.store.update(user_id, changes)
        logger.info(
            "User updated",
            extra={
                "user_id": user_id,
                "actor_id": claims.user_id,
                "fields": ",".join(sorted(changes)),
            },
        )
        return user

    def delete_user(self, claims: TokenClaims, user_id: int) -> None:
        """Soft delete. Nobody, admin included, may delete their own account."""
        if user_id == claims.user_id:
            raise BadRequestError("You cannot delete your own account")
        ensure_authorized(claims, user_id, Operation.DELETE)
        self.store.soft_delete(user_id)
        logger.info(
            "User deleted", extra={"user_id": user_id, "actor_id": claims.user_id}
        )
