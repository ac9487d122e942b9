"""Role catalogue: default seeding and admin CRUD."""

import logging

from sqlalchemy.orm import Session

from warden.core.errors import BadRequestError, ConflictError, NotFoundError, ValidationError
from warden.models import Role, User
from warden.models.role import DEFAULT_ROLE_NAMES
from warden.services.credential_store import store_errors

logger = logging.getLogger(__name__)

ROLE_NAME_MAX_LEN = 50


def missing_default_roles(db: Session) -> list[str]:
    """Default role names not present in the roles table, in seeding order."""
    with store_errors(db):
        existing = {name for (name,) in db.query(Role.name).all()}
    return [name for name in DEFAULT_ROLE_NAMES if name not in existing]


def seed_default_roles(db: Session) -> list[str]:
    """Insert any missing default role. Idempotent; returns the names created."""
    missing = missing_default_roles(db)
    with store_errors(db):
        for name in missing:
            db.add(Role(name=name))
        if missing:
            db.commit()
    return missing


def _clean_name(name: str | None) -> str:
    cleaned = (name or "").strip().lower()
    if not cleaned:
        raise ValidationError({"name": "Name is required"})
    if len(cleaned) > ROLE_NAME_MAX_LEN:
        raise ValidationError(
            {"name": f"Name must be at most {ROLE_NAME_MAX_LEN} characters"}
        )
    return cleaned


class RoleAdmin:
    """CRUD over roles. Authorization is checked by the caller."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def exists(self, name: str) -> bool:
        with store_errors(self.db):
            return self.db.query(Role.id).filter(Role.name == name).first() is not None

    def list_roles(self, search: str | None = None) -> list[Role]:
        query = self.db.query(Role)
        if search:
            query = query.filter(Role.name.ilike(f"%{search.strip()}%"))
        with store_errors(self.db):
            return query.order_by(Role.id).all()

    def get(self, role_id: int) -> Role:
        with store_errors(self.db):
            role = self.db.get(Role, role_id)
        if role is None:
            raise NotFoundError("Role")
        return role

    def create(self, name: str) -> Role:
        name = _clean_name(name)
        if self.exists(name):
            raise ConflictError("Role with this name already exists")
        role = Role(name=name)
        with store_errors(self.db):
            self.db.add(role)
            self.db.commit()
            self.db.refresh(role)
        logger.info("Role created", extra={"role": name})
        return role

    def rename(self, role_id: int, name: str) -> Role:
        """Rename a role and move every user carrying the old name along with it."""
        role = self.get(role_id)
        name = _clean_name(name)
        if name == role.name:
            return role
        if role.is_default:
            raise BadRequestError("Default roles cannot be renamed")
        if self.exists(name):
            raise ConflictError("Role with this name already exists")
        old_name = role.name
        with store_errors(self.db):
            role.name = name
            self.db.flush()
            # No-op where the foreign key cascades the rename itself.
            self.db.query(User).filter(User.role == old_name).update(
                {User.role: name}, synchronize_session=False
            )
            self.db.commit()
            self.db.refresh(role)
        logger.info("Role renamed", extra={"role": name, "previous": old_name})
        return role

    def delete(self, role_id: int) -> None:
        role = self.get(role_id)
        if role.is_default:
            raise BadRequestError("Default roles cannot be deleted")
        with store_errors(self.db):
            in_use = self.db.query(User.id).filter(User.role == role.name).first()
        if in_use is not None:
            raise ConflictError("Role is still assigned to users")
        name = role.name
        with store_errors(self.db):
            self.db.delete(role)
            self.db.commit()
        logger.info("Role deleted", extra={"role": name})
