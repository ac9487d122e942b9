"""
Credential store: persistence of user records.

All writes pass through _prepare_password, so a plain password never reaches
the database whether it arrives through create or update. Reads exclude
soft-deleted users.
"""

import logging
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Query, Session

from warden.core.errors import (
    AppError,
    ConflictError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from warden.core.security import hash_password, is_password_hash
from warden.models import Role, User
from warden.models.role import ROLE_USER

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = frozenset(
    {"email", "first_name", "last_name", "role", "active", "password"}
)


def normalize_email(email: str | None) -> str:
    """Emails compare case-insensitively; store and look them up lower-cased."""
    return (email or "").strip().lower()


@contextmanager
def store_errors(db: Session) -> Iterator[None]:
    """Convert database failures into application errors without leaking their text."""
    try:
        yield
    except IntegrityError as e:
        db.rollback()
        logger.warning("Integrity violation: %s", type(e.orig).__name__)
        raise ConflictError("Conflicts with an existing record") from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Database operation failed")
        raise InternalError() from e


class CredentialStore:
    """User persistence bound to one request-scoped session."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def _live(self) -> Query:
        return self.db.query(User).filter(User.deleted_at.is_(None))

    @staticmethod
    def _prepare_password(value: str) -> str:
        """The one hashing step on the write path: hash unless already a hash."""
        if not value:
            raise ValidationError({"password": "Password is required"})
        if is_password_hash(value):
            return value
        return hash_password(value)

    def find_by_id(self, user_id: int) -> User:
        with store_errors(self.db):
            user = self._live().filter(User.id == user_id).first()
        if user is None:
            raise NotFoundError("User")
        return user

    def find_by_email(self, email: str) -> User:
        with store_errors(self.db):
            user = self._live().filter(User.email == normalize_email(email)).first()
        if user is None:
            raise NotFoundError("User")
        return user

    def _explain_conflict(
        self,
        email: str,
        role: str,
        duplicate_message: str,
        exclude_id: int | None = None,
    ) -> AppError:
        """
        Name the constraint a rolled-back user write hit: the unique email
        (a concurrent writer won) or the role foreign key (role missing).
        """
        if self.email_taken(email, exclude_id=exclude_id):
            return ConflictError(duplicate_message)
        with store_errors(self.db):
            role_found = (
                self.db.query(Role.id).filter(Role.name == role).first() is not None
            )
        if not role_found:
            return ValidationError({"role": f"Unknown role '{role}'"})
        logger.error("Unexplained integrity violation on users write")
        return InternalError()

    def email_taken(self, email: str, exclude_id: int | None = None) -> bool:
        """Check every row, soft-deleted included, since the unique index covers them."""
        query = self.db.query(User.id).filter(User.email == normalize_email(email))
        if exclude_id is not None:
            query = query.filter(User.id != exclude_id)
        with store_errors(self.db):
            return query.first() is not None

    def create(
        self,
        *,
        email: str,
        password: str,
        first_name: str = "",
        last_name: str = "",
        role: str | None = None,
        active: bool | None = None,
    ) -> User:
        """
        Insert a user. Defaults: role 'user', active True.
        Raises ConflictError when the email is already registered.
        """
        email = normalize_email(email)
        if self.email_taken(email):
            raise ConflictError("User with this email already exists")
        user = User(
            email=email,
            password_hash=self._prepare_password(password),
            first_name=first_name or "",
            last_name=last_name or "",
            role=role or ROLE_USER,
            active=True if active is None else active,
        )
        user_role = user.role
        try:
            with store_errors(self.db):
                self.db.add(user)
                self.db.commit()
                self.db.refresh(user)
        except ConflictError as e:
            raise self._explain_conflict(
                email, user_role, "User with this email already exists"
            ) from e
        logger.info("User created", extra={"user_id": user.id, "role": user.role})
        return user

    def update(self, user_id: int, changes: Mapping[str, Any]) -> User:
        """
        Apply a partial update. Keys not in changes are left as they are;
        a non-empty password is hashed before it is written.
        """
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Unknown user fields: {', '.join(sorted(unknown))}")

        user = self.find_by_id(user_id)
        if "email" in changes:
            email = normalize_email(changes["email"])
            if not email:
                raise ValidationError({"email": "Email is required"})
            if email != user.email and self.email_taken(email, exclude_id=user.id):
                raise ConflictError("Email already in use")
            user.email = email
        for name in ("first_name", "last_name", "role", "active"):
            if name in changes and changes[name] is not None:
                setattr(user, name, changes[name])
        if changes.get("password"):
            user.password_hash = self._prepare_password(changes["password"])

        email, user_role = user.email, user.role
        try:
            with store_errors(self.db):
                self.db.commit()
                self.db.refresh(user)
        except ConflictError as e:
            raise self._explain_conflict(
                email, user_role, "Email already in use", exclude_id=user_id
            ) from e
        return user

    def soft_delete(self, user_id: int) -> User:
        """Hide the user from all reads; the row is kept for history."""
        user = self.find_by_id(user_id)
        user.deleted_at = datetime.now(UTC)
        with store_errors(self.db):
            self.db.commit()
        logger.info("User soft-deleted", extra={"user_id": user_id})
        return user

    def list_users(
        self,
        *,
        role: str | None = None,
        active: bool | None = None,
        search: str | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> tuple[list[User], int]:
        """Return one page of users (newest first) and the total matching count."""
        query = self._live()
        if role:
            query = query.filter(User.role == role)
        if active is not None:
            query = query.filter(User.active == active)
        if search:
            pattern = f"%{search.strip()}%"
            query = query.filter(
                or_(
                    User.email.ilike(pattern),
                    User.first_name.ilike(pattern),
                    User.last_name.ilike(pattern),
                )
            )
        with store_errors(self.db):
            total = query.count()
            users = (
                query.order_by(User.created_at.desc(), User.id.desc())
                .offset((page - 1) * limit)
                .limit(limit)
                .all()
            )
        return users, total

