"""ORM model for application users (auth and RBAC)."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String

from warden.models.base import Base, utcnow
from warden.models.role import ROLE_ADMIN, ROLE_USER


class User(Base):
    """
    User account for session authentication and role-based access control.

    password_hash only ever holds a bcrypt hash; the credential store hashes
    plain values before they are written. Rows are soft-deleted by setting
    deleted_at and are excluded from every store read afterwards.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    # Unique across soft-deleted rows too; the authoritative duplicate guard.
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(100), nullable=False, default="")
    last_name = Column(String(100), nullable=False, default="")
    role = Column(
        String(50),
        ForeignKey("roles.name", onupdate="CASCADE", ondelete="RESTRICT"),
        nullable=False,
        default=ROLE_USER,
    )
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )
    deleted_at = Column(DateTime(timezone=True), nullable=True, index=True)

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    @property
    def full_name(self) -> str:
        if self.first_name and self.last_name:
            return f"{self.first_name} {self.last_name}"
        return self.email
