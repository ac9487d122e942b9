"""ORM model for roles that can be assigned to users."""

from sqlalchemy import Column, DateTime, Integer, String

from warden.models.base import Base, utcnow

ROLE_ADMIN = "admin"
ROLE_USER = "user"
ROLE_GUEST = "guest"

# Seeded at startup when absent; cannot be renamed or deleted.
DEFAULT_ROLE_NAMES = (ROLE_ADMIN, ROLE_USER, ROLE_GUEST)


class Role(Base):
    """Named role referenced by users.role."""

    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(50), nullable=False, unique=True, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    @property
    def is_default(self) -> bool:
        return self.name in DEFAULT_ROLE_NAMES
