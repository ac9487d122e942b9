"""Shared helpers: isolated SQLite databases and an API test base class."""

import unittest

from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from warden.core.database import get_db
from warden.core.security import get_token_issuer
from warden.main import app
from warden.models import Base, User
from warden.services.credential_store import CredentialStore
from warden.services.role_admin import seed_default_roles

DEFAULT_PASSWORD = "correct-horse-1"


def _enable_foreign_keys(dbapi_connection, _record) -> None:
    # SQLite ignores REFERENCES clauses unless asked per connection.
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def make_session_factory(seed_roles: bool = True) -> tuple[Engine, sessionmaker]:
    """Fresh in-memory database with foreign keys enforced and tables created."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    event.listen(engine, "connect", _enable_foreign_keys)
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    if seed_roles:
        db = factory()
        try:
            seed_default_roles(db)
        finally:
            db.close()
    return engine, factory


class DatabaseTestCase(unittest.TestCase):
    """One isolated database per test; self.db is an open session on it."""

    seed_roles = True

    def setUp(self) -> None:
        self.engine, self.SessionTest = make_session_factory(self.seed_roles)
        self.db: Session = self.SessionTest()

    def tearDown(self) -> None:
        self.db.close()
        self.engine.dispose()

    def make_user(
        self,
        email: str,
        password: str = DEFAULT_PASSWORD,
        role: str = "user",
        active: bool = True,
        **kwargs: str,
    ) -> User:
        return CredentialStore(self.db).create(
            email=email, password=password, role=role, active=active, **kwargs
        )


class ApiTestCase(DatabaseTestCase):
    """DatabaseTestCase plus a TestClient whose get_db points at the test database."""

    def setUp(self) -> None:
        super().setUp()

        def override_get_db():
            db = self.SessionTest()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        self.client = TestClient(app)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()
        self.client.close()
        super().tearDown()

    def bearer(self, user: User) -> dict[str, str]:
        """Authorization header carrying a fresh session token for user."""
        token = get_token_issuer().issue(user)
        return {"Authorization": f"Bearer {token}"}
