"""HTTP tests for /api/users: access rules, soft delete, uniqueness and password changes."""

import unittest

from warden.core.security import verify_password
from warden.models import User
from tests.db_utils import DEFAULT_PASSWORD, ApiTestCase


class UsersApiTestCase(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.admin = self.make_user("admin@example.com", role="admin")
        self.alice = self.make_user("alice@example.com", first_name="Alice")
        self.bob = self.make_user("bob@example.com", first_name="Bob")


class TestGetUser(UsersApiTestCase):
    def test_non_admin_reading_other_user_is_forbidden(self) -> None:
        response = self.client.get(f"/api/users/{self.bob.id}", headers=self.bearer(self.alice))
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()["error"], "You can only view your own profile")

    def test_non_admin_reading_self(self) -> None:
        response = self.client.get(f"/api/users/{self.alice.id}", headers=self.bearer(self.alice))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["email"], "alice@example.com")

    def test_admin_reads_anyone(self) -> None:
        response = self.client.get(f"/api/users/{self.bob.id}", headers=self.bearer(self.admin))
        self.assertEqual(response.status_code, 200)

    def test_missing_user(self) -> None:
        response = self.client.get("/api/users/9999", headers=self.bearer(self.admin))
        self.assertEqual(response.status_code, 404)

    def test_requires_session(self) -> None:
        self.assertEqual(self.client.get(f"/api/users/{self.bob.id}").status_code, 401)


class TestListUsers(UsersApiTestCase):
    def test_admin_only(self) -> None:
        response = self.client.get("/api/users", headers=self.bearer(self.alice))
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()["error"], "Admin access required")

    def test_filters_and_pagination(self) -> None:
        headers = self.bearer(self.admin)
        data = self.client.get("/api/users", headers=headers).json()
        self.assertEqual(data["total"], 3)
        self.assertEqual((data["page"], data["limit"]), (1, 20))

        data = self.client.get("/api/users?role=admin", headers=headers).json()
        self.assertEqual([u["email"] for u in data["users"]], ["admin@example.com"])

        data = self.client.get("/api/users?search=ALICE", headers=headers).json()
        self.assertEqual([u["email"] for u in data["users"]], ["alice@example.com"])

        data = self.client.get("/api/users?page=2&limit=2", headers=headers).json()
        self.assertEqual(len(data["users"]), 1)
        self.assertEqual(data["total"], 3)

    def test_invalid_page(self) -> None:
        response = self.client.get("/api/users?page=0", headers=self.bearer(self.admin))
        self.assertEqual(response.status_code, 400)
        response = self.client.get("/api/users?limit=1000", headers=self.bearer(self.admin))
        self.assertEqual(response.status_code, 400)


class TestCreateUser(UsersApiTestCase):
    def test_admin_creates_with_defaults(self) -> None:
        response = self.client.post(
            "/api/users",
            json={"email": "carol@example.com", "password": DEFAULT_PASSWORD},
            headers=self.bearer(self.admin),
        )
        self.assertEqual(response.status_code, 201)
        data = response.json()
        self.assertEqual((data["role"], data["active"]), ("user", True))
        stored = self.db.query(User).filter(User.email == "carol@example.com").one()
        self.assertTrue(verify_password(DEFAULT_PASSWORD, stored.password_hash))

    def test_admin_creates_guest(self) -> None:
        response = self.client.post(
            "/api/users",
            json={"email": "g@example.com", "password": DEFAULT_PASSWORD, "role": "guest", "active": False},
            headers=self.bearer(self.admin),
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual((response.json()["role"], response.json()["active"]), ("guest", False))

    def test_unknown_role(self) -> None:
        response = self.client.post(
            "/api/users",
            json={"email": "carol@example.com", "password": DEFAULT_PASSWORD, "role": "root"},
            headers=self.bearer(self.admin),
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn("role", response.json()["details"])

    def test_duplicate(self) -> None:
        response = self.client.post(
            "/api/users",
            json={"email": "bob@example.com", "password": DEFAULT_PASSWORD},
            headers=self.bearer(self.admin),
        )
        self.assertEqual(response.status_code, 409)

    def test_non_admin_forbidden(self) -> None:
        response = self.client.post(
            "/api/users",
            json={"email": "carol@example.com", "password": DEFAULT_PASSWORD},
            headers=self.bearer(self.alice),
        )
        self.assertEqual(response.status_code, 403)


class TestUpdateUser(UsersApiTestCase):
    def test_email_taken_by_other_user(self) -> None:
        response = self.client.put(
            f"/api/users/{self.bob.id}",
            json={"email": "alice@example.com"},
            headers=self.bearer(self.admin),
        )
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()["error"], "Email already in use")

    def test_partial_update(self) -> None:
        response = self.client.put(
            f"/api/users/{self.bob.id}",
            json={"last_name": "Builder", "role": "guest"},
            headers=self.bearer(self.admin),
        )
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual((data["first_name"], data["last_name"], data["role"]), ("Bob", "Builder", "guest"))

    def test_password_change_is_hashed_and_usable(self) -> None:
        response = self.client.put(
            f"/api/users/{self.bob.id}",
            json={"password": "a-new-password"},
            headers=self.bearer(self.admin),
        )
        self.assertEqual(response.status_code, 200)
        self.db.expire_all()
        stored = self.db.get(User, self.bob.id)
        self.assertNotEqual(stored.password_hash, "a-new-password")
        login = self.client.post(
            "/api/auth/login", json={"email": "bob@example.com", "password": "a-new-password"}
        )
        self.assertEqual(login.status_code, 200)

    def test_short_password_rejected(self) -> None:
        response = self.client.put(
            f"/api/users/{self.bob.id}",
            json={"password": "short"},
            headers=self.bearer(self.admin),
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(
            response.json()["details"], {"password": "Password must be at least 8 characters"}
        )

    def test_deactivate_then_login_forbidden(self) -> None:
        self.client.put(
            f"/api/users/{self.bob.id}", json={"active": False}, headers=self.bearer(self.admin)
        )
        login = self.client.post(
            "/api/auth/login", json={"email": "bob@example.com", "password": DEFAULT_PASSWORD}
        )
        self.assertEqual(login.status_code, 403)

    def test_non_admin_cannot_update_self(self) -> None:
        response = self.client.put(
            f"/api/users/{self.alice.id}", json={"role": "admin"}, headers=self.bearer(self.alice)
        )
        self.assertEqual(response.status_code, 403)

    def test_missing_user(self) -> None:
        response = self.client.put(
            "/api/users/9999", json={"first_name": "X"}, headers=self.bearer(self.admin)
        )
        self.assertEqual(response.status_code, 404)


class TestDeleteUser(UsersApiTestCase):
    def test_admin_cannot_delete_self(self) -> None:
        response = self.client.delete(f"/api/users/{self.admin.id}", headers=self.bearer(self.admin))
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "You cannot delete your own account")

    def test_non_admin_deleting_self_is_bad_request(self) -> None:
        response = self.client.delete(f"/api/users/{self.alice.id}", headers=self.bearer(self.alice))
        self.assertEqual(response.status_code, 400)

    def test_non_admin_deleting_other_is_forbidden(self) -> None:
        response = self.client.delete(f"/api/users/{self.bob.id}", headers=self.bearer(self.alice))
        self.assertEqual(response.status_code, 403)

    def test_soft_delete(self) -> None:
        headers = self.bearer(self.admin)
        response = self.client.delete(f"/api/users/{self.bob.id}", headers=headers)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"message": "User deleted successfully"})
        self.assertEqual(self.client.get(f"/api/users/{self.bob.id}", headers=headers).status_code, 404)
        self.assertEqual(self.client.delete(f"/api/users/{self.bob.id}", headers=headers).status_code, 404)
        self.db.expire_all()
        self.assertIsNotNone(self.db.get(User, self.bob.id).deleted_at)


if __name__ == "__main__":
    unittest.main()
