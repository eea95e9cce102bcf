"""API tests for /users endpoints and the bearer/role/admin-session gates."""

import unittest

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import Settings, get_settings
from app.core.database import get_db
from app.main import app
from app.models import Base

ADMIN_KEY = "test-admin-key"


def _cookie_value(response, name: str) -> str:
    for header in response.headers.get_list("set-cookie"):
        if header.startswith(f"{name}="):
            return header.split(";", 1)[0].split("=", 1)[1]
    raise AssertionError(f"cookie {name} not set")


class UsersApiTestCase(unittest.TestCase):
    def setUp(self) -> None:
        engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        Base.metadata.create_all(engine)
        Session = sessionmaker(bind=engine, autocommit=False, autoflush=False)
        settings = Settings(
            JWT_SECRET="test-jwt-secret",
            ADMIN_SECRET_KEY=ADMIN_KEY,
            ADMIN_TOKEN_SECRET="test-admin-token-secret",
        )

        def override_get_db():
            db = Session()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        app.dependency_overrides[get_settings] = lambda: settings
        self.client = TestClient(app)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()

    def register(self, email: str = "a@x.com", password: str = "secret1") -> dict[str, str]:
        response = self.client.post(
            "/api/v1/auth/register", json={"email": email, "password": password}
        )
        self.assertEqual(response.status_code, 200)
        return {"Authorization": f"Bearer {response.json()['accessToken']}"}

    def register_admin(self, email: str = "boss@x.com") -> tuple[dict[str, str], str]:
        response = self.client.post(
            "/api/v1/auth/register-admin",
            json={"email": email, "password": "secret1", "secretKey": ADMIN_KEY},
        )
        self.assertEqual(response.status_code, 200)
        bearer = {"Authorization": f"Bearer {response.json()['accessToken']}"}
        return bearer, _cookie_value(response, "adminToken")


class TestProfile(UsersApiTestCase):
    def test_requires_bearer_token(self) -> None:
        response = self.client.get("/api/v1/users/profile")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.headers["www-authenticate"], "Bearer")
        self.assertEqual(response.json()["statusCode"], 401)

    def test_rejects_garbage_bearer_token(self) -> None:
        response = self.client.get(
            "/api/v1/users/profile", headers={"Authorization": "Bearer garbage"}
        )
        self.assertEqual(response.status_code, 401)

    def test_returns_public_fields(self) -> None:
        response = self.client.get("/api/v1/users/profile", headers=self.register())
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["email"], "a@x.com")
        self.assertEqual(set(body), {"id", "email", "name", "createdAt"})

    def test_update_name(self) -> None:
        headers = self.register()
        response = self.client.put(
            "/api/v1/users/profile", json={"name": "Alice"}, headers=headers
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["name"], "Alice")

    def test_update_to_taken_email_is_conflict(self) -> None:
        self.register("b@x.com")
        headers = self.register("a@x.com")
        response = self.client.put(
            "/api/v1/users/profile", json={"email": "b@x.com"}, headers=headers
        )
        self.assertEqual(response.status_code, 409)

    def test_empty_update_is_bad_request(self) -> None:
        response = self.client.put("/api/v1/users/profile", json={}, headers=self.register())
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"statusCode": 400, "message": "No fields to update."})

    def test_password_change_applies_to_next_login(self) -> None:
        headers = self.register()
        self.client.put("/api/v1/users/profile", json={"password": "newpass1"}, headers=headers)
        old = self.client.post(
            "/api/v1/auth/login", json={"email": "a@x.com", "password": "secret1"}
        )
        new = self.client.post(
            "/api/v1/auth/login", json={"email": "a@x.com", "password": "newpass1"}
        )
        self.assertEqual(old.status_code, 401)
        self.assertEqual(new.status_code, 200)


class TestHealth(UsersApiTestCase):
    def test_reports_database_connectivity(self) -> None:
        response = self.client.get("/api/v1/health/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.json(), {"status": "ok", "environment": "dev", "database": "connected"}
        )


class TestAdminUserList(UsersApiTestCase):
    def test_customer_is_forbidden(self) -> None:
        response = self.client.get("/api/v1/users", headers=self.register())
        self.assertEqual(response.status_code, 403)

    def test_admin_without_elevation_cookie_is_forbidden(self) -> None:
        bearer, _ = self.register_admin()
        response = self.client.get("/api/v1/users", headers=bearer)
        self.assertEqual(response.status_code, 403)

    def test_admin_with_elevation_cookie_lists_users(self) -> None:
        self.register("a@x.com")
        bearer, admin_token = self.register_admin()
        response = self.client.get(
            "/api/v1/users", headers={**bearer, "Cookie": f"adminToken={admin_token}"}
        )
        self.assertEqual(response.status_code, 200)
        users = response.json()["users"]
        self.assertEqual([u["email"] for u in users], ["a@x.com", "boss@x.com"])
        self.assertEqual([u["role"] for u in users], ["CUSTOMER", "ADMIN"])
        self.assertNotIn("passwordHash", users[0])


if __name__ == "__main__":
    unittest.main()
