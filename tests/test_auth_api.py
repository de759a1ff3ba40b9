"""HTTP tests for /api/v1/auth using FastAPI's TestClient and an in-memory SQLite store."""

import unittest
from datetime import timedelta
from unittest.mock import MagicMock, patch

from fastapi.testclient import TestClient

from app.api.v1.auth import get_auth_service
from app.core.database import get_db
from app.core.tokens import TokenAuthority, get_token_authority
from app.main import app
from app.models import Account, Role
from app.repositories.accounts import SqlAlchemyAccountStore
from app.services.auth_service import AuthService
from test_account_store import make_session_factory

PREFIX = "/api/v1/auth"
ACCESS_SECRET = "access-secret-for-api-tests-0123456789"
REFRESH_SECRET = "refresh-secret-for-api-tests-0123456789"

ALICE = {"username": "alice", "email": "a@x.com", "password": "pw123456"}


class _ApiTestCase(unittest.TestCase):
    """TestClient wired to a fresh database and fixed token secrets."""

    def setUp(self) -> None:
        patcher = patch("app.core.security.settings.BCRYPT_ROUNDS", 4)
        patcher.start()
        self.addCleanup(patcher.stop)

        self.session = make_session_factory()()
        self.addCleanup(self.session.close)
        self.tokens = TokenAuthority(
            access_secret=ACCESS_SECRET,
            access_expires_in=timedelta(minutes=15),
            refresh_secret=REFRESH_SECRET,
            refresh_expires_in=timedelta(days=7),
        )
        app.dependency_overrides[get_auth_service] = lambda: AuthService(
            SqlAlchemyAccountStore(self.session), self.tokens
        )
        app.dependency_overrides[get_token_authority] = lambda: self.tokens
        self.addCleanup(app.dependency_overrides.clear)
        self.client = TestClient(app)

    def signup(self, **overrides: str):
        return self.client.post(f"{PREFIX}/signup", json={**ALICE, **overrides})


class TestSignupEndpoint(_ApiTestCase):
    def test_created(self) -> None:
        response = self.signup()
        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertEqual(set(body), {"accessToken", "refreshToken"})
        claims = self.tokens.verify_access(body["accessToken"])
        self.assertEqual(claims.username, "alice")
        self.assertEqual(claims.email, "a@x.com")
        self.assertFalse(claims.is_admin)

    def test_duplicate_email_and_username_look_the_same(self) -> None:
        self.assertEqual(self.signup().status_code, 201)
        by_email = self.signup(username="alice2")
        by_username = self.signup(email="other@x.com")
        for response in (by_email, by_username):
            self.assertEqual(response.status_code, 403)
            self.assertEqual(response.json(), {"detail": "Username or email already exists"})

    def test_validation(self) -> None:
        for overrides in ({"email": "not-an-email"}, {"password": "short"}, {"username": ""}):
            with self.subTest(overrides=overrides):
                self.assertEqual(self.signup(**overrides).status_code, 422)


class TestLoginEndpoint(_ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.signup()

    def test_ok(self) -> None:
        response = self.client.post(
            f"{PREFIX}/login", json={"email": "a@x.com", "password": "pw123456"}
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(
            self.tokens.verify_access(body["accessToken"]),
            self.tokens.verify_refresh(body["refreshToken"]),
        )

    def test_unknown_email_and_wrong_password_look_the_same(self) -> None:
        unknown = self.client.post(
            f"{PREFIX}/login", json={"email": "nobody@x.com", "password": "pw123456"}
        )
        wrong = self.client.post(
            f"{PREFIX}/login", json={"email": "a@x.com", "password": "wrong-password"}
        )
        self.assertEqual(unknown.status_code, 403)
        self.assertEqual(wrong.status_code, 403)
        self.assertEqual(unknown.json(), wrong.json())
        self.assertEqual(unknown.json(), {"detail": "Invalid credentials"})

    def test_admin_role_reflected_in_claims(self) -> None:
        account = self.session.query(Account).filter(Account.email == "a@x.com").one()
        account.role = Role.ADMIN
        self.session.commit()
        response = self.client.post(
            f"{PREFIX}/login", json={"email": "a@x.com", "password": "pw123456"}
        )
        self.assertTrue(self.tokens.verify_access(response.json()["accessToken"]).is_admin)


class TestRefreshEndpoint(_ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.pair = self.signup().json()

    def test_missing_token(self) -> None:
        for payload in ({}, {"refreshToken": ""}, None):
            with self.subTest(payload=payload):
                response = self.client.post(f"{PREFIX}/refresh", json=payload)
                self.assertEqual(response.status_code, 403)
                self.assertEqual(
                    response.json(), {"detail": "No refresh token provided, please login again"}
                )

    def test_body_token(self) -> None:
        response = self.client.post(
            f"{PREFIX}/refresh", json={"refreshToken": self.pair["refreshToken"]}
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(set(response.json()), {"accessToken"})
        claims = self.tokens.verify_access(response.json()["accessToken"])
        self.assertEqual(claims.email, "a@x.com")
        self.assertFalse(claims.is_admin)

    def test_cookie_token(self) -> None:
        self.client.cookies.set("refresh_token", self.pair["refreshToken"])
        response = self.client.post(f"{PREFIX}/refresh")
        self.assertEqual(response.status_code, 200)

    def test_access_token_rejected(self) -> None:
        response = self.client.post(
            f"{PREFIX}/refresh", json={"refreshToken": self.pair["accessToken"]}
        )
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json(), {"detail": "Invalid refresh token"})

    def test_garbage_rejected(self) -> None:
        response = self.client.post(f"{PREFIX}/refresh", json={"refreshToken": "garbage"})
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json(), {"detail": "Invalid refresh token"})


class TestMeEndpoint(_ApiTestCase):
    def test_requires_bearer(self) -> None:
        response = self.client.get(f"{PREFIX}/me")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.headers["www-authenticate"], "Bearer")

    def test_rejects_refresh_token(self) -> None:
        pair = self.signup().json()
        response = self.client.get(
            f"{PREFIX}/me", headers={"Authorization": f"Bearer {pair['refreshToken']}"}
        )
        self.assertEqual(response.status_code, 401)

    def test_returns_claims(self) -> None:
        pair = self.signup().json()
        response = self.client.get(
            f"{PREFIX}/me", headers={"Authorization": f"Bearer {pair['accessToken']}"}
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["username"], "alice")
        self.assertEqual(body["email"], "a@x.com")
        self.assertIs(body["isAdmin"], False)
        self.assertEqual(set(body), {"id", "email", "username", "isAdmin"})


class TestSignupRefreshScenario(_ApiTestCase):
    """signup(alice) -> refresh -> access token for a@x.com, not admin."""

    def test_end_to_end(self) -> None:
        pair = self.signup().json()
        access = self.client.post(
            f"{PREFIX}/refresh", json={"refreshToken": pair["refreshToken"]}
        ).json()["accessToken"]
        claims = self.tokens.verify_access(access)
        self.assertEqual(claims.email, "a@x.com")
        self.assertFalse(claims.is_admin)


class TestHealthEndpoint(unittest.TestCase):
    def test_reports_database(self) -> None:
        db = MagicMock()
        app.dependency_overrides[get_db] = lambda: db
        self.addCleanup(app.dependency_overrides.clear)
        response = TestClient(app).get("/api/v1/health/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "ok")
        self.assertEqual(response.json()["database"], "connected")

        db.execute.side_effect = RuntimeError("down")
        response = TestClient(app).get("/api/v1/health/")
        self.assertEqual(response.json()["database"], "disconnected")


if __name__ == "__main__":
    unittest.main()
