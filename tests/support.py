"""Shared helpers: in-memory SQLite database and an HTTPS TestClient."""

import unittest
from collections.abc import Generator

from fastapi.testclient import TestClient
from sqlalchemy import Engine
from sqlalchemy.orm import Session, sessionmaker

from accounts.core.config import get_settings
from accounts.core.database import create_db_engine, get_db
from accounts.core.security import TokenService
from accounts.main import app
from accounts.models import Base, User

PASSWORD = "Password123"


def make_session_factory() -> tuple[Engine, sessionmaker]:
    """Fresh in-memory database with the users table created."""
    engine = create_db_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    return engine, sessionmaker(autocommit=False, autoflush=False, bind=engine)


def token_service() -> TokenService:
    return TokenService.from_settings(get_settings())


class ApiTestCase(unittest.TestCase):
    """Base case: app wired to a private database; cookies kept over https."""

    def setUp(self) -> None:
        self.engine, self.session_factory = make_session_factory()

        def override_get_db() -> Generator[Session, None, None]:
            db = self.session_factory()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        self.client = TestClient(app, base_url="https://testserver")

    def tearDown(self) -> None:
        self.client.close()
        app.dependency_overrides.clear()
        self.engine.dispose()

    def sign_up(self, name: str, email: str, password: str = PASSWORD, **extra):
        return self.client.post(
            "/api/v1/auth/sign-up",
            json={"name": name, "email": email, "password": password, **extra},
        )

    def sign_up_token(self, name: str, email: str, **extra) -> tuple[int, str]:
        """Sign up and return (user id, access token)."""
        res = self.sign_up(name, email, **extra)
        self.assertEqual(res.status_code, 201, res.text)
        data = res.json()["data"]
        return data["user"]["id"], data["accessToken"]

    def load_user(self, user_id: int) -> User | None:
        with self.session_factory() as db:
            return db.get(User, user_id)

    def set_role(self, user_id: int, role: str) -> None:
        with self.session_factory() as db:
            db.get(User, user_id).role = role
            db.commit()

    @staticmethod
    def bearer(token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token}"}
