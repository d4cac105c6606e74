"""Tests for identity token verification, user sync and /me."""

from unittest.mock import patch

import jwt
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from backend.database.models import Base, User
from backend.services.auth_service import decode_identity_token


@pytest.fixture
def test_session():
    """Create an isolated in-memory SQLite database."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestSession = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    return TestSession


@pytest.fixture
def client(test_session):
    # Patch SessionLocal at the source so get_db yields test sessions
    with patch("backend.database.db.SessionLocal", test_session):
        from backend.api.app import create_app
        app = create_app()
        yield TestClient(app)


class TestTokenVerification:
    def test_valid_token(self, make_token):
        claims = decode_identity_token(make_token("user_abc", email="a@example.com"))
        assert claims["sub"] == "user_abc"
        assert claims["email"] == "a@example.com"

    def test_expired_token(self, make_token):
        assert decode_identity_token(make_token("user_abc", expires_in=-60)) is None

    def test_wrong_signature(self):
        token = jwt.encode({"sub": "user_abc", "exp": 9999999999}, "not-the-secret", algorithm="HS256")
        assert decode_identity_token(token) is None

    def test_missing_subject(self):
        from backend.config.settings import get_settings
        settings = get_settings()
        token = jwt.encode({"exp": 9999999999}, settings.identity_jwt_secret, algorithm=settings.identity_jwt_algorithm)
        assert decode_identity_token(token) is None

    def test_garbage(self):
        assert decode_identity_token("not.a.jwt") is None


class TestUserSync:
    def test_sync_creates_user(self, client, test_session, make_token):
        token = make_token("user_abc", email="new@example.com", name="New Buyer")
        resp = client.post("/api/v1/auth/sync", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["email"] == "new@example.com"
        assert data["name"] == "New Buyer"
        assert data["role"] == "USER"

        db = test_session()
        assert db.query(User).filter(User.external_id == "user_abc").count() == 1
        db.close()

    def test_sync_is_idempotent_and_refreshes_profile(self, client, test_session, make_token):
        headers = {"Authorization": f"Bearer {make_token('user_abc', email='new@example.com')}"}
        first = client.post("/api/v1/auth/sync", headers=headers).json()["data"]

        headers = {"Authorization": f"Bearer {make_token('user_abc', email='moved@example.com', name='Renamed')}"}
        second = client.post("/api/v1/auth/sync", headers=headers).json()["data"]

        assert first["id"] == second["id"]
        assert second["email"] == "moved@example.com"
        assert second["name"] == "Renamed"
        db = test_session()
        assert db.query(User).count() == 1
        db.close()

    def test_sync_never_grants_role_from_claims(self, client, make_token):
        token = make_token("user_abc", email="sneaky@example.com", role="ADMIN")
        resp = client.post("/api/v1/auth/sync", headers={"Authorization": f"Bearer {token}"})
        assert resp.json()["data"]["role"] == "USER"

    def test_sync_requires_email_for_new_user(self, client, make_token):
        resp = client.post("/api/v1/auth/sync", headers={"Authorization": f"Bearer {make_token('user_abc')}"})
        assert resp.status_code == 422
        assert resp.json()["success"] is False

    def test_email_taken_by_other_identity(self, client, make_token):
        client.post("/api/v1/auth/sync", headers={
            "Authorization": f"Bearer {make_token('user_a', email='shared@example.com')}",
        })
        resp = client.post("/api/v1/auth/sync", headers={
            "Authorization": f"Bearer {make_token('user_b', email='shared@example.com')}",
        })
        assert resp.status_code == 422

    def test_email_change_to_taken_address(self, client, test_session, make_token):
        client.post("/api/v1/auth/sync", headers={
            "Authorization": f"Bearer {make_token('user_a', email='a@example.com')}",
        })
        client.post("/api/v1/auth/sync", headers={
            "Authorization": f"Bearer {make_token('user_b', email='b@example.com')}",
        })

        resp = client.post("/api/v1/auth/sync", headers={
            "Authorization": f"Bearer {make_token('user_b', email='a@example.com', name='Renamed')}",
        })
        assert resp.status_code == 422
        assert resp.json() == {"success": False, "error": "Email already registered to another account"}

        db = test_session()
        user_b = db.query(User).filter(User.external_id == "user_b").one()
        assert user_b.email == "b@example.com"
        assert user_b.name is None
        db.close()

    def test_sync_requires_token(self, client):
        resp = client.post("/api/v1/auth/sync")
        assert resp.status_code == 401


class TestMe:
    def test_me(self, client, make_token):
        token = make_token("user_abc", email="me@example.com")
        headers = {"Authorization": f"Bearer {token}"}
        client.post("/api/v1/auth/sync", headers=headers)

        resp = client.get("/api/v1/auth/me", headers=headers)
        assert resp.status_code == 200
        assert resp.json()["data"]["email"] == "me@example.com"

    def test_me_unsynced_user(self, client, make_token):
        resp = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {make_token('ghost')}"})
        assert resp.status_code == 401
        assert resp.json() == {"success": False, "error": "User not found"}

    def test_me_expired_token(self, client, make_token):
        resp = client.get("/api/v1/auth/me", headers={
            "Authorization": f"Bearer {make_token('user_abc', expires_in=-60)}",
        })
        assert resp.status_code == 401
        assert resp.json()["error"] == "Invalid or expired token"

    def test_me_no_header(self, client):
        resp = client.get("/api/v1/auth/me")
        assert resp.status_code == 401
