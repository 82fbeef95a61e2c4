"""
tests/test_auth.py — signup, login, token refresh and bearer protection.

Uses a client that only overrides the database, so the real JWT dependency runs.
"""

from __future__ import annotations

from datetime import timedelta
import uuid

import pytest
from fastapi.testclient import TestClient

from inkwell.auth.service import create_token, hash_password, verify_password
from inkwell.core.database import get_db


@pytest.fixture
def auth_client(session_factory):
    from main import app

    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def _signup(client, email="Writer@Example.com", password="s3cret-pass"):
    return client.post("/auth/signup", json={"email": email, "password": password, "name": "Writer"})


def _bearer(token):
    return {"Authorization": f"Bearer {token}"}


def test_password_hashing_roundtrip() -> None:
    hashed = hash_password("hunter22")
    assert hashed != "hunter22"
    assert verify_password("hunter22", hashed)
    assert not verify_password("hunter23", hashed)


# ---------------------------------------------------------------------------
# Signup & login
# ---------------------------------------------------------------------------

def test_signup_returns_tokens_and_normalized_email(auth_client) -> None:
    resp = _signup(auth_client)

    assert resp.status_code == 201
    body = resp.json()
    assert body["access_token"]
    assert body["user"]["email"] == "writer@example.com"
    assert "refresh_token" in resp.headers.get("set-cookie", "")


def test_duplicate_signup_is_rejected(auth_client) -> None:
    _signup(auth_client)
    resp = _signup(auth_client, email="writer@example.com")
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Email already exists"


def test_login(auth_client) -> None:
    _signup(auth_client)
    resp = auth_client.post("/auth/login", json={"email": "WRITER@example.com", "password": "s3cret-pass"})
    assert resp.status_code == 200
    assert resp.json()["user"]["name"] == "Writer"


def test_login_with_wrong_password(auth_client) -> None:
    _signup(auth_client)
    resp = auth_client.post("/auth/login", json={"email": "writer@example.com", "password": "nope"})
    assert resp.status_code == 401


# ---------------------------------------------------------------------------
# Bearer-protected routes
# ---------------------------------------------------------------------------

def test_me_with_access_token(auth_client) -> None:
    token = _signup(auth_client).json()["access_token"]
    resp = auth_client.get("/auth/me", headers=_bearer(token))
    assert resp.status_code == 200
    assert resp.json()["email"] == "writer@example.com"


def test_journals_require_a_token(auth_client) -> None:
    assert auth_client.get("/journals").status_code in (401, 403)


def test_invalid_token_is_401(auth_client) -> None:
    assert auth_client.get("/journals", headers=_bearer("not-a-jwt")).status_code == 401


def test_expired_token_is_401(auth_client) -> None:
    token = create_token(uuid.uuid4(), expires_delta=timedelta(minutes=-5))
    assert auth_client.get("/journals", headers=_bearer(token)).status_code == 401


def test_refresh_token_cannot_be_used_as_access_token(auth_client) -> None:
    token = create_token(uuid.uuid4(), token_type="refresh")
    assert auth_client.get("/journals", headers=_bearer(token)).status_code == 401


def test_token_scopes_journals_to_its_user(auth_client) -> None:
    token = _signup(auth_client).json()["access_token"]
    resp = auth_client.get("/journals", headers=_bearer(token))
    assert resp.status_code == 200
    assert resp.json() == {"entries": []}


# ---------------------------------------------------------------------------
# Refresh
# ---------------------------------------------------------------------------

def test_refresh_issues_new_access_token(auth_client) -> None:
    user_id = _signup(auth_client).json()["user"]["id"]
    refresh = create_token(uuid.UUID(user_id), token_type="refresh")

    resp = auth_client.post("/auth/refresh", headers={"Cookie": f"refresh_token={refresh}"})

    assert resp.status_code == 200
    assert resp.json()["user"]["id"] == user_id


def test_refresh_without_cookie(auth_client) -> None:
    assert auth_client.post("/auth/refresh").status_code == 401


def test_refresh_rejects_access_tokens(auth_client) -> None:
    access = _signup(auth_client).json()["access_token"]
    resp = auth_client.post("/auth/refresh", headers={"Cookie": f"refresh_token={access}"})
    assert resp.status_code == 401
