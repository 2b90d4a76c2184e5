"""
Unit tests for the JWT auth dependency.

Exercises _decode_token and get_current_user directly, then once through
the price history route with a real signed token.
"""

import uuid
from datetime import UTC, datetime, timedelta

import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials
from fastapi.testclient import TestClient
from jose import jwt

from pricelens.api.deps import get_catalog_reader, get_event_log_reader
from pricelens.config import Settings, get_settings
from pricelens.main import create_app
from pricelens.middleware.auth_middleware import _decode_token, get_current_user

TEST_SECRET = "test-secret-key-for-middleware-tests-64-chars-padding-here-ok"


def _test_settings() -> Settings:
    return Settings(secret_key=TEST_SECRET, jwt_algorithm="HS256")


def _make_token(
    token_type: str = "access",
    user_id: str | None = None,
    secret: str = TEST_SECRET,
    expired: bool = False,
    include_sub: bool = True,
) -> str:
    now = datetime.now(UTC)
    payload = {
        "email": "analyst@example.com",
        "type": token_type,
        "iat": now,
        "exp": now - timedelta(hours=1) if expired else now + timedelta(hours=1),
    }
    if include_sub:
        payload["sub"] = user_id or str(uuid.uuid4())
    return jwt.encode(payload, secret, algorithm="HS256")


def _creds(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


# ─── _decode_token Tests ────────────────────────────────────


class TestDecodeToken:

    def test_decode_valid_token(self):
        payload = _decode_token(_make_token(), _test_settings())
        assert "sub" in payload
        assert payload["type"] == "access"

    def test_decode_expired_token(self):
        with pytest.raises(HTTPException) as exc_info:
            _decode_token(_make_token(expired=True), _test_settings())

        assert exc_info.value.status_code == 401
        assert "Invalid or expired" in exc_info.value.detail

    def test_decode_wrong_secret(self):
        token = _make_token(secret="wrong-secret-key-padding-here-for-tests-1234")
        with pytest.raises(HTTPException) as exc_info:
            _decode_token(token, _test_settings())
        assert exc_info.value.status_code == 401

    def test_decode_malformed_token(self):
        with pytest.raises(HTTPException) as exc_info:
            _decode_token("not.a.jwt", _test_settings())
        assert exc_info.value.status_code == 401

    def test_decode_token_missing_subject(self):
        with pytest.raises(HTTPException) as exc_info:
            _decode_token(_make_token(include_sub=False), _test_settings())

        assert exc_info.value.status_code == 401
        assert "missing subject" in exc_info.value.detail


# ─── get_current_user Tests ─────────────────────────────────


class TestGetCurrentUser:

    async def test_valid_access_token(self):
        user_id = str(uuid.uuid4())
        payload = await get_current_user(
            credentials=_creds(_make_token(user_id=user_id)),
            settings=_test_settings(),
        )
        assert payload["sub"] == user_id

    async def test_rejects_refresh_token(self):
        with pytest.raises(HTTPException) as exc_info:
            await get_current_user(
                credentials=_creds(_make_token(token_type="refresh")),
                settings=_test_settings(),
            )

        assert exc_info.value.status_code == 401
        assert "access token required" in exc_info.value.detail

    async def test_rejects_expired_token(self):
        with pytest.raises(HTTPException) as exc_info:
            await get_current_user(
                credentials=_creds(_make_token(expired=True)),
                settings=_test_settings(),
            )
        assert exc_info.value.status_code == 401


# ─── Through the HTTP layer ─────────────────────────────────


class TestBearerOnRoute:

    @pytest.fixture
    def client(self, catalog, event_log):
        app = create_app()
        app.dependency_overrides[get_settings] = _test_settings
        app.dependency_overrides[get_catalog_reader] = lambda: catalog
        app.dependency_overrides[get_event_log_reader] = lambda: event_log
        yield TestClient(app)
        app.dependency_overrides.clear()

    def test_valid_bearer_token_accepted(self, client):
        resp = client.get(
            "/api/v1/price-history",
            params={"model": "Alpha"},
            headers={"Authorization": f"Bearer {_make_token()}"},
        )
        assert resp.status_code == 200
        assert resp.json()["data"]["productId"] == "42"

    def test_refresh_token_rejected(self, client):
        resp = client.get(
            "/api/v1/price-history",
            params={"model": "Alpha"},
            headers={"Authorization": f"Bearer {_make_token(token_type='refresh')}"},
        )
        assert resp.status_code == 401
        assert resp.headers["www-authenticate"] == "Bearer"

    def test_public_route_ignores_missing_token(self, client):
        resp = client.get("/api/v1/price-history/simple", params={"model": "Alpha"})
        assert resp.status_code == 200
