"""Tests for the bearer/refresh token codec and the auth dependencies."""

from datetime import UTC, datetime, timedelta

import pytest
from fastapi import Depends, FastAPI, Response
from fastapi.testclient import TestClient
from jose import jwt
from shared import config
from shared.auth import (
    CurrentUser,
    create_access_token,
    create_refresh_token,
    decode_access_token,
    decode_refresh_token,
    require_admin,
    require_user,
    set_refresh_cookie,
)
from shared.errors import UnauthenticatedError
from shared.http import register_exception_handlers


class TestAccessToken:
    def test_round_trip_carries_id_admin_flag_and_name(self):
        token = create_access_token("user-1", True, name="Aziz")
        user = decode_access_token(token)
        assert user == CurrentUser(id="user-1", is_admin=True, name="Aziz")

    def test_expired_token_is_rejected(self):
        claims = {"sub": "user-1", "type": "access", "exp": datetime.now(UTC) - timedelta(minutes=1)}
        token = jwt.encode(claims, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)
        with pytest.raises(UnauthenticatedError):
            decode_access_token(token)

    def test_refresh_token_is_not_an_access_token(self):
        # Signed with the refresh secret, so the signature check fails
        with pytest.raises(UnauthenticatedError):
            decode_access_token(create_refresh_token("user-1"))

    def test_token_with_wrong_type_is_rejected(self):
        claims = {"sub": "user-1", "type": "refresh", "exp": datetime.now(UTC) + timedelta(minutes=5)}
        token = jwt.encode(claims, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)
        with pytest.raises(UnauthenticatedError):
            decode_access_token(token)

    def test_garbage_is_rejected(self):
        with pytest.raises(UnauthenticatedError):
            decode_access_token("not-a-jwt")


class TestRefreshToken:
    def test_round_trip(self):
        assert decode_refresh_token(create_refresh_token("user-9")) == "user-9"

    def test_access_token_is_not_a_refresh_token(self):
        with pytest.raises(UnauthenticatedError):
            decode_refresh_token(create_access_token("user-9", False))


@pytest.fixture()
def client():
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/me")
    async def me(user: CurrentUser = Depends(require_user)):
        return {"id": user.id}

    @app.get("/admin")
    async def admin(user: CurrentUser = Depends(require_admin)):
        return {"id": user.id}

    @app.get("/cookie")
    async def cookie(response: Response):
        set_refresh_cookie(response, "refresh-value")
        return {}

    return TestClient(app)


def _bearer(user_id="user-1", is_admin=False):
    return {"Authorization": f"Bearer {create_access_token(user_id, is_admin)}"}


class TestDependencies:
    def test_require_user_accepts_bearer_token(self, client):
        response = client.get("/me", headers=_bearer("user-7"))
        assert response.status_code == 200
        assert response.json() == {"id": "user-7"}

    def test_require_user_without_token_is_401(self, client):
        response = client.get("/me")
        assert response.status_code == 401
        assert response.json()["error"] == "unauthenticated"

    def test_require_user_with_bad_token_is_401(self, client):
        response = client.get("/me", headers={"Authorization": "Bearer nope"})
        assert response.status_code == 401

    def test_require_admin_rejects_regular_user(self, client):
        response = client.get("/admin", headers=_bearer(is_admin=False))
        assert response.status_code == 403

    def test_require_admin_accepts_admin(self, client):
        response = client.get("/admin", headers=_bearer("root", is_admin=True))
        assert response.status_code == 200


class TestRefreshCookie:
    def test_cookie_is_http_only_strict_and_lasts_seven_days(self, client):
        response = client.get("/cookie")
        header = response.headers["set-cookie"]
        assert header.startswith(f"{config.REFRESH_COOKIE_NAME}=refresh-value")
        assert "HttpOnly" in header
        assert "SameSite=strict" in header
        assert f"Max-Age={7 * 24 * 60 * 60}" in header
