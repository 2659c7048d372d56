"""Auth gate: bearer/refresh token codec and FastAPI dependencies.

The access token is short-lived and carries the user id and admin flag, so any
bounded context can answer "who is this and are they an admin" without a round
trip to Identity. The refresh token travels only in an HTTP-only cookie.
"""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from fastapi import Request, Response
from jose import JWTError, jwt

from shared import config
from shared.errors import ForbiddenError, UnauthenticatedError

ACCESS = "access"
REFRESH = "refresh"


@dataclass(frozen=True)
class CurrentUser:
    id: str
    is_admin: bool = False
    name: str | None = None


def create_access_token(user_id: str, is_admin: bool, name: str | None = None) -> str:
    expire = datetime.now(UTC) + timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES)
    claims = {"sub": str(user_id), "admin": bool(is_admin), "name": name, "type": ACCESS, "exp": expire}
    return jwt.encode(claims, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)


def create_refresh_token(user_id: str) -> str:
    expire = datetime.now(UTC) + timedelta(days=config.REFRESH_TOKEN_EXPIRE_DAYS)
    claims = {"sub": str(user_id), "type": REFRESH, "exp": expire}
    return jwt.encode(claims, config.JWT_REFRESH_SECRET, algorithm=config.JWT_ALGORITHM)


def decode_access_token(token: str) -> CurrentUser:
    """Return the user the token was issued to, or raise ``UnauthenticatedError``."""
    try:
        payload = jwt.decode(token, config.JWT_SECRET, algorithms=[config.JWT_ALGORITHM])
    except JWTError as exc:
        raise UnauthenticatedError("Invalid or expired access token") from exc

    if payload.get("type") != ACCESS or not payload.get("sub"):
        raise UnauthenticatedError("Invalid access token")
    return CurrentUser(
        id=payload["sub"],
        is_admin=bool(payload.get("admin", False)),
        name=payload.get("name"),
    )


def decode_refresh_token(token: str) -> str:
    """Return the user id carried by a refresh token."""
    try:
        payload = jwt.decode(token, config.JWT_REFRESH_SECRET, algorithms=[config.JWT_ALGORITHM])
    except JWTError as exc:
        raise UnauthenticatedError("Invalid refresh token") from exc

    if payload.get("type") != REFRESH or not payload.get("sub"):
        raise UnauthenticatedError("Invalid refresh token")
    return payload["sub"]


def set_refresh_cookie(response: Response, refresh_token: str) -> None:
    response.set_cookie(
        key=config.REFRESH_COOKIE_NAME,
        value=refresh_token,
        max_age=config.REFRESH_TOKEN_EXPIRE_DAYS * 24 * 60 * 60,
        httponly=True,
        secure=config.IS_PRODUCTION,
        samesite="strict",
    )


def clear_refresh_cookie(response: Response) -> None:
    response.delete_cookie(
        key=config.REFRESH_COOKIE_NAME,
        httponly=True,
        secure=config.IS_PRODUCTION,
        samesite="strict",
    )


# ---------------------------------------------------------------------------
# FastAPI dependencies
# ---------------------------------------------------------------------------
def current_user(request: Request) -> CurrentUser | None:
    """Resolve the bearer token, if any. Anonymous requests yield ``None``."""
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None
    return decode_access_token(token.strip())


def require_user(request: Request) -> CurrentUser:
    user = current_user(request)
    if user is None:
        raise UnauthenticatedError("Not authorized, no token")
    return user


def require_admin(request: Request) -> CurrentUser:
    user = require_user(request)
    if not user.is_admin:
        raise ForbiddenError("Not authorized as an admin")
    return user
