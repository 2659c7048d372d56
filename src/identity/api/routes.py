"""FastAPI endpoints for the Identity domain."""

from fastapi import APIRouter, Depends, Request, Response
from protean.utils.globals import current_domain

from identity.api.schemas import (
    AccessTokenResponse,
    AuthResponse,
    LoginRequest,
    RegisterUserRequest,
    StatusResponse,
    UpdateProfileRequest,
    UserResponse,
)
from identity.user.authentication import authenticate, user_for_refresh
from identity.user.profile import DeleteUser, UpdateProfile
from identity.user.registration import RegisterUser
from identity.user.user import User
from shared import config
from shared.auth import (
    CurrentUser,
    clear_refresh_cookie,
    create_access_token,
    create_refresh_token,
    decode_refresh_token,
    require_admin,
    require_user,
    set_refresh_cookie,
)
from shared.errors import UnauthenticatedError

router = APIRouter(prefix="/users", tags=["users"])


def _user_response(user) -> UserResponse:
    return UserResponse(
        user_id=str(user.id),
        name=user.name,
        email=user.email_address,
        is_admin=bool(user.is_admin),
        phone=user.phone,
        created_at=user.created_at.isoformat() if user.created_at else None,
    )


def _issue_tokens(user, response: Response) -> AuthResponse:
    set_refresh_cookie(response, create_refresh_token(str(user.id)))
    return AuthResponse(
        **_user_response(user).model_dump(),
        access_token=create_access_token(str(user.id), bool(user.is_admin), name=user.name),
    )


# --- Sessions ---


@router.post("", status_code=201, response_model=AuthResponse)
async def register_user(body: RegisterUserRequest, response: Response) -> AuthResponse:
    command = RegisterUser(
        name=body.name,
        email=body.email,
        password=body.password,
        phone=body.phone,
    )
    user_id = current_domain.process(command, asynchronous=False)
    user = current_domain.repository_for(User).get(user_id)
    return _issue_tokens(user, response)


@router.post("/login", response_model=AuthResponse)
async def login_user(body: LoginRequest, response: Response) -> AuthResponse:
    return _issue_tokens(authenticate(body.email, body.password), response)


@router.post("/refresh", response_model=AccessTokenResponse)
async def refresh_access_token(request: Request, response: Response) -> AccessTokenResponse:
    token = request.cookies.get(config.REFRESH_COOKIE_NAME)
    if not token:
        raise UnauthenticatedError("No refresh token provided")

    user = user_for_refresh(decode_refresh_token(token))
    set_refresh_cookie(response, create_refresh_token(str(user.id)))
    return AccessTokenResponse(access_token=create_access_token(str(user.id), bool(user.is_admin), name=user.name))


@router.post("/logout", response_model=StatusResponse)
async def logout_user(response: Response) -> StatusResponse:
    clear_refresh_cookie(response)
    return StatusResponse()


# --- Profile ---


@router.get("/profile", response_model=UserResponse)
async def get_profile(user: CurrentUser = Depends(require_user)) -> UserResponse:
    return _user_response(current_domain.repository_for(User).get(user.id))


@router.put("/profile", response_model=UserResponse)
async def update_profile(body: UpdateProfileRequest, user: CurrentUser = Depends(require_user)) -> UserResponse:
    command = UpdateProfile(
        user_id=user.id,
        name=body.name,
        email=body.email,
        password=body.password,
        phone=body.phone,
    )
    current_domain.process(command, asynchronous=False)
    return _user_response(current_domain.repository_for(User).get(user.id))


# --- Administration ---


@router.get("", response_model=list[UserResponse])
async def list_users(user: CurrentUser = Depends(require_admin)) -> list[UserResponse]:  # noqa: ARG001
    users = current_domain.repository_for(User)._dao.query.order_by("-created_at").all().items
    return [_user_response(u) for u in users]


@router.delete("/{user_id}", response_model=StatusResponse)
async def delete_user(user_id: str, user: CurrentUser = Depends(require_admin)) -> StatusResponse:  # noqa: ARG001
    current_domain.process(DeleteUser(user_id=user_id), asynchronous=False)
    return StatusResponse()
