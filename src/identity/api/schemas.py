"""Pydantic request/response schemas for the Identity API."""

from __future__ import annotations

from pydantic import BaseModel, Field

# --- Request Schemas ---


class RegisterUserRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Dilnoza Karimova",
                    "email": "dilnoza@example.com",
                    "password": "s3cret-pass",
                }
            ]
        }
    }

    name: str = Field(..., max_length=50)
    email: str = Field(..., max_length=254)
    password: str = Field(..., max_length=128)
    phone: str | None = Field(None, max_length=30)


class LoginRequest(BaseModel):
    email: str = Field(..., max_length=254)
    password: str = Field(..., max_length=128)


class UpdateProfileRequest(BaseModel):
    name: str | None = Field(None, max_length=50)
    email: str | None = Field(None, max_length=254)
    password: str | None = Field(None, max_length=128)
    phone: str | None = Field(None, max_length=30)


# --- Response Schemas ---


class UserResponse(BaseModel):
    user_id: str
    name: str
    email: str
    is_admin: bool
    phone: str | None = None
    created_at: str | None = None


class AuthResponse(UserResponse):
    access_token: str
    token_type: str = "bearer"


class AccessTokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class StatusResponse(BaseModel):
    status: str = "ok"
