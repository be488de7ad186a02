# organic_store/schemas/user.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, EmailStr, Field, field_validator

from organic_store.schemas.common import ApiModel

Role = Literal["user", "admin"]


def _normalize_name(v: str | None) -> str | None:
    if v is None:
        return v
    v = v.strip()
    if not v:
        raise ValueError("name cannot be empty")
    return v


class RegisterRequest(ApiModel):
    """
    Payload for POST /auth/register.

    Validation rules:
      - email must be a valid EmailStr (stored lower-cased)
      - name cannot be empty or whitespace, max 50 chars
      - password at least 6 characters
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=50)
    email: EmailStr
    password: str = Field(min_length=6)

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str) -> str:
        return _normalize_name(v)

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.strip().lower()


class LoginRequest(ApiModel):
    email: EmailStr
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.strip().lower()


class ProfileUpdate(ApiModel):
    """
    Partial profile update. Only name and email are editable.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=50)
    email: EmailStr | None = None

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str | None) -> str | None:
        return _normalize_name(v)

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str | None) -> str | None:
        return v.strip().lower() if v else v


class UserRead(ApiModel):
    """Response schema returned to clients (never includes the hash)."""

    id: uuid.UUID
    name: str
    email: str
    role: Role
    created_at: datetime


class UserProfileRead(UserRead):
    """GET /auth/me: user plus the product ids saved in the wishlist."""

    wishlist: list[uuid.UUID] = []


class AuthResponse(ApiModel):
    user: UserRead
    token: str
