"""Request/response schemas for auth endpoints."""

from typing import Annotated, Literal

from pydantic import BaseModel, BeforeValidator, ConfigDict, EmailStr, Field, StringConstraints
from pydantic.alias_generators import to_camel

from accounts.core.security import (
    EMAIL_MAX_LEN,
    NAME_MAX_LEN,
    NAME_MIN_LEN,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
)


def normalize_email(value: object) -> object:
    """Trim and lowercase an email before format validation."""
    if not isinstance(value, str):
        return value
    normalized = value.strip().lower()
    if len(normalized) > EMAIL_MAX_LEN:
        raise ValueError(f"Email must be at most {EMAIL_MAX_LEN} characters")
    return normalized


NormalizedEmail = Annotated[EmailStr, BeforeValidator(normalize_email)]

FullName = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=NAME_MIN_LEN, max_length=NAME_MAX_LEN),
]


class CamelModel(BaseModel):
    """Base schema serialized with camelCase keys (firstName, accessToken, ...)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SignUpRequest(BaseModel):
    """Registration payload; name is split into first and last name on create."""

    name: FullName
    email: NormalizedEmail
    password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)
    role: Literal["user", "admin"] | None = None


class SignInRequest(BaseModel):
    """Credentials for sign-in."""

    email: NormalizedEmail
    password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)


class AuthUser(CamelModel):
    """Public user fields returned after sign-up or sign-in."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str
    email: str
    role: str


class AuthData(CamelModel):
    user: AuthUser
    access_token: str
    refresh_token: str


class AuthResponse(BaseModel):
    message: str
    data: AuthData


class RefreshResponse(CamelModel):
    message: str
    access_token: str


class MessageResponse(BaseModel):
    message: str


class CurrentUser(CamelModel):
    """Identity projection attached to a request after authentication."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    first_name: str
    last_name: str
    role: str
    is_active: bool
