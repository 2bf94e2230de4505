"""Request/response schemas for user profile endpoints."""

from datetime import datetime
from typing import Annotated, Literal

from pydantic import ConfigDict, Field, StringConstraints

from accounts.core.security import NAME_MAX_LEN, PASSWORD_MIN_LEN
from accounts.schemas.auth import CamelModel, NormalizedEmail

NamePart = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=NAME_MAX_LEN)]


class UserUpdate(CamelModel):
    """Partial profile update; every field is optional."""

    first_name: NamePart | None = None
    last_name: NamePart | None = None
    email: NormalizedEmail | None = None
    password: str | None = Field(default=None, min_length=PASSWORD_MIN_LEN)
    role: Literal["user", "admin", "moderator"] | None = None


class UserRead(CamelModel):
    """User record as returned to clients (no password)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str
    email: str
    role: str
    is_active: bool
    created_at: datetime
    updated_at: datetime


class UserResponse(CamelModel):
    message: str
    data: UserRead


class UsersListResponse(CamelModel):
    message: str
    data: list[UserRead]


class DeletedUser(CamelModel):
    id: int


class UserDeletedResponse(CamelModel):
    message: str
    data: DeletedUser
