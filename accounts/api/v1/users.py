"""User profile routes: list, read, update and delete, behind identity."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from accounts.api.v1.auth import get_current_user
from accounts.core.config import get_settings
from accounts.core.database import get_db
from accounts.schemas.auth import CurrentUser
from accounts.schemas.user import (
    DeletedUser,
    UserDeletedResponse,
    UserRead,
    UserResponse,
    UsersListResponse,
    UserUpdate,
)
from accounts.services import users as users_service
from accounts.services.access import ensure_can_change_role, ensure_can_modify

router = APIRouter()

Actor = Annotated[CurrentUser, Depends(get_current_user)]
DbSession = Annotated[Session, Depends(get_db)]


@router.get("", response_model=UsersListResponse)
def list_users(_actor: Actor, db: DbSession) -> UsersListResponse:
    users = users_service.list_users(db)
    return UsersListResponse(
        message="Users retrieved successfully",
        data=[UserRead.model_validate(u) for u in users],
    )


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: int, _actor: Actor, db: DbSession) -> UserResponse:
    user = users_service.get_user_by_id(db, user_id)
    return UserResponse(message="User retrieved successfully", data=UserRead.model_validate(user))


@router.put("/{user_id}", response_model=UserResponse)
def update_user(user_id: int, body: UserUpdate, actor: Actor, db: DbSession) -> UserResponse:
    """
    Update a profile. Callers may edit their own record; admins may edit any
    record. Changing role always requires admin.
    """
    updates = body.model_dump(exclude_none=True)
    ensure_can_modify(actor, user_id, "update")
    ensure_can_change_role(actor, updates)

    user = users_service.update_user(db, user_id, updates, rounds=get_settings().BCRYPT_ROUNDS)
    return UserResponse(message="User updated successfully", data=UserRead.model_validate(user))


@router.delete("/{user_id}", response_model=UserDeletedResponse)
def delete_user(user_id: int, actor: Actor, db: DbSession) -> UserDeletedResponse:
    ensure_can_modify(actor, user_id, "delete")
    deleted_id = users_service.delete_user(db, user_id)
    return UserDeletedResponse(message="User deleted successfully", data=DeletedUser(id=deleted_id))
