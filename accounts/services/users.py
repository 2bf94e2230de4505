"""User repository: CRUD over the users table with email uniqueness."""

import logging
from datetime import UTC, datetime
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from accounts.core.errors import AlreadyExists, NotFound
from accounts.core.security import BCRYPT_ROUNDS, hash_password
from accounts.models import User
from accounts.schemas.auth import SignUpRequest

logger = logging.getLogger(__name__)

# Columns a profile update may touch; anything else in the partial is ignored.
UPDATABLE_FIELDS = ("first_name", "last_name", "email", "role")


def split_full_name(name: str) -> tuple[str, str]:
    """Split "Jane Mary Doe" into ("Jane", "Mary Doe") at the first space."""
    first, _, rest = name.strip().partition(" ")
    return first, rest.strip()


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == email.strip().lower()).first()


def get_user_by_id(db: Session, user_id: int) -> User:
    """Return the user with this id. Raises NotFound if absent."""
    user = db.get(User, user_id)
    if user is None:
        raise NotFound("User not found")
    return user


def list_users(db: Session) -> list[User]:
    users = db.query(User).order_by(User.id).all()
    logger.info("Retrieved %s users", len(users))
    return users


def _commit_unique(db: Session, email: str) -> None:
    """Commit, translating a unique-email violation into AlreadyExists."""
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.warning("Unique constraint rejected email %s", email)
        raise AlreadyExists("User already exists") from exc


def create_user(db: Session, data: SignUpRequest, rounds: int = BCRYPT_ROUNDS) -> User:
    """
    Insert a new user from a sign-up payload.

    The lookup before insert is only a fast path; the unique index on
    users.email is what actually rejects concurrent duplicates.
    """
    email = data.email.lower()
    if get_user_by_email(db, email) is not None:
        raise AlreadyExists("User already exists")

    first_name, last_name = split_full_name(data.name)
    user = User(
        first_name=first_name,
        last_name=last_name,
        email=email,
        password_hash=hash_password(data.password, rounds=rounds),
        role=data.role or "user",
    )
    db.add(user)
    _commit_unique(db, email)
    db.refresh(user)
    logger.info("New user created: %s", email)
    return user


def update_user(
    db: Session,
    user_id: int,
    updates: dict[str, Any],
    rounds: int = BCRYPT_ROUNDS,
) -> User:
    """Apply a partial update; re-hash password if given and touch updated_at."""
    user = get_user_by_id(db, user_id)

    for field in UPDATABLE_FIELDS:
        if updates.get(field) is not None:
            setattr(user, field, updates[field])
    if updates.get("email"):
        user.email = updates["email"].strip().lower()
    if updates.get("password"):
        user.password_hash = hash_password(updates["password"], rounds=rounds)
    user.updated_at = datetime.now(UTC)

    _commit_unique(db, user.email)
    db.refresh(user)
    logger.info("User updated: %s", user_id)
    return user


def delete_user(db: Session, user_id: int) -> int:
    """Delete the user and return its id. Raises NotFound if absent."""
    user = get_user_by_id(db, user_id)
    db.delete(user)
    db.commit()
    logger.info("User deleted: %s", user_id)
    return user_id
