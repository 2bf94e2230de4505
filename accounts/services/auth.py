"""Sign-up, sign-in and access-token refresh orchestration."""

import logging

from sqlalchemy.orm import Session

from accounts.core.errors import (
    AlreadyExists,
    Forbidden,
    InvalidOrExpiredToken,
    NotFound,
    Unauthorized,
)
from accounts.core.security import (
    BCRYPT_ROUNDS,
    TokenKind,
    TokenPair,
    TokenService,
    verify_password,
)
from accounts.models import User
from accounts.schemas.auth import SignInRequest, SignUpRequest
from accounts.services.users import create_user, get_user_by_email

logger = logging.getLogger(__name__)


def sign_up(
    db: Session,
    body: SignUpRequest,
    tokens: TokenService,
    rounds: int = BCRYPT_ROUNDS,
) -> tuple[User, TokenPair]:
    """Create the account and issue an access/refresh pair. Duplicate email raises AlreadyExists."""
    try:
        user = create_user(db, body, rounds=rounds)
    except AlreadyExists as exc:
        raise AlreadyExists("Email already exists") from exc
    logger.info("User signed up: %s (%s)", user.email, user.role)
    return user, tokens.issue_pair(user)


def sign_in(db: Session, body: SignInRequest, tokens: TokenService) -> tuple[User, TokenPair]:
    """Check credentials and issue an access/refresh pair."""
    user = get_user_by_email(db, body.email)
    if user is None:
        logger.warning("Sign in attempt with non-existent email: %s", body.email)
        raise NotFound("User not found")
    if not verify_password(body.password, user.password_hash):
        logger.warning("Sign in attempt with wrong password for: %s", body.email)
        raise Unauthorized("Invalid credentials")
    logger.info("User signed in: %s", user.email)
    return user, tokens.issue_pair(user)


def refresh_access_token(
    db: Session,
    refresh_token: str | None,
    tokens: TokenService,
) -> tuple[User, str]:
    """
    Mint a new access token from a refresh token.

    Refresh tokens carry no role, so the user is reloaded by email and the
    new access token reflects the role currently stored.
    """
    if not refresh_token:
        raise Unauthorized("Refresh token not found")
    try:
        claims = tokens.verify(refresh_token, TokenKind.REFRESH)
    except InvalidOrExpiredToken as exc:
        raise Unauthorized("Invalid refresh token") from exc

    email = claims.get("email")
    user = get_user_by_email(db, email) if isinstance(email, str) else None
    if user is None or not user.is_active:
        logger.warning("Refresh rejected for missing or inactive user: %s", email)
        raise Forbidden("User not found or inactive")

    access_token = tokens.sign(
        {"id": user.id, "email": user.email, "role": user.role},
        TokenKind.ACCESS,
    )
    logger.info("Access token refreshed for: %s", user.email)
    return user, access_token
