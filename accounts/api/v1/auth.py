"""Sign-up, sign-in, sign-out and token refresh routes, plus the identity dependency."""

import logging
from functools import lru_cache
from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from accounts.core.config import get_settings
from accounts.core.database import get_db
from accounts.core.errors import InvalidOrExpiredToken, NotFound, Unauthorized
from accounts.core.security import TokenKind, TokenPair, TokenService
from accounts.models import User
from accounts.schemas.auth import (
    AuthData,
    AuthResponse,
    AuthUser,
    CurrentUser,
    MessageResponse,
    RefreshResponse,
    SignInRequest,
    SignUpRequest,
)
from accounts.services import auth as auth_service
from accounts.services.users import get_user_by_id

logger = logging.getLogger(__name__)

router = APIRouter()
security = HTTPBearer(auto_error=False)

ACCESS_COOKIE = "accessToken"
REFRESH_COOKIE = "refreshToken"


@lru_cache
def get_token_service() -> TokenService:
    """Token service built once from settings; the secret is injected here."""
    return TokenService.from_settings(get_settings())


Tokens = Annotated[TokenService, Depends(get_token_service)]
DbSession = Annotated[Session, Depends(get_db)]
BearerCredentials = Annotated[HTTPAuthorizationCredentials | None, Depends(security)]


def _set_cookie(response: Response, key: str, value: str, max_age: int) -> None:
    response.set_cookie(
        key=key,
        value=value,
        max_age=max_age,
        httponly=True,
        secure=get_settings().COOKIE_SECURE,
        samesite="strict",
    )


def set_auth_cookies(response: Response, pair: TokenPair, tokens: TokenService) -> None:
    _set_cookie(
        response,
        ACCESS_COOKIE,
        pair.access_token,
        int(tokens.ttl(TokenKind.ACCESS).total_seconds()),
    )
    _set_cookie(
        response,
        REFRESH_COOKIE,
        pair.refresh_token,
        int(tokens.ttl(TokenKind.REFRESH).total_seconds()),
    )


def clear_auth_cookies(response: Response) -> None:
    for key in (ACCESS_COOKIE, REFRESH_COOKIE):
        response.delete_cookie(
            key,
            httponly=True,
            secure=get_settings().COOKIE_SECURE,
            samesite="strict",
        )


def _request_token(request: Request, credentials: HTTPAuthorizationCredentials | None) -> str | None:
    """Bearer header wins over the access cookie."""
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(ACCESS_COOKIE)


def _auth_response(message: str, user: User, pair: TokenPair) -> AuthResponse:
    return AuthResponse(
        message=message,
        data=AuthData(
            user=AuthUser.model_validate(user),
            access_token=pair.access_token,
            refresh_token=pair.refresh_token,
        ),
    )


@router.post("/sign-up", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def sign_up(body: SignUpRequest, response: Response, db: DbSession, tokens: Tokens) -> AuthResponse:
    """Register a user; tokens are set as cookies and also returned in the body."""
    user, pair = auth_service.sign_up(db, body, tokens, rounds=get_settings().BCRYPT_ROUNDS)
    set_auth_cookies(response, pair, tokens)
    return _auth_response("User signed up successfully", user, pair)


@router.post("/sign-in", response_model=AuthResponse)
@router.post("/signin", response_model=AuthResponse, include_in_schema=False)
def sign_in(body: SignInRequest, response: Response, db: DbSession, tokens: Tokens) -> AuthResponse:
    user, pair = auth_service.sign_in(db, body, tokens)
    set_auth_cookies(response, pair, tokens)
    return _auth_response("User signed in successfully", user, pair)


@router.post("/sign-out", response_model=MessageResponse)
@router.post("/signout", response_model=MessageResponse, include_in_schema=False)
def sign_out(
    request: Request,
    response: Response,
    credentials: BearerCredentials,
    tokens: Tokens,
) -> MessageResponse:
    """Clear both session cookies. Always succeeds, with or without a session."""
    token = _request_token(request, credentials)
    claims = tokens.decode(token) if token else None
    clear_auth_cookies(response)
    logger.info("User signed out: %s", (claims or {}).get("email", "anonymous"))
    return MessageResponse(message="User signed out successfully")


@router.post("/refresh-token", response_model=RefreshResponse)
@router.post("/refresh", response_model=RefreshResponse, include_in_schema=False)
def refresh_token(
    request: Request,
    response: Response,
    db: DbSession,
    tokens: Tokens,
) -> RefreshResponse:
    """Issue a new access token from the refresh cookie (never from a header)."""
    _, access_token = auth_service.refresh_access_token(
        db, request.cookies.get(REFRESH_COOKIE), tokens
    )
    _set_cookie(
        response,
        ACCESS_COOKIE,
        access_token,
        int(tokens.ttl(TokenKind.ACCESS).total_seconds()),
    )
    return RefreshResponse(message="Access token refreshed successfully", access_token=access_token)


def get_current_user(
    request: Request,
    credentials: BearerCredentials,
    db: DbSession,
    tokens: Tokens,
) -> CurrentUser:
    """
    Dependency: resolve the caller from a Bearer header or the access cookie.

    Missing token and bad token are 401; a valid token for a user that no
    longer exists is 404; anything else unexpected is a generic 401. The
    identity is also stored on request.state.user.
    """
    token = _request_token(request, credentials)
    if not token:
        logger.warning("Unauthorized access attempt from %s", request.client.host if request.client else "-")
        raise Unauthorized("Authentication token is missing")

    try:
        claims = tokens.verify(token, TokenKind.ACCESS)
        user = get_user_by_id(db, int(claims["id"]))
    except (InvalidOrExpiredToken, NotFound):
        raise
    except Exception as exc:
        logger.error("Authentication failed: %s", exc.__class__.__name__)
        raise Unauthorized("Authentication failed") from exc

    current = CurrentUser.model_validate(user)
    request.state.user = current
    logger.debug("User authenticated: %s", current.email)
    return current
