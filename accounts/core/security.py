"""Password hashing and JWT access/refresh token issuance and verification."""

import logging
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import TYPE_CHECKING, Any, NamedTuple

import bcrypt
import jwt

from accounts.core.errors import ComparisonError, HashingError, InvalidOrExpiredToken

if TYPE_CHECKING:
    from accounts.core.config import Settings
    from accounts.models.user import User

logger = logging.getLogger(__name__)

# Bcrypt cost (rounds); overridable via BCRYPT_ROUNDS.
BCRYPT_ROUNDS = 10

# bcrypt only uses the first 72 bytes of the input.
BCRYPT_MAX_BYTES = 72

NAME_MIN_LEN = 2
NAME_MAX_LEN = 100
EMAIL_MAX_LEN = 255
PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = 100


def hash_password(plain_password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    """Hash a plain-text password for storage with a fresh salt."""
    pw_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    try:
        return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=rounds)).decode("utf-8")
    except (ValueError, TypeError) as exc:
        logger.error("Password hashing failed: %s", exc)
        raise HashingError() from exc


def verify_password(plain_password: str, hashed: str) -> bool:
    """
    Verify a plain password against a stored hash.
    Raises ComparisonError when the stored hash is malformed.
    """
    pw_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError, AttributeError) as exc:
        logger.error("Password comparison failed: %s", exc)
        raise ComparisonError() from exc


class TokenKind(str, Enum):
    ACCESS = "access"
    REFRESH = "refresh"


# Claims copied into each token kind. Refresh tokens carry no role so that a
# refresh always re-reads the role from storage.
CLAIMS_BY_KIND: dict[TokenKind, tuple[str, ...]] = {
    TokenKind.ACCESS: ("id", "email", "role"),
    TokenKind.REFRESH: ("id", "email"),
}


class TokenPair(NamedTuple):
    access_token: str
    refresh_token: str


class TokenService:
    """Signs and verifies access and refresh JWTs with an injected secret."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        access_ttl: timedelta = timedelta(minutes=15),
        refresh_ttl: timedelta = timedelta(days=7),
    ) -> None:
        if not secret or not secret.strip():
            raise ValueError("Token signing secret must be non-empty")
        self._secret = secret
        self._algorithm = algorithm
        self._ttl = {TokenKind.ACCESS: access_ttl, TokenKind.REFRESH: refresh_ttl}

    @classmethod
    def from_settings(cls, settings: "Settings") -> "TokenService":
        return cls(
            secret=settings.JWT_SECRET.get_secret_value(),
            algorithm=settings.JWT_ALGORITHM,
            access_ttl=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
            refresh_ttl=timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
        )

    def ttl(self, kind: TokenKind) -> timedelta:
        return self._ttl[kind]

    def sign(self, claims: dict[str, Any], kind: TokenKind = TokenKind.ACCESS) -> str:
        """Create a token of the given kind; claims outside that kind's shape are dropped."""
        now = datetime.now(UTC)
        payload: dict[str, Any] = {
            name: claims[name] for name in CLAIMS_BY_KIND[kind] if name in claims
        }
        payload.update(type=kind.value, iat=now, exp=now + self._ttl[kind])
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str, kind: TokenKind = TokenKind.ACCESS) -> dict[str, Any]:
        """
        Decode and validate a token of the expected kind; return its claims.
        Raises InvalidOrExpiredToken on bad signature, expiry or kind mismatch.
        """
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except jwt.PyJWTError as exc:
            logger.warning("Token verification failed: %s", exc.__class__.__name__)
            raise InvalidOrExpiredToken() from exc
        if payload.get("type") != kind.value:
            logger.warning("Token kind mismatch: expected %s", kind.value)
            raise InvalidOrExpiredToken()
        return payload

    def decode(self, token: str) -> dict[str, Any] | None:
        """Parse claims without verifying the signature. Diagnostics only."""
        try:
            return jwt.decode(token, options={"verify_signature": False})
        except jwt.PyJWTError:
            return None

    def issue_pair(self, user: "User") -> TokenPair:
        claims = {"id": user.id, "email": user.email, "role": user.role}
        return TokenPair(
            access_token=self.sign(claims, TokenKind.ACCESS),
            refresh_token=self.sign(claims, TokenKind.REFRESH),
        )
