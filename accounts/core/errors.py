"""Typed domain errors. The HTTP boundary maps ErrorKind to a status code."""

from enum import Enum


class ErrorKind(str, Enum):
    """Closed set of failure categories surfaced to clients."""

    VALIDATION_FAILED = "validation_failed"
    CONFLICT = "conflict"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    INTERNAL = "internal"


STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION_FAILED: 400,
    ErrorKind.CONFLICT: 409,
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.INTERNAL: 500,
}


class AppError(Exception):
    """Base error carrying a kind and a client-safe message."""

    kind: ErrorKind = ErrorKind.INTERNAL
    default_message: str = "Internal Server Error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return STATUS_BY_KIND[self.kind]


class HashingError(AppError):
    default_message = "Password hashing failed"


class ComparisonError(AppError):
    default_message = "Password comparison failed"


class InvalidOrExpiredToken(AppError):
    kind = ErrorKind.UNAUTHORIZED
    default_message = "Invalid or expired token"


class Unauthorized(AppError):
    kind = ErrorKind.UNAUTHORIZED
    default_message = "Authentication failed"


class Forbidden(AppError):
    kind = ErrorKind.FORBIDDEN
    default_message = "Forbidden"


class NotFound(AppError):
    kind = ErrorKind.NOT_FOUND
    default_message = "User not found"


class AlreadyExists(AppError):
    kind = ErrorKind.CONFLICT
    default_message = "User already exists"
