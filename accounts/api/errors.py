"""
Exception handlers. Every error response is a JSON object with a "message";
validation failures also carry "errors": [{"field", "message"}].
"""

import logging
import traceback
from collections.abc import Sequence
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from accounts.core.config import get_settings
from accounts.core.errors import AppError, ErrorKind

logger = logging.getLogger(__name__)

# Leading loc segment naming where the bad value came from
_LOCATION_PREFIXES = {"body", "path", "query", "header", "cookie"}


def format_validation_errors(errors: Sequence[dict[str, Any]]) -> list[dict[str, str]]:
    """Flatten pydantic error dicts into [{"field": "a.b", "message": ...}]."""
    formatted = []
    for error in errors:
        raw = list(error.get("loc", ()))
        loc = [str(part) for part in raw]
        if len(loc) > 1 and loc[0] in _LOCATION_PREFIXES:
            # ("body", 1) is a JSON decode offset, not a field
            loc = loc[:1] if len(raw) == 2 and isinstance(raw[1], int) else loc[1:]
        formatted.append({"field": ".".join(loc), "message": error.get("msg", "Invalid value")})
    return formatted


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        message = exc.message
        if exc.kind is ErrorKind.INTERNAL:
            logger.error("%s on %s %s: %s", exc.__class__.__name__, request.method, request.url.path, exc.message)
            message = "Internal Server Error"
        headers = {"WWW-Authenticate": "Bearer"} if exc.kind is ErrorKind.UNAUTHORIZED else None
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": message},
            headers=headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={
                "message": "Validation Failed",
                "errors": format_validation_errors(exc.errors()),
            },
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Log the failure server-side; the client gets a generic 500."""
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        content: dict[str, Any] = {"message": "Internal Server Error"}
        if get_settings().APP_ENV == "dev":
            content["trace"] = traceback.format_exception(exc)
        return JSONResponse(status_code=500, content=content)
