"""Health check payload."""

from typing import Literal

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: Literal["ok"] = "ok"
    service: str = "accounts"
    environment: str
    # None when the check did not reach the database at all
    database: Literal["connected", "disconnected"] | None = None
