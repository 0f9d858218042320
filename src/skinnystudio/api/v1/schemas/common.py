# Common API response schemas.
# Created: 2026-02-20

from __future__ import annotations

from pydantic import BaseModel


class APIResponse(BaseModel):
    """Base response wrapper."""

    model_config = {"from_attributes": True, "populate_by_name": True}


class ErrorResponse(APIResponse):
    """Standard error envelope: ``{error, code?}``."""

    error: str
    code: str | None = None


class StatusResponse(APIResponse):
    """Status string response."""

    status: str = "ok"
