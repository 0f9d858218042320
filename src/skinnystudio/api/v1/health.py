# Health router — liveness probe.
# Created: 2026-02-20

from __future__ import annotations

from fastapi import APIRouter, Depends

from skinnystudio import __version__
from skinnystudio.api.v1.schemas.health import HealthResponse
from skinnystudio.config import Settings, get_settings

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponse)
async def get_health_status(settings: Settings = Depends(get_settings)):
    """Report that the service is up, with its version."""
    return HealthResponse(version=__version__, usage_logging=settings.usage_logging_enabled)
