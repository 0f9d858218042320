# Health schemas.
# Created: 2026-02-20

from __future__ import annotations

from skinnystudio.api.v1.schemas.common import StatusResponse


class HealthResponse(StatusResponse):
    """Liveness probe payload."""

    version: str
    usage_logging: bool = False
