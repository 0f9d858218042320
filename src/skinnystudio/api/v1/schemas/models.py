# Generation model catalog schemas.
# Created: 2026-02-22

from __future__ import annotations

from pydantic import BaseModel


class ModelSummary(BaseModel):
    """Short listing used by model pickers."""

    id: str
    name: str
    type: str


class ModelListResponse(BaseModel):
    models: list[ModelSummary]
    count: int
