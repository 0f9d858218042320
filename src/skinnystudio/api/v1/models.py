# Models router — the generation model catalog the orchestrator can target.
# Created: 2026-02-22

from __future__ import annotations

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from skinnystudio.api.v1.schemas.common import ErrorResponse
from skinnystudio.api.v1.schemas.models import ModelListResponse, ModelSummary
from skinnystudio.orchestrator.model_specs import get_model_spec, list_models

router = APIRouter(tags=["Models"])


@router.get("/models", response_model=ModelListResponse)
async def list_generation_models(type: str | None = Query(None, description="Filter by model type")):
    """List generation models, optionally filtered by type."""
    models = [ModelSummary(**entry) for entry in list_models(type)]
    return ModelListResponse(models=models, count=len(models))


@router.get("/models/{model_id}")
async def get_generation_model(model_id: str):
    """Full spec for one model, including parameters and tips."""
    spec = get_model_spec(model_id)
    if spec is None:
        body = ErrorResponse(error=f"Unknown model: {model_id}", code="MODEL_NOT_FOUND")
        return JSONResponse(status_code=404, content=body.model_dump())
    return spec.to_dict()
