# Usage router — chat token cost estimates.
# Created: 2026-02-28

from __future__ import annotations

from fastapi import APIRouter

from skinnystudio.api.v1.schemas.chat import EstimateCostRequest, EstimateCostResponse
from skinnystudio.chat.usage import calculate_cost_cents, format_cost_cents

router = APIRouter(tags=["Usage"])


@router.post("/estimate-cost", response_model=EstimateCostResponse, response_model_by_alias=True)
async def estimate_cost(body: EstimateCostRequest):
    """Price a token count against the Gemini pricing table."""
    cents = calculate_cost_cents(body.model, body.prompt_tokens, body.response_tokens)
    return EstimateCostResponse(
        model=body.model, estimated_cost_cents=cents, display=format_cost_cents(cents)
    )
