# Chat schemas.
# Created: 2026-02-20
# Updated: 2026-02-28: Cost estimate request/response for the settings screen.

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from skinnystudio.chat.models import ChatRequest

__all__ = ["ChatRequest", "EstimateCostRequest", "EstimateCostResponse"]


class EstimateCostRequest(BaseModel):
    """Token counts to price against a chat model."""

    model_config = ConfigDict(populate_by_name=True)

    model: str = "gemini-2.0-flash-lite"
    prompt_tokens: int = Field(default=0, ge=0, alias="promptTokens")
    response_tokens: int = Field(default=0, ge=0, alias="responseTokens")


class EstimateCostResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    model: str
    estimated_cost_cents: float = Field(alias="estimatedCostCents")
    display: str
