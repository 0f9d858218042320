# Usage/cost recorder — best-effort log of orchestrator token spend.
# Created: 2026-02-18
# Updated: 2026-03-04: Rows record whether the shared platform key was used.
#
# Writes one row per chat turn to the Supabase ``gemini_usage`` table through
# PostgREST. Recording is purely observational: every failure is logged and
# swallowed, and scheduled writes are never awaited by the response path.

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

import httpx
from pydantic import BaseModel

from skinnystudio.chat.models import TokenUsage
from skinnystudio.config import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ModelPricing:
    input: float  # USD per 1M input tokens
    output: float  # USD per 1M output tokens


GEMINI_PRICING: dict[str, ModelPricing] = {
    "gemini-2.5-flash": ModelPricing(input=0.075, output=0.30),
    "gemini-2.0-flash": ModelPricing(input=0.10, output=0.40),
    "gemini-2.0-flash-lite": ModelPricing(input=0.075, output=0.30),
    "gemini-1.5-flash": ModelPricing(input=0.075, output=0.30),
    "gemini-1.5-flash-8b": ModelPricing(input=0.0375, output=0.15),
    "gemini-1.5-pro": ModelPricing(input=1.25, output=5.00),
    "gemini-2.0-pro": ModelPricing(input=1.25, output=5.00),
    "gemma-3-27b-it": ModelPricing(input=0.0, output=0.0),
    "gemma-3-12b-it": ModelPricing(input=0.0, output=0.0),
}

DEFAULT_PRICING = ModelPricing(input=0.075, output=0.30)


def get_model_pricing(model: str) -> ModelPricing:
    return GEMINI_PRICING.get(model, DEFAULT_PRICING)


def calculate_cost_cents(model: str, prompt_tokens: int, response_tokens: int) -> float:
    """Estimated cost of one call in US cents."""
    pricing = get_model_pricing(model)
    input_usd = (prompt_tokens / 1_000_000) * pricing.input
    output_usd = (response_tokens / 1_000_000) * pricing.output
    return (input_usd + output_usd) * 100


def format_cost_cents(cents: float) -> str:
    if cents < 0.01:
        return "<$0.01"
    if cents < 1:
        return f"${cents / 100:.4f}"
    return f"${cents / 100:.2f}"


class UsageRecord(BaseModel):
    """One append-only usage row."""

    prompt_tokens: int
    response_tokens: int
    total_tokens: int
    model: str
    estimated_cost_cents: float
    is_platform_key: bool
    whop_user_id: str | None = None
    feature: str = "chat"

    def to_row(self) -> dict:
        """Column names of the usage table."""
        return {
            "whop_user_id": self.whop_user_id,
            "model": self.model,
            "feature": self.feature,
            "input_tokens": self.prompt_tokens,
            "output_tokens": self.response_tokens,
            "total_tokens": self.total_tokens,
            "estimated_cost_cents": self.estimated_cost_cents,
            "is_platform_key": self.is_platform_key,
        }


# Strong references to in-flight writes so they are not garbage collected.
_pending_writes: set[asyncio.Task] = set()


class UsageRecorder:
    def __init__(self, settings: Settings, *, client: httpx.AsyncClient | None = None):
        self.settings = settings
        self._client = client

    @staticmethod
    def build_record(
        usage: TokenUsage | None,
        *,
        model: str,
        is_platform_key: bool,
        whop_user_id: str | None = None,
    ) -> UsageRecord | None:
        if usage is None or usage.is_empty:
            return None
        total = usage.total_tokens or usage.prompt_tokens + usage.response_tokens
        return UsageRecord(
            prompt_tokens=usage.prompt_tokens,
            response_tokens=usage.response_tokens,
            total_tokens=total,
            model=model,
            estimated_cost_cents=calculate_cost_cents(
                model, usage.prompt_tokens, usage.response_tokens
            ),
            is_platform_key=is_platform_key,
            whop_user_id=whop_user_id,
        )

    async def record(self, record: UsageRecord) -> bool:
        """Insert *record*. Returns False on any failure; never raises."""
        if not self.settings.usage_logging_enabled:
            logger.debug("Usage logging not configured; skipping %s", record.model)
            return False

        key = self.settings.supabase_service_key or ""
        headers = {
            "apikey": key,
            "Authorization": f"Bearer {key}",
            "Prefer": "return=minimal",
        }
        try:
            if self._client is not None:
                resp = await self._client.post(
                    self.settings.usage_endpoint, json=record.to_row(), headers=headers
                )
            else:
                async with httpx.AsyncClient(timeout=10.0) as client:
                    resp = await client.post(
                        self.settings.usage_endpoint, json=record.to_row(), headers=headers
                    )
            resp.raise_for_status()
        except Exception as exc:
            logger.warning("Failed to log usage: %s", exc)
            return False

        logger.debug(
            "Logged usage: model=%s tokens=%d cost=%s",
            record.model,
            record.total_tokens,
            format_cost_cents(record.estimated_cost_cents),
        )
        return True

    def schedule(
        self,
        usage: TokenUsage | None,
        *,
        model: str,
        is_platform_key: bool,
        whop_user_id: str | None = None,
    ) -> asyncio.Task | None:
        """Start a detached write. Returns the task, or None if nothing to record."""
        record = self.build_record(
            usage, model=model, is_platform_key=is_platform_key, whop_user_id=whop_user_id
        )
        if record is None:
            return None
        task = asyncio.get_running_loop().create_task(self.record(record))
        _pending_writes.add(task)
        task.add_done_callback(_pending_writes.discard)
        return task
