# Streaming relay — LLM text deltas → Server-Sent Events.
# Created: 2026-02-14
# Updated: 2026-03-06: Upstream errors are classified from the SDK's
#   structured status first; message substrings are only a fallback.
# Updated: 2026-03-12: The first complete generate block is parsed once, so a
#   malformed block is not re-parsed (and re-logged) on every later delta.
#
# Every delta becomes exactly one ``data: {"content": ...}`` frame, in arrival
# order. The accumulated buffer is re-scanned after each delta so the UI gets
# a single "planning" notice as soon as a complete ```generate block arrives.

from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterable, AsyncIterator
from typing import Any

from google.genai import errors as genai_errors

from skinnystudio.chat.models import GenerationStatus
from skinnystudio.orchestrator.directives import (
    GENERATE_TAG,
    find_block,
    parse_generation_directive,
)

logger = logging.getLogger(__name__)

DONE_FRAME = "data: [DONE]\n\n"

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}

INVALID_API_KEY = "INVALID_API_KEY"
RATE_LIMITED = "RATE_LIMITED"
MODEL_NOT_FOUND = "MODEL_NOT_FOUND"
NO_VISION_SUPPORT = "NO_VISION_SUPPORT"
UNKNOWN_ERROR = "UNKNOWN_ERROR"

ERROR_MESSAGES = {
    INVALID_API_KEY: "Invalid API key. Please check your Google AI API key in Settings.",
    RATE_LIMITED: "Rate limit exceeded. Please wait a moment and try again.",
    MODEL_NOT_FOUND: "Model not available. Try a different model in Settings.",
    NO_VISION_SUPPORT: "This model does not support images. Try Gemini 2.5 Flash.",
    UNKNOWN_ERROR: "An error occurred",
}

_GENERATE_FENCE = "```" + GENERATE_TAG


def sse_frame(payload: dict[str, Any]) -> str:
    return f"data: {json.dumps(payload, ensure_ascii=False)}\n\n"


def _classify_structured(exc: genai_errors.APIError) -> str | None:
    status = (getattr(exc, "status", None) or "").upper()
    code = getattr(exc, "code", None)
    message = str(exc)

    if "API_KEY_INVALID" in message or code == 401 or status == "UNAUTHENTICATED":
        return INVALID_API_KEY
    if code == 403 or status == "PERMISSION_DENIED":
        return INVALID_API_KEY
    if code == 429 or status == "RESOURCE_EXHAUSTED":
        return RATE_LIMITED
    if code == 404 or status == "NOT_FOUND":
        return MODEL_NOT_FOUND
    return None


def _classify_message(message: str) -> str:
    lowered = message.lower()
    if "api_key_invalid" in lowered or "api key" in lowered:
        return INVALID_API_KEY
    if "quota" in lowered or "rate limit" in lowered or "too many requests" in lowered:
        return RATE_LIMITED
    if "not found" in lowered or "not supported" in lowered:
        return MODEL_NOT_FOUND
    if "image" in lowered or "vision" in lowered:
        return NO_VISION_SUPPORT
    return UNKNOWN_ERROR


def classify_upstream_error(exc: BaseException) -> tuple[str, str]:
    """Map a provider failure to a ``(user message, code)`` pair."""
    code = None
    if isinstance(exc, genai_errors.APIError):
        code = _classify_structured(exc)
    if code is None:
        code = _classify_message(str(exc))
    return ERROR_MESSAGES[code], code


class StreamingRelay:
    """Re-emits provider deltas as SSE frames while watching for directives.

    Attributes after ``frames()`` is exhausted:
        text: full response text, in order.
        failed: True if the provider stream raised.
        error_code: classification of that failure, if any.
    """

    def __init__(self, deltas: AsyncIterable[str], *, detect_generation: bool = True):
        self._deltas = deltas
        self._detect_generation = detect_generation
        self.text = ""
        self.failed = False
        self.error_code: str | None = None
        self.planning_sent = False
        self._block_checked = False

    async def frames(self) -> AsyncIterator[str]:
        try:
            async for delta in self._deltas:
                if not delta:
                    continue
                self.text += delta
                yield sse_frame({"content": delta})

                planning = self._check_planning()
                if planning is not None:
                    yield planning
        except Exception as exc:
            logger.error("Streaming error: %s", exc)
            message, code = classify_upstream_error(exc)
            self.failed = True
            self.error_code = code
            yield sse_frame({"error": message, "code": code})

    def _check_planning(self) -> str | None:
        if not self._detect_generation or self._block_checked:
            return None
        if _GENERATE_FENCE not in self.text or find_block(self.text, GENERATE_TAG) is None:
            return None
        # The first complete block never changes, so it is parsed once.
        self._block_checked = True
        directive = parse_generation_directive(self.text)
        if directive is None:
            return None
        self.planning_sent = True
        status = GenerationStatus(status="planning", model=directive.model, params=directive.params)
        return sse_frame(status.to_event())
