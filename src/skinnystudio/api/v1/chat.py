# Chat router — one chat turn streamed back as Server-Sent Events.
# Created: 2026-02-20
# Updated: 2026-03-04: Key resolution honours orchestration_mode.
#
# Validation and key errors are plain JSON responses. Once the stream has
# started every failure is reported in-band as an SSE frame.

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import ValidationError

from skinnystudio.api.deps import get_dispatcher, get_stream_factory, get_usage_recorder
from skinnystudio.api.v1.schemas.chat import ChatRequest
from skinnystudio.api.v1.schemas.common import ErrorResponse
from skinnystudio.chat.dispatcher import GenerationDispatcher
from skinnystudio.chat.pipeline import ChatTurn, StreamFactory
from skinnystudio.chat.relay import SSE_HEADERS
from skinnystudio.chat.usage import UsageRecorder
from skinnystudio.config import Settings, get_settings

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Chat"])

INVALID_MESSAGES = "INVALID_MESSAGES"
NO_API_KEY = "NO_API_KEY"


def _error(status_code: int, message: str, code: str | None = None) -> JSONResponse:
    body = ErrorResponse(error=message, code=code).model_dump(exclude_none=True)
    return JSONResponse(status_code=status_code, content=body)


@router.post("/chat")
async def chat(
    request: Request,
    settings: Settings = Depends(get_settings),
    stream_factory: StreamFactory = Depends(get_stream_factory),
    dispatcher: GenerationDispatcher = Depends(get_dispatcher),
    recorder: UsageRecorder = Depends(get_usage_recorder),
):
    """Stream an orchestrator reply, dispatching any generation it asks for."""
    try:
        body = await request.json()
    except ValueError:
        body = None

    messages = body.get("messages") if isinstance(body, dict) else None
    if not isinstance(messages, list) or not messages:
        return _error(400, "Messages are required", INVALID_MESSAGES)

    try:
        chat_request = ChatRequest.model_validate(body)
    except ValidationError as exc:
        logger.info("Rejected chat request: %s", exc.errors()[:3])
        return _error(400, "Messages are malformed", INVALID_MESSAGES)

    try:
        turn = ChatTurn(
            chat_request,
            request.headers,
            settings,
            stream_factory=stream_factory,
            dispatcher=dispatcher,
            recorder=recorder,
        )
        if turn.api_key is None:
            return _error(
                401,
                "API key required. Please add your Google AI API key in Settings.",
                NO_API_KEY,
            )
        stream = turn.open_stream()
    except Exception as exc:
        logger.exception("Chat API error")
        return _error(500, str(exc) or "An error occurred")

    return StreamingResponse(
        turn.events(stream),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )
