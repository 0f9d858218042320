"""Gemini chat adapter for the orchestrator.

Converts chat history into google-genai ``Content`` objects and exposes the
provider's streamed response as a plain async iterator of text deltas. Token
usage is read from the final chunk's ``usage_metadata`` once the stream is
exhausted.
"""

from __future__ import annotations

import base64
import binascii
import logging
from collections.abc import AsyncIterator, Sequence

from google import genai
from google.genai import types

from skinnystudio.chat.models import ChatMessage, TokenUsage

logger = logging.getLogger(__name__)

SUPPORTED_CHAT_MODELS = (
    "gemini-2.5-flash",
    "gemini-2.0-flash",
    "gemini-2.0-flash-lite",
    "gemma-3-27b-it",
    "gemma-3-12b-it",
)

VISION_CHAT_MODELS = ("gemini-2.5-flash", "gemini-2.0-flash")


def resolve_chat_model(model_id: str | None, default: str = "gemini-2.0-flash-lite") -> str:
    """Return *model_id* if supported, otherwise *default*."""
    if model_id and model_id in SUPPORTED_CHAT_MODELS:
        return model_id
    return default


def supports_vision(model_id: str) -> bool:
    return model_id in VISION_CHAT_MODELS


def _decode_base64(data: str) -> bytes | None:
    if data.startswith("data:") and "," in data:
        data = data.split(",", 1)[1]
    try:
        return base64.b64decode(data, validate=False)
    except (binascii.Error, ValueError):
        logger.warning("Skipping attachment with invalid base64 payload")
        return None


def message_parts(message: ChatMessage, *, vision: bool) -> list[types.Part]:
    parts: list[types.Part] = []
    if message.content:
        parts.append(types.Part(text=message.content))
    if vision:
        for attachment in message.attachments:
            if attachment.type != "image" or not attachment.base64 or not attachment.mime_type:
                continue
            data = _decode_base64(attachment.base64)
            if data:
                parts.append(
                    types.Part(inline_data=types.Blob(data=data, mime_type=attachment.mime_type))
                )
    return parts


def build_contents(messages: Sequence[ChatMessage], *, vision: bool) -> list[types.Content]:
    """Map chat history onto Gemini roles (assistant → model, everything else → user)."""
    contents: list[types.Content] = []
    for message in messages:
        parts = message_parts(message, vision=vision)
        if not parts:
            continue
        role = "model" if message.role == "assistant" else "user"
        contents.append(types.Content(role=role, parts=parts))
    return contents


def usage_from_metadata(metadata) -> TokenUsage | None:
    if metadata is None:
        return None
    prompt = getattr(metadata, "prompt_token_count", None) or 0
    response = getattr(metadata, "candidates_token_count", None) or 0
    total = getattr(metadata, "total_token_count", None) or (prompt + response)
    return TokenUsage(prompt_tokens=prompt, response_tokens=response, total_tokens=total)


class GeminiChatStream:
    """One streamed Gemini completion.

    Iterate to receive text deltas in arrival order; ``usage`` is populated
    from the last chunk that carried usage metadata.
    """

    def __init__(
        self,
        *,
        api_key: str,
        model: str,
        system_instruction: str,
        messages: Sequence[ChatMessage],
        client: genai.Client | None = None,
    ):
        self.model = model
        self.system_instruction = system_instruction
        self.messages = list(messages)
        self.usage: TokenUsage | None = None
        self._client = client or genai.Client(api_key=api_key)

    async def __aiter__(self) -> AsyncIterator[str]:
        contents = build_contents(self.messages, vision=supports_vision(self.model))
        config = types.GenerateContentConfig(system_instruction=self.system_instruction)
        stream = await self._client.aio.models.generate_content_stream(
            model=self.model,
            contents=contents,
            config=config,
        )
        async for chunk in stream:
            usage = usage_from_metadata(getattr(chunk, "usage_metadata", None))
            if usage is not None:
                self.usage = usage
            text = chunk.text
            if text:
                yield text
