# Shared FastAPI dependencies for the API layer.
# Created: 2026-02-20
#
# Collaborators of a chat turn are resolved through dependencies so tests can
# swap them with ``app.dependency_overrides``.

from __future__ import annotations

from fastapi import Depends

from skinnystudio.chat.dispatcher import GenerationDispatcher
from skinnystudio.chat.gemini import GeminiChatStream
from skinnystudio.chat.pipeline import StreamFactory
from skinnystudio.chat.usage import UsageRecorder
from skinnystudio.config import Settings, get_settings


def get_stream_factory() -> StreamFactory:
    """Provider stream used for chat turns."""
    return GeminiChatStream


def get_dispatcher(settings: Settings = Depends(get_settings)) -> GenerationDispatcher:
    return GenerationDispatcher(settings.generate_url, timeout=settings.generate_timeout)


def get_usage_recorder(settings: Settings = Depends(get_settings)) -> UsageRecorder:
    return UsageRecorder(settings)
