# Chat turn pipeline — one request from prompt to [DONE].
# Created: 2026-02-14
# Updated: 2026-02-27: Collapsed the per-feature chat route variants into a
#   single pipeline; behaviour now depends only on the request.
# Updated: 2026-03-04: Platform key mode; usage rows record key ownership.
# Updated: 2026-03-11: Storyboard mode emits shotList / entitySuggestion events
#   and, like consultant mode, never dispatches generations.
#
# Frame order: content deltas (with at most one planning notice), then after the
# provider stream ends: skillCreation, storyboard events, generating followed by
# the dispatch outcome, then [DONE]. A provider failure ends the stream after
# its error frame.

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Callable, Mapping, Sequence
from typing import Protocol

from skinnystudio.chat.dispatcher import GenerationDispatcher
from skinnystudio.chat.gemini import GeminiChatStream, resolve_chat_model
from skinnystudio.chat.models import ChatMessage, ChatRequest, GenerationStatus, TokenUsage
from skinnystudio.chat.relay import DONE_FRAME, StreamingRelay, sse_frame
from skinnystudio.chat.usage import UsageRecorder
from skinnystudio.config import Settings
from skinnystudio.orchestrator.directives import (
    parse_entity_suggestion_directive,
    parse_generation_directive,
    parse_shot_list_directive,
    parse_skill_creation_directive,
)
from skinnystudio.orchestrator.skills import format_active_skills
from skinnystudio.orchestrator.system_prompt import (
    MODE_GENERATION,
    MODE_STORYBOARD,
    compose_system_prompt,
    resolve_mode,
)

logger = logging.getLogger(__name__)

USER_ID_HEADER = "x-whop-user-id"


class ChatStream(Protocol):
    """What the pipeline needs from a provider stream."""

    usage: TokenUsage | None

    def __aiter__(self) -> AsyncIterator[str]: ...


StreamFactory = Callable[..., ChatStream]


def resolve_api_key(request_key: str | None, settings: Settings) -> tuple[str | None, bool]:
    """Pick the Gemini key for this turn.

    Returns ``(key, is_platform_key)``. In ``platform_key`` mode the configured
    key wins; otherwise the user's key is preferred and the platform key is
    only a fallback. ``key`` is None when neither is available.
    """
    platform_key = settings.google_ai_api_key or None
    request_key = (request_key or "").strip() or None

    if settings.orchestration_mode == "platform_key" and platform_key:
        return platform_key, True
    if request_key:
        return request_key, False
    if platform_key:
        return platform_key, True
    return None, False


def image_purposes(messages: Sequence[ChatMessage]) -> list[tuple[str, str]]:
    """``(name, purpose)`` for every user image with an assigned purpose, in message order."""
    out: list[tuple[str, str]] = []
    for message in messages:
        if message.role != "user":
            continue
        for attachment in message.attachments:
            if attachment.purpose and attachment.usable:
                out.append((attachment.name, attachment.purpose))
    return out


class ChatTurn:
    """Runs a single chat request.

    Usage::

        turn = ChatTurn(request, headers, settings)
        if turn.api_key is None:
            ...  # 401
        return StreamingResponse(turn.events(), ...)
    """

    def __init__(
        self,
        request: ChatRequest,
        headers: Mapping[str, str] | None,
        settings: Settings,
        *,
        stream_factory: StreamFactory | None = None,
        dispatcher: GenerationDispatcher | None = None,
        recorder: UsageRecorder | None = None,
    ):
        self.request = request
        self.headers = dict(headers or {})
        self.settings = settings
        self.api_key, self.is_platform_key = resolve_api_key(request.api_key, settings)
        self.model = resolve_chat_model(request.model_id, settings.default_chat_model)
        self.mode = resolve_mode(request.selected_generation_model_id)

        self._stream_factory = stream_factory or GeminiChatStream
        self._dispatcher = dispatcher or GenerationDispatcher(
            settings.generate_url, timeout=settings.generate_timeout
        )
        self._recorder = recorder or UsageRecorder(settings)

    @property
    def whop_user_id(self) -> str | None:
        for name, value in self.headers.items():
            if name.lower() == USER_ID_HEADER:
                return value or None
        return None

    def system_prompt(self) -> str:
        skills_context = self.request.skills_context
        if not skills_context and self.request.active_skills:
            skills_context = format_active_skills(self.request.active_skills)
        return compose_system_prompt(
            skills_context=skills_context,
            referenced_skills=self.request.referenced_skills,
            selected_generation_model_id=self.request.selected_generation_model_id,
            image_purposes=image_purposes(self.request.messages),
        )

    def open_stream(self) -> ChatStream:
        return self._stream_factory(
            api_key=self.api_key,
            model=self.model,
            system_instruction=self.system_prompt(),
            messages=self.request.messages,
        )

    async def events(self, stream: ChatStream | None = None) -> AsyncIterator[str]:
        """Yield the SSE frames for this turn, opening the provider stream if not given."""
        logger.info(
            "Chat turn: model=%s mode=%s messages=%d platform_key=%s",
            self.model,
            self.mode,
            len(self.request.messages),
            self.is_platform_key,
        )
        if stream is None:
            stream = self.open_stream()
        relay = StreamingRelay(stream, detect_generation=self.mode == MODE_GENERATION)
        try:
            async for frame in relay.frames():
                yield frame
        finally:
            self._record_usage(getattr(stream, "usage", None))

        if relay.failed:
            return

        async for frame in self._post_stream(relay.text):
            yield frame
        yield DONE_FRAME

    async def _post_stream(self, text: str) -> AsyncIterator[str]:
        skill = parse_skill_creation_directive(text)
        if skill is not None:
            yield sse_frame({"skillCreation": skill.to_dict()})

        if self.mode == MODE_STORYBOARD:
            shot_list = parse_shot_list_directive(text)
            if shot_list is not None:
                yield sse_frame({"shotList": shot_list.to_dict()})
            entities = parse_entity_suggestion_directive(text)
            if entities is not None:
                yield sse_frame({"entitySuggestion": entities.to_dict()})

        directive = parse_generation_directive(text)
        if directive is None:
            return
        if self.mode != MODE_GENERATION:
            logger.info("Ignoring generate block in %s mode", self.mode)
            return

        generating = GenerationStatus(
            status="generating", model=directive.model, params=directive.params
        )
        yield sse_frame(generating.to_event())

        status = await self._dispatcher.dispatch(directive, self.request.messages, self.headers)
        yield sse_frame(status.to_event())

    def _record_usage(self, usage: TokenUsage | None) -> None:
        try:
            self._recorder.schedule(
                usage,
                model=self.model,
                is_platform_key=self.is_platform_key,
                whop_user_id=self.whop_user_id,
            )
        except Exception:
            logger.warning("Could not schedule usage write", exc_info=True)
