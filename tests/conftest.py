# Shared fixtures for the orchestrator test suite.
# Created: 2026-02-14

import json

import pytest

from skinnystudio.config import Settings


class FakeChatStream:
    """Stands in for GeminiChatStream: yields canned deltas, then optionally raises."""

    def __init__(self, chunks=(), *, usage=None, error=None, **kwargs):
        self.chunks = list(chunks)
        self.final_usage = usage
        self.error = error
        self.kwargs = kwargs
        self.usage = None

    async def __aiter__(self):
        for chunk in self.chunks:
            yield chunk
        self.usage = self.final_usage
        if self.error is not None:
            raise self.error


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        google_ai_api_key=None,
        generate_url="http://studio.test/api/generate",
        supabase_url=None,
        supabase_service_key=None,
    )


@pytest.fixture
def fake_stream():
    """Factory for FakeChatStream instances that records what it was opened with."""

    def _factory(chunks=(), *, usage=None, error=None):
        opened: list[FakeChatStream] = []

        def open_stream(**kwargs):
            stream = FakeChatStream(chunks, usage=usage, error=error, **kwargs)
            opened.append(stream)
            return stream

        open_stream.opened = opened
        return open_stream

    return _factory


def _decode(frame: str):
    assert frame.startswith("data: ") and frame.endswith("\n\n"), frame
    body = frame[len("data: ") : -2]
    if body == "[DONE]":
        return body
    return json.loads(body)


@pytest.fixture
def decode_frames():
    """Turn a list of raw SSE frames into decoded payloads ("[DONE]" kept as-is)."""

    def _decode_all(frames):
        return [_decode(f) for f in frames]

    return _decode_all
